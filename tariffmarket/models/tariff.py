# tariffmarket/models/tariff.py

from datetime import datetime

from sqlalchemy import Column, Integer, Float, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship

from tariffmarket.database import Base
from .enums import TariffState
from .tariff_specification import TariffSpecification


class Tariff(Base):
    """
    Instancia viva de una TariffSpecification. Comparte el id con su
    especificación; el estado y la expiración son lo único que cambia.
    """
    __tablename__ = "tbtariffs"

    trf_id =            Column(Integer, ForeignKey("tbtariff_specs.tsp_id"), primary_key=True, autoincrement=False)
    trf_state =         Column(Enum(TariffState), nullable=False, default=TariffState.PENDING, index=True)
    trf_expiration =    Column(DateTime, nullable=True)

    specification = relationship("TariffSpecification", lazy="joined")
    hourly_charges = relationship(
        "HourlyCharge",
        back_populates="tariff",
        cascade="all, delete-orphan",
        order_by="HourlyCharge.hch_at_time",
    )

    @classmethod
    def from_specification(cls, spec: TariffSpecification, state: TariffState = TariffState.PENDING) -> "Tariff":
        return cls(
            trf_id=spec.tsp_id,
            specification=spec,
            trf_state=state,
            trf_expiration=spec.tsp_expiration,
        )

    @property
    def id(self) -> int:
        return self.trf_id

    @property
    def state(self) -> TariffState:
        return self.trf_state

    @property
    def broker(self) -> str:
        return self.specification.tsp_broker

    @property
    def power_type(self):
        return self.specification.tsp_power_type

    @property
    def expiration(self) -> datetime | None:
        return self.trf_expiration

    def is_expired(self, now: datetime) -> bool:
        return self.trf_expiration is not None and self.trf_expiration <= now

    def is_revoked(self) -> bool:
        return self.trf_state == TariffState.KILLED

    def charges_for_rate(self, rate_id: int) -> list["HourlyCharge"]:
        return [charge for charge in self.hourly_charges if charge.hch_rate_id == rate_id]

    def add_hourly_charge(self, rate_id: int, at_time: datetime, value: float) -> bool:
        """
        Agrega o reemplaza el cargo horario de una tarifa variable.
        Devuelve False sin tocar nada si la tarifa no lo admite.
        """
        rate = self.specification.find_rate(rate_id)
        if rate is None or not rate.accepts(value):
            return False

        for charge in self.charges_for_rate(rate_id):
            if charge.hch_at_time == at_time:
                charge.hch_value = value
                return True

        self.hourly_charges.append(HourlyCharge(hch_rate_id=rate_id, hch_at_time=at_time, hch_value=value))
        return True

    def usage_charge(self, rate_id: int, when: datetime) -> float | None:
        rate = self.specification.find_rate(rate_id)
        if rate is None:
            return None
        if rate.rte_fixed:
            return rate.rte_value

        # Último cargo publicado que ya esté vigente
        current = None
        for charge in self.charges_for_rate(rate_id):
            if charge.hch_at_time <= when:
                current = charge
        return current.hch_value if current else rate.rte_expected_mean


class HourlyCharge(Base):
    __tablename__ = "tbhourly_charges"

    hch_id =        Column(Integer, primary_key=True, index=True)
    hch_tariff_id = Column(Integer, ForeignKey("tbtariffs.trf_id", ondelete="CASCADE"), nullable=False, index=True)
    hch_rate_id =   Column(Integer, nullable=False)    # rte_id de la especificación de la tarifa
    hch_at_time =   Column(DateTime, nullable=False)
    hch_value =     Column(Float, nullable=False)

    tariff = relationship("Tariff", back_populates="hourly_charges")
