# tariffmarket/models/tariff_specification.py

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from tariffmarket.database import Base
from .enums import PowerType


class TariffSpecification(Base):
    """Términos de una oferta. Se crea con el comando del broker y no se modifica."""
    __tablename__ = "tbtariff_specs"

    tsp_id =            Column(Integer, primary_key=True, autoincrement=False)
    tsp_broker =        Column(String(100), nullable=False, index=True)
    tsp_power_type =    Column(Enum(PowerType), nullable=False, index=True)
    tsp_expiration =    Column(DateTime, nullable=True)

    rates = relationship("Rate", back_populates="specification", cascade="all, delete-orphan", order_by="Rate.rte_id")

    def find_rate(self, rate_id: int):
        for rate in self.rates:
            if rate.rte_id == rate_id:
                return rate
        return None


class Rate(Base):
    __tablename__ = "tbrates"
    __table_args__ = (UniqueConstraint("rte_tariff_spec_id", "rte_id", name="uq_rate_spec_rate"),)

    rte_pk =                Column(Integer, primary_key=True, index=True)
    # Id elegido por el broker; solo es único dentro de su especificación
    rte_id =                Column(Integer, nullable=False)
    rte_tariff_spec_id =    Column(Integer, ForeignKey("tbtariff_specs.tsp_id", ondelete="CASCADE"), nullable=False, index=True)
    rte_fixed =             Column(Boolean, nullable=False, default=True)
    rte_value =             Column(Float, nullable=False, default=0.0)
    rte_min_value =         Column(Float, nullable=True)
    rte_max_value =         Column(Float, nullable=True)
    rte_expected_mean =     Column(Float, nullable=False, default=0.0)

    specification = relationship("TariffSpecification", back_populates="rates")

    def accepts(self, value: float) -> bool:
        """Una tarifa variable solo acepta cargos dentro de sus límites."""
        if self.rte_fixed:
            return False
        if self.rte_min_value is not None and value < self.rte_min_value:
            return False
        if self.rte_max_value is not None and value > self.rte_max_value:
            return False
        return True
