# tariffmarket/repositories/tariff_repository.py

from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tariffmarket.models import Tariff, TariffSpecification, TariffState, PowerType
from tariffmarket.core import logger


class TariffRepository:
    def __init__(self, db: Session):
        self.db = db

    def add_specification(self, spec: TariffSpecification) -> TariffSpecification:
        # Solo flush: el servicio confirma el comando completo con save()
        try:
            self.db.add(spec)
            self.db.flush()
            return spec
        except SQLAlchemyError as e:
            logger.error(f"No se pudo guardar la especificación {spec.tsp_id}: {e}")
            self.db.rollback()
            raise

    def add_tariff(self, tariff: Tariff) -> Tariff:
        try:
            self.db.add(tariff)
            self.db.flush()
            logger.info(f"Tarifa {tariff.trf_id} registrada en estado {tariff.trf_state.value}")
            return tariff
        except SQLAlchemyError as e:
            logger.error(f"No se pudo guardar la tarifa {tariff.trf_id}: {e}")
            self.db.rollback()
            raise

    def find_specification_by_id(self, spec_id: int) -> TariffSpecification | None:
        return self.db.get(TariffSpecification, spec_id)

    def find_tariff_by_id(self, tariff_id: int) -> Tariff | None:
        return self.db.get(Tariff, tariff_id)

    def find_tariffs_by_state(self, state: TariffState) -> list[Tariff]:
        return (
            self.db.query(Tariff)
            .filter(Tariff.trf_state == state)
            .order_by(Tariff.trf_id)
            .all()
        )

    def find_active_tariffs(self, power_type: PowerType, now: datetime) -> list[Tariff]:
        """Tarifas ofrecidas y no expiradas de un tipo de energía."""
        return (
            self.db.query(Tariff)
            .join(TariffSpecification, Tariff.trf_id == TariffSpecification.tsp_id)
            .filter(
                TariffSpecification.tsp_power_type == power_type,
                Tariff.trf_state == TariffState.OFFERED,
                or_(Tariff.trf_expiration.is_(None), Tariff.trf_expiration > now),
            )
            .order_by(Tariff.trf_id)
            .all()
        )

    def find_all_tariffs(self) -> list[Tariff]:
        return self.db.query(Tariff).order_by(Tariff.trf_id).all()

    def save(self) -> None:
        """Confirma los cambios hechos sobre tarifas ya cargadas."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"No se pudieron guardar los cambios de tarifas: {e}")
            self.db.rollback()
            raise
