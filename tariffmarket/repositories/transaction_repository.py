from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tariffmarket.models import Tariff, TariffTransaction, TariffTransactionType
from tariffmarket.core import logger

class TariffTransactionRepository:
    def __init__(self, db: Session):
        self.db = db

    def create_transaction(
        self,
        tx_type: TariffTransactionType,
        tariff: Tariff,
        charge: float,
        posted_at: datetime,
    ) -> TariffTransaction:
        try:
            transaction = TariffTransaction(
                ttx_type=tx_type,
                ttx_tariff_id=tariff.trf_id,
                ttx_broker=tariff.broker,
                ttx_charge=charge,
                ttx_posted_at=posted_at,
            )
            self.db.add(transaction)
            self.db.flush()
            return transaction
        except SQLAlchemyError as e:
            logger.error(f"No se pudo registrar la transacción {tx_type.value} de la tarifa {tariff.trf_id}: {e}")
            self.db.rollback()
            raise

    def find_transactions_for_tariff(self, tariff_id: int) -> list[TariffTransaction]:
        return (
            self.db.query(TariffTransaction)
            .filter(TariffTransaction.ttx_tariff_id == tariff_id)
            .order_by(TariffTransaction.ttx_id)
            .all()
        )

    def find_all(self) -> list[TariffTransaction]:
        return self.db.query(TariffTransaction).order_by(TariffTransaction.ttx_id).all()
