# tariffmarket/services/accounting_service.py

from typing import Protocol

from tariffmarket.core import logger
from tariffmarket.core.clock import TimeService
from tariffmarket.models import Tariff, TariffTransaction, TariffTransactionType
from tariffmarket.repositories import TariffTransactionRepository


class Accounting(Protocol):
    def add_tariff_transaction(
        self, tx_type: TariffTransactionType, tariff: Tariff, charge: float
    ) -> TariffTransaction | None: ...


class LedgerAccountingService:
    """Registra en el libro contable las comisiones del mercado de tarifas."""

    def __init__(self, transaction_repo: TariffTransactionRepository, time_service: TimeService):
        self.transaction_repo = transaction_repo
        self.time_service = time_service

    def add_tariff_transaction(
        self, tx_type: TariffTransactionType, tariff: Tariff, charge: float
    ) -> TariffTransaction:
        transaction = self.transaction_repo.create_transaction(
            tx_type, tariff, charge, self.time_service.current_time
        )
        logger.info(f"💰 Transacción {tx_type.value} de {charge} para la tarifa {tariff.trf_id} ({tariff.broker})")
        return transaction
