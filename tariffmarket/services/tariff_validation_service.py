# tariffmarket/services/tariff_validation_service.py

from dataclasses import dataclass

from tariffmarket.core import logger
from tariffmarket.models import Tariff, TariffTransactionType
from tariffmarket.repositories import TariffRepository
from tariffmarket.schemas import TariffExpire, TariffRevoke, VariableRateUpdate, TariffStatus, TariffStatusCode
from .accounting_service import Accounting

TariffUpdate = TariffExpire | TariffRevoke | VariableRateUpdate


@dataclass(frozen=True)
class TariffFound:
    tariff: Tariff


@dataclass(frozen=True)
class TariffRejected:
    status: TariffStatus


ValidationResult = TariffFound | TariffRejected


def update_status(update: TariffUpdate, code: TariffStatusCode) -> TariffStatus:
    return TariffStatus(
        broker=update.broker,
        tariff_id=update.tariff_id,
        original_msg_id=update.msg_id,
        status=code,
    )


def validate_update(tariff_repo: TariffRepository, update: TariffUpdate) -> ValidationResult:
    """Toda actualización exige que la tarifa exista."""
    tariff = tariff_repo.find_tariff_by_id(update.tariff_id)
    if tariff is None:
        logger.error(f"update - no such tariff {update.tariff_id}, broker {update.broker}")
        return TariffRejected(update_status(update, TariffStatusCode.NO_SUCH_TARIFF))
    return TariffFound(tariff)


class FeeAccounting:
    def __init__(self, accounting: Accounting, publication_fee: float, revocation_fee: float):
        self.accounting = accounting
        self.publication_fee = publication_fee
        self.revocation_fee = revocation_fee

    def charge_publication(self, tariff: Tariff):
        return self.accounting.add_tariff_transaction(TariffTransactionType.PUBLISH, tariff, self.publication_fee)

    def charge_revocation(self, tariff: Tariff):
        return self.accounting.add_tariff_transaction(TariffTransactionType.REVOKE, tariff, self.revocation_fee)
