# tariffmarket/services/tariff_lifecycle_service.py

from tariffmarket.core import logger
from tariffmarket.core.clock import TimeService
from tariffmarket.models import Rate, Tariff, TariffSpecification, TariffState
from tariffmarket.repositories import TariffRepository, TariffSubscriptionRepository
from tariffmarket.schemas import (
    TariffPublish,
    TariffExpire,
    TariffRevoke,
    VariableRateUpdate,
    TariffStatus,
    TariffStatusCode,
)
from .tariff_validation_service import (
    FeeAccounting,
    TariffFound,
    TariffRejected,
    update_status,
    validate_update,
)


def build_specification(data: TariffPublish) -> TariffSpecification:
    return TariffSpecification(
        tsp_id=data.spec_id,
        tsp_broker=data.broker,
        tsp_power_type=data.power_type,
        tsp_expiration=data.expiration,
        rates=[
            Rate(
                rte_id=rate.rate_id,
                rte_fixed=rate.fixed,
                rte_value=rate.value,
                rte_min_value=rate.min_value,
                rte_max_value=rate.max_value,
                rte_expected_mean=rate.expected_mean,
            )
            for rate in data.rates
        ],
    )


class TariffLifecycleService:
    """
    Dueño de las transiciones PENDING → OFFERED → KILLED.

    Cada método de comando devuelve exactamente un TariffStatus y confirma
    con un único commit; un fallo a mitad de comando se deshace entero.
    """

    def __init__(
        self,
        tariff_repo: TariffRepository,
        subscription_repo: TariffSubscriptionRepository,
        fees: FeeAccounting,
        time_service: TimeService,
    ):
        self.tariff_repo = tariff_repo
        self.subscription_repo = subscription_repo
        self.fees = fees
        self.time_service = time_service

    def publish(self, command: TariffPublish) -> TariffStatus:
        status = TariffStatus(
            broker=command.broker,
            tariff_id=command.spec_id,
            original_msg_id=command.spec_id,
            status=TariffStatusCode.SUCCESS,
        )

        if self.tariff_repo.find_specification_by_id(command.spec_id) is not None:
            logger.warning(f"Especificación {command.spec_id} duplicada, broker {command.broker}")
            return status.model_copy(update={"status": TariffStatusCode.INVALID_UPDATE}).with_message(
                "duplicate tariff specification"
            )

        if command.expiration is not None and command.expiration < self.time_service.current_time:
            logger.warning(f"Especificación {command.spec_id} publicada ya expirada: {command.expiration}")
            return status.model_copy(update={"status": TariffStatusCode.INVALID_UPDATE}).with_message(
                "expiration in the past"
            )

        spec = build_specification(command)
        self.tariff_repo.add_specification(spec)
        tariff = self.tariff_repo.add_tariff(Tariff.from_specification(spec, TariffState.PENDING))
        logger.info(f"new tariff {spec.tsp_id}")
        self.fees.charge_publication(tariff)
        self.tariff_repo.save()
        return status

    def expire(self, command: TariffExpire) -> TariffStatus:
        match validate_update(self.tariff_repo, command):
            case TariffRejected(status=status):
                return status
            case TariffFound(tariff=tariff):
                pass

        new_expiration = command.new_expiration
        if new_expiration is not None and new_expiration < self.time_service.current_time:
            logger.warning(f"attempt to set expiration for tariff {tariff.trf_id} in the past: {new_expiration}")
            return update_status(command, TariffStatusCode.INVALID_UPDATE).with_message(
                "attempt to set expiration in the past"
            )

        tariff.trf_expiration = new_expiration
        self.tariff_repo.save()
        logger.info(f"Tariff {tariff.trf_id} now expires at {new_expiration}")
        return update_status(command, TariffStatusCode.SUCCESS)

    def revoke(self, command: TariffRevoke) -> TariffStatus:
        match validate_update(self.tariff_repo, command):
            case TariffRejected(status=status):
                return status
            case TariffFound(tariff=tariff):
                pass

        tariff.trf_state = TariffState.KILLED
        logger.info(f"Revoke tariff {tariff.trf_id}")

        # La baja real de los clientes la hace el lado del cliente,
        # consultando get_revoked_subscription_list.
        committed = [
            sub for sub in self.subscription_repo.find_subscriptions_for_tariff(tariff)
            if sub.customers_committed > 0
        ]
        if committed:
            logger.info(f"Revoked tariff has {len(committed)} active subscriptions")
            self.fees.charge_revocation(tariff)
        self.tariff_repo.save()
        return update_status(command, TariffStatusCode.SUCCESS)

    def update_variable_rate(self, command: VariableRateUpdate) -> TariffStatus:
        match validate_update(self.tariff_repo, command):
            case TariffRejected(status=status):
                return status
            case TariffFound(tariff=tariff):
                pass

        charge = command.hourly_charge
        if not tariff.add_hourly_charge(command.rate_id, charge.at_time, charge.value):
            logger.warning(f"Cargo horario rechazado: tarifa {tariff.trf_id}, rate {command.rate_id}, valor {charge.value}")
            return update_status(command, TariffStatusCode.INVALID_UPDATE).with_message(
                "update: could not add hourly charge"
            )

        self.tariff_repo.save()
        return update_status(command, TariffStatusCode.SUCCESS)

    def offer_pending(self) -> list[Tariff]:
        """Pasa todas las tarifas PENDING a OFFERED y las devuelve."""
        pending = self.tariff_repo.find_tariffs_by_state(TariffState.PENDING)
        for tariff in pending:
            tariff.trf_state = TariffState.OFFERED
        if pending:
            self.tariff_repo.save()
        return pending

    def rollback(self) -> None:
        self.tariff_repo.db.rollback()
