# tariffmarket/services/subscription_service.py

from sqlalchemy.exc import SQLAlchemyError

from tariffmarket.core import logger
from tariffmarket.core.clock import TimeService
from tariffmarket.models import Customer, PowerType, Tariff, TariffState, TariffSubscription
from tariffmarket.repositories import TariffRepository, TariffSubscriptionRepository
from tariffmarket.schemas import TariffPublish
from .tariff_lifecycle_service import build_specification


class DefaultTariffRegistry:
    """Tarifa por defecto de cada tipo de energía; vive lo que dura la simulación."""

    def __init__(self):
        self._default_ids: dict[PowerType, int] = {}

    def get(self, power_type: PowerType) -> int | None:
        return self._default_ids.get(power_type)

    def put(self, power_type: PowerType, tariff_id: int) -> None:
        self._default_ids[power_type] = tariff_id


class SubscriptionService:
    def __init__(
        self,
        tariff_repo: TariffRepository,
        subscription_repo: TariffSubscriptionRepository,
        time_service: TimeService,
        default_registry: DefaultTariffRegistry,
    ):
        self.tariff_repo = tariff_repo
        self.subscription_repo = subscription_repo
        self.time_service = time_service
        self.default_registry = default_registry

    def subscribe_to_tariff(self, tariff: Tariff, customer: Customer, count: int) -> TariffSubscription | None:
        """
        Suscribe un bloque de clientes a la tarifa si no ha expirado.
        Para darse de baja hay que usar unsubscribe sobre la suscripción.
        """
        if tariff.is_expired(self.time_service.current_time):
            logger.warning(f"Cliente {customer.cus_name} intentó suscribirse a la tarifa expirada {tariff.trf_id}")
            return None
        if count <= 0:
            logger.warning(f"Suscripción con cantidad inválida {count} para la tarifa {tariff.trf_id}")
            return None

        subscription = self.subscription_repo.get_subscription(customer, tariff)
        subscription.subscribe(count)
        self.subscription_repo.save()
        logger.info(
            f"Cliente {customer.cus_name}: +{count} en tarifa {tariff.trf_id} "
            f"(total {subscription.customers_committed})"
        )
        return subscription

    def unsubscribe(self, subscription: TariffSubscription, count: int) -> TariffSubscription:
        if count > subscription.customers_committed:
            logger.warning(
                f"Baja de {count} clientes en la suscripción {subscription.tsu_id} "
                f"con solo {subscription.customers_committed} comprometidos"
            )
        removed = subscription.unsubscribe(max(count, 0))
        self.subscription_repo.save()
        logger.info(f"Suscripción {subscription.tsu_id}: -{removed} (quedan {subscription.customers_committed})")
        return subscription

    def get_revoked_subscription_list(self, customer: Customer) -> list[TariffSubscription]:
        """Suscripciones a tarifas revocadas que todavía tienen clientes comprometidos."""
        return [
            sub for sub in self.subscription_repo.find_subscriptions_for_customer(customer)
            if sub.tariff.is_revoked() and sub.customers_committed > 0
        ]

    def get_active_subscription_list(self, customer: Customer) -> list[TariffSubscription]:
        return self.subscription_repo.find_active_subscriptions_for_customer(customer)

    def get_active_tariff_list(self, power_type: PowerType) -> list[Tariff]:
        return self.tariff_repo.find_active_tariffs(power_type, self.time_service.current_time)

    def get_default_tariff(self, power_type: PowerType) -> Tariff | None:
        default_id = self.default_registry.get(power_type)
        if default_id is None:
            return None
        return self.tariff_repo.find_tariff_by_id(default_id)

    def set_default_tariff(self, spec_data: TariffPublish) -> bool:
        """La tarifa por defecto se ofrece de inmediato, sin esperar la publicación."""
        if self.tariff_repo.find_specification_by_id(spec_data.spec_id) is not None:
            logger.error(f"No se puede usar la especificación {spec_data.spec_id} como default: ya existe")
            return False

        try:
            spec = self.tariff_repo.add_specification(build_specification(spec_data))
            tariff = self.tariff_repo.add_tariff(Tariff.from_specification(spec, TariffState.OFFERED))
            self.tariff_repo.save()
        except SQLAlchemyError as e:
            logger.error(f"No se pudo registrar la tarifa por defecto {spec_data.spec_id}: {e}")
            return False

        self.default_registry.put(tariff.power_type, tariff.trf_id)
        logger.info(f"Tarifa por defecto para {tariff.power_type.value}: {tariff.trf_id}")
        return True
