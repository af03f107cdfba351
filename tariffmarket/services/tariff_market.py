# tariffmarket/services/tariff_market.py

import threading
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from tariffmarket.core import MarketConfig, logger
from tariffmarket.core.broker_proxy import BrokerProxy
from tariffmarket.core.clock import CompetitionControl, TimeService
from tariffmarket.models import Customer, PowerType, Tariff, TariffSubscription
from tariffmarket.repositories import (
    CustomerRepository,
    TariffRepository,
    TariffSubscriptionRepository,
    TariffTransactionRepository,
)
from tariffmarket.schemas import TariffPublish, TariffStatus
from .accounting_service import Accounting, LedgerAccountingService
from .message_dispatcher import MessageDispatcher
from .publication_scheduler import NewTariffListener, PublicationScheduler
from .subscription_service import DefaultTariffRegistry, SubscriptionService
from .tariff_lifecycle_service import TariffLifecycleService
from .tariff_validation_service import FeeAccounting


class TariffMarket:
    """
    Fachada del mercado para una corrida de simulación.

    Todas las operaciones pasan por un solo lock: comandos, ticks y
    suscripciones nunca se intercalan aunque el host use varios hilos.
    """

    def __init__(
        self,
        config: MarketConfig,
        tariff_repo: TariffRepository,
        customer_repo: CustomerRepository,
        dispatcher: MessageDispatcher,
        scheduler: PublicationScheduler,
        subscriptions: SubscriptionService,
    ):
        self.config = config
        self.tariff_repo = tariff_repo
        self.customer_repo = customer_repo
        self.dispatcher = dispatcher
        self.scheduler = scheduler
        self.subscriptions = subscriptions
        self._lock = threading.RLock()

    # ----------------- Configuración -----------------

    @property
    def publication_fee(self) -> float:
        return self.config.publication_fee

    @property
    def revocation_fee(self) -> float:
        return self.config.revocation_fee

    @property
    def publication_interval(self) -> int:
        return self.scheduler.publication_interval

    @property
    def simulation_phase(self) -> int:
        return self.config.simulation_phase

    @property
    def registrations(self) -> list[NewTariffListener]:
        return self.scheduler.registrations

    # ----------------- API de brokers -----------------

    def receive_message(self, command: Any) -> TariffStatus:
        with self._lock:
            return self.dispatcher.receive_message(command)

    # ----------------- Reloj -----------------

    def activate(self, time: datetime, phase: int) -> None:
        with self._lock:
            self.scheduler.activate(time, phase)

    def register_new_tariff_listener(self, listener: NewTariffListener) -> None:
        self.scheduler.register_new_tariff_listener(listener)

    # ----------------- API de clientes -----------------

    def find_tariff(self, tariff_id: int) -> Tariff | None:
        with self._lock:
            return self.tariff_repo.find_tariff_by_id(tariff_id)

    def find_customer(self, cus_id: int) -> Customer | None:
        with self._lock:
            return self.customer_repo.get_customer_by_id(cus_id)

    def register_customer(self, customer: Customer) -> Customer | None:
        with self._lock:
            if self.customer_repo.get_customer_by_name(customer.cus_name) is not None:
                logger.warning(f"Cliente {customer.cus_name} ya registrado")
                return None
            return self.customer_repo.create_customer(customer)

    def find_subscription(self, tsu_id: int) -> TariffSubscription | None:
        with self._lock:
            return self.subscriptions.subscription_repo.find_subscription_by_id(tsu_id)

    def subscribe_to_tariff(self, tariff: Tariff, customer: Customer, count: int) -> TariffSubscription | None:
        with self._lock:
            return self.subscriptions.subscribe_to_tariff(tariff, customer, count)

    def unsubscribe(self, subscription: TariffSubscription, count: int) -> TariffSubscription:
        with self._lock:
            return self.subscriptions.unsubscribe(subscription, count)

    def get_revoked_subscription_list(self, customer: Customer) -> list[TariffSubscription]:
        with self._lock:
            return self.subscriptions.get_revoked_subscription_list(customer)

    def get_active_subscription_list(self, customer: Customer) -> list[TariffSubscription]:
        with self._lock:
            return self.subscriptions.get_active_subscription_list(customer)

    def get_active_tariff_list(self, power_type: PowerType) -> list[Tariff]:
        with self._lock:
            return self.subscriptions.get_active_tariff_list(power_type)

    def get_default_tariff(self, power_type: PowerType) -> Tariff | None:
        with self._lock:
            return self.subscriptions.get_default_tariff(power_type)

    def set_default_tariff(self, spec_data: TariffPublish) -> bool:
        with self._lock:
            return self.subscriptions.set_default_tariff(spec_data)


def build_tariff_market(
    db: Session,
    time_service: TimeService,
    broker_proxy: BrokerProxy,
    competition_control: CompetitionControl,
    config: MarketConfig,
    accounting: Accounting | None = None,
) -> TariffMarket:
    """
    Raíz de composición: arma repositorios, servicios, dispatcher y
    scheduler, y los registra en el transporte y en la fase del reloj.
    """
    tariff_repo = TariffRepository(db)
    subscription_repo = TariffSubscriptionRepository(db)
    if accounting is None:
        accounting = LedgerAccountingService(TariffTransactionRepository(db), time_service)

    fees = FeeAccounting(accounting, config.publication_fee, config.revocation_fee)
    lifecycle = TariffLifecycleService(tariff_repo, subscription_repo, fees, time_service)
    subscriptions = SubscriptionService(tariff_repo, subscription_repo, time_service, DefaultTariffRegistry())
    dispatcher = MessageDispatcher(lifecycle, broker_proxy)
    scheduler = PublicationScheduler(lifecycle, broker_proxy, config.publication_interval)

    market = TariffMarket(config, tariff_repo, CustomerRepository(db), dispatcher, scheduler, subscriptions)
    broker_proxy.register_broker_tariff_listener(market)
    competition_control.register_timeslot_phase(market, config.simulation_phase)
    logger.info(
        f"Mercado de tarifas listo: fee publicación {config.publication_fee}, "
        f"fee revocación {config.revocation_fee}, intervalo {scheduler.publication_interval}h, "
        f"fase {config.simulation_phase}"
    )
    return market
