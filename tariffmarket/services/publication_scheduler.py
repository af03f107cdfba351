# tariffmarket/services/publication_scheduler.py

from datetime import datetime
from typing import Protocol

from tariffmarket.core import logger, log_critical_error
from tariffmarket.core.broker_proxy import BrokerProxy
from tariffmarket.core.clock import TimeService
from tariffmarket.core.settings import clamp_publication_interval
from tariffmarket.models import Tariff
from .tariff_lifecycle_service import TariffLifecycleService


class NewTariffListener(Protocol):
    def publish_new_tariffs(self, tariffs: list[Tariff]) -> None: ...


class PublicationScheduler:
    """
    Libera las tarifas PENDING en fronteras alineadas al reloj de la
    simulación: cuando el tiempo desde epoch es múltiplo exacto del intervalo.
    """

    def __init__(self, lifecycle: TariffLifecycleService, broker_proxy: BrokerProxy, publication_interval: int):
        self.lifecycle = lifecycle
        self.broker_proxy = broker_proxy
        self._publication_interval = clamp_publication_interval(publication_interval)
        self._registrations: list[NewTariffListener] = []

    @property
    def publication_interval(self) -> int:
        return self._publication_interval

    @publication_interval.setter
    def publication_interval(self, hours: int) -> None:
        self._publication_interval = clamp_publication_interval(hours)

    @property
    def registrations(self) -> list[NewTariffListener]:
        return list(self._registrations)

    def register_new_tariff_listener(self, listener: NewTariffListener) -> None:
        self._registrations.append(listener)

    def is_publication_time(self, time: datetime) -> bool:
        return TimeService.millis(time) % (self._publication_interval * TimeService.HOUR) == 0

    def activate(self, time: datetime, phase: int) -> None:
        try:
            if self.is_publication_time(time):
                self.publish_tariffs()
        except Exception as e:
            log_critical_error(f"Error publicando tarifas en {time} (fase {phase}): {e}")
            self.lifecycle.rollback()

    def publish_tariffs(self) -> list[Tariff]:
        published = self.lifecycle.offer_pending()
        logger.info(f"publishing {len(published)} new tariffs")

        specs = []
        for tariff in published:
            spec = tariff.specification
            specs.append(spec)
            logger.info(f"publishing spec {spec.tsp_id} broker: {spec.tsp_broker}, exp: {spec.tsp_expiration}")

        for listener in self._registrations:
            try:
                listener.publish_new_tariffs(list(published))
            except Exception as e:
                log_critical_error(f"Listener {type(listener).__name__} falló al recibir tarifas: {e}")

        self.broker_proxy.broadcast_messages(specs)
        return published
