# tariffmarket/services/message_dispatcher.py

from collections.abc import Mapping
from typing import Any

from tariffmarket.core import logger, log_critical_error
from tariffmarket.core.broker_proxy import BrokerProxy
from tariffmarket.schemas import TariffStatus, TariffStatusCode
from .tariff_lifecycle_service import TariffLifecycleService


def _best_known(command: Any, *fields: str) -> Any:
    """Primer campo disponible del comando, aunque no sea un comando válido."""
    for name in fields:
        if isinstance(command, Mapping):
            value = command.get(name)
        else:
            value = getattr(command, name, None)
        if value is not None:
            return value
    return None


class MessageDispatcher:
    """
    Recibe los comandos de los brokers y responde sincrónicamente, uno a la
    vez. Cada comando produce exactamente una respuesta.
    """

    def __init__(self, lifecycle: TariffLifecycleService, broker_proxy: BrokerProxy):
        self.lifecycle = lifecycle
        self.broker_proxy = broker_proxy

    def receive_message(self, command: Any) -> TariffStatus:
        try:
            result = self._dispatch(command)
        except Exception as e:
            log_critical_error(f"Error procesando comando de tarifa {command!r}: {e}")
            self.lifecycle.rollback()
            result = self._illegal_operation(command, tariff_id=_best_known(command, "tariff_id", "spec_id") or 0)
            result = result.with_message("internal error")

        if result.broker is None:
            logger.warning(f"Comando sin broker conocido, no se envía respuesta: {result.status.value}")
        else:
            self.broker_proxy.send_message(result.broker, result)
        return result

    def _dispatch(self, command: Any) -> TariffStatus:
        match getattr(command, "kind", None):
            case "publish":
                return self.lifecycle.publish(command)
            case "expire":
                return self.lifecycle.expire(command)
            case "revoke":
                return self.lifecycle.revoke(command)
            case "variable_rate_update":
                return self.lifecycle.update_variable_rate(command)
            case _:
                logger.error(f"Comando de tarifa no reconocido: {type(command).__name__}")
                return self._illegal_operation(command)

    @staticmethod
    def _illegal_operation(command: Any, tariff_id: Any = 0) -> TariffStatus:
        broker = _best_known(command, "broker")
        msg_id = _best_known(command, "msg_id", "spec_id")
        return TariffStatus(
            broker=str(broker) if broker is not None else None,
            tariff_id=tariff_id if isinstance(tariff_id, int) else 0,
            original_msg_id=msg_id if isinstance(msg_id, int) else None,
            status=TariffStatusCode.ILLEGAL_OPERATION,
        )
