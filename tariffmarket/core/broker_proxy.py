# tariffmarket/core/broker_proxy.py

import json
import uuid
from typing import Any, Optional, Protocol

import paho.mqtt.client as mqtt
from pydantic import BaseModel, ValidationError

from tariffmarket.core import logger
from tariffmarket.core.settings import settings


class BrokerMessageListener(Protocol):
    def receive_message(self, command: Any) -> Any: ...


class BrokerProxy(Protocol):
    def send_message(self, broker: str, message: Any) -> None: ...

    def broadcast_messages(self, messages: list) -> None: ...

    def register_broker_tariff_listener(self, listener: BrokerMessageListener) -> None: ...


def to_payload(message: Any) -> Any:
    """Serializa respuestas y especificaciones a estructuras JSON."""
    # Import local: los schemas dependen de core
    from tariffmarket.models import TariffSpecification
    from tariffmarket.schemas import TariffSpecificationResponse

    if isinstance(message, BaseModel):
        return message.model_dump(mode="json")
    if isinstance(message, TariffSpecification):
        return TariffSpecificationResponse.model_validate(message).model_dump(mode="json")
    if isinstance(message, (list, tuple)):
        return [to_payload(m) for m in message]
    return message


class MQTTBrokerProxy:
    """
    Transporte de mensajes con los brokers sobre MQTT.

    Topics (con prefijo configurable):
      <prefix>/brokers/<broker>/tariff   comandos entrantes de cada broker
      <prefix>/brokers/<broker>/status   respuesta individual al broker
      <prefix>/brokers/broadcast         especificaciones publicadas para todos
    """

    def __init__(self, topic_prefix: str = settings.MQTT_TOPIC_PREFIX):
        self.topic_prefix = topic_prefix
        self.client: Optional[mqtt.Client] = None
        self.is_connected = False
        self._listeners: list[BrokerMessageListener] = []

    @property
    def command_topic(self) -> str:
        return f"{self.topic_prefix}/brokers/+/tariff"

    @property
    def broadcast_topic(self) -> str:
        return f"{self.topic_prefix}/brokers/broadcast"

    def status_topic(self, broker: str) -> str:
        return f"{self.topic_prefix}/brokers/{broker}/status"

    def register_broker_tariff_listener(self, listener: BrokerMessageListener) -> None:
        self._listeners.append(listener)

    def start(self):
        try:
            unique_id = f"tariffmarket_{uuid.uuid4().hex[:8]}"
            self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=unique_id, clean_session=True)

            if settings.MQTT_USER:
                self.client.username_pw_set(settings.MQTT_USER, settings.MQTT_PASS)

            self.client.on_connect = self._on_connect
            self.client.on_disconnect = self._on_disconnect
            self.client.on_message = self._on_message

            self.client.connect(host=settings.MQTT_BROKER_HOST, port=settings.MQTT_BROKER_PORT, keepalive=60)
            self.client.loop_start()
            logger.info("🚀 MQTT broker proxy iniciado")

        except (OSError, ValueError) as e:
            logger.error(f"❌ Error iniciando MQTT: {e}")

    def stop(self):
        if self.client:
            self.client.loop_stop()
            self.client.disconnect()

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if not reason_code.is_failure:
            self.is_connected = True
            client.subscribe(self.command_topic, qos=1)
            logger.info(f"✅ Conectado a MQTT. Escuchando en: {self.command_topic}")
        else:
            logger.error(f"❌ Fallo conexión MQTT, código: {reason_code}")

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        self.is_connected = False
        logger.warning(f"⚠️ MQTT Desconectado (Código {reason_code})")

    def _on_message(self, client, userdata, msg):
        self.handle_payload(msg.payload)

    def handle_payload(self, raw: bytes) -> None:
        """
        Decodifica un comando y lo entrega a los listeners. Lo que no sea un
        comando válido se entrega tal cual para que el dispatcher responda
        illegal-operation al broker.
        """
        from tariffmarket.schemas import tariff_command_adapter

        try:
            data = json.loads(raw.decode())
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Payload MQTT ilegible: {e}")
            data = None

        try:
            command = tariff_command_adapter.validate_python(data)
        except ValidationError as e:
            logger.warning(f"Comando de broker inválido: {e.error_count()} errores")
            command = data

        for listener in self._listeners:
            listener.receive_message(command)

    def _publish(self, topic: str, payload: Any) -> None:
        if not self.is_connected or self.client is None:
            logger.warning(f"MQTT desconectado, se descarta mensaje para {topic}")
            return
        self.client.publish(topic, json.dumps(payload), qos=1)

    def send_message(self, broker: str, message: Any) -> None:
        self._publish(self.status_topic(broker), to_payload(message))
        logger.info(f"📤 → {broker}: {getattr(message, 'status', message)}")

    def broadcast_messages(self, messages: list) -> None:
        self._publish(self.broadcast_topic, to_payload(list(messages)))
        logger.info(f"📡 Broadcast de {len(messages)} especificaciones")
