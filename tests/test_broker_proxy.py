import json

from tariffmarket.core.broker_proxy import MQTTBrokerProxy, to_payload
from tariffmarket.schemas import TariffRevoke, TariffStatus, TariffStatusCode
from tests.conftest import START, make_publish


class CommandSink:
    def __init__(self):
        self.commands = []

    def receive_message(self, command):
        self.commands.append(command)


def test_valid_payload_is_parsed_into_command():
    proxy = MQTTBrokerProxy(topic_prefix="sim")
    sink = CommandSink()
    proxy.register_broker_tariff_listener(sink)

    proxy.handle_payload(json.dumps({"kind": "revoke", "broker": "alice", "msg_id": 4, "tariff_id": 101}).encode())

    assert sink.commands == [TariffRevoke(broker="alice", msg_id=4, tariff_id=101)]


def test_invalid_payloads_are_forwarded_raw():
    proxy = MQTTBrokerProxy()
    sink = CommandSink()
    proxy.register_broker_tariff_listener(sink)

    proxy.handle_payload(json.dumps({"kind": "bogus", "broker": "bob"}).encode())
    proxy.handle_payload(b"\xff not json")

    assert sink.commands == [{"kind": "bogus", "broker": "bob"}, None]


def test_unknown_payload_reaches_dispatcher_as_illegal_operation(market, broker_proxy):
    proxy = MQTTBrokerProxy()
    proxy.register_broker_tariff_listener(market)

    proxy.handle_payload(json.dumps({"kind": "bogus", "broker": "bob", "msg_id": 8}).encode())

    broker, status = broker_proxy.sent[-1]
    assert broker == "bob"
    assert status.status == TariffStatusCode.ILLEGAL_OPERATION


def test_send_while_disconnected_is_dropped():
    proxy = MQTTBrokerProxy()

    proxy.send_message("alice", TariffStatus(broker="alice", tariff_id=1, status=TariffStatusCode.SUCCESS))
    proxy.broadcast_messages([])

    assert proxy.is_connected is False


def test_topics_use_prefix():
    proxy = MQTTBrokerProxy(topic_prefix="sim")

    assert proxy.command_topic == "sim/brokers/+/tariff"
    assert proxy.status_topic("alice") == "sim/brokers/alice/status"
    assert proxy.broadcast_topic == "sim/brokers/broadcast"


def test_specifications_serialize_to_json(market, listener):
    market.receive_message(make_publish(spec_id=101))
    market.activate(START, 2)
    spec = listener.batches[0][0].specification

    payload = to_payload([spec])

    assert payload[0]["tsp_id"] == 101
    assert payload[0]["tsp_power_type"] == "CONSUMPTION"
    assert payload[0]["rates"][0]["rte_id"] == 1
    json.dumps(payload)
