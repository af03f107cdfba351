from datetime import timedelta

from tariffmarket.models import TariffState, TariffTransactionType
from tariffmarket.schemas import TariffRevoke, TariffStatusCode
from tests.conftest import START, make_publish, transactions_of


def test_publish_then_release_at_boundary(market, listener, broker_proxy, db):
    status = market.receive_message(make_publish(spec_id=1001, broker="alice"))

    assert status.status == TariffStatusCode.SUCCESS
    assert market.find_tariff(1001).state == TariffState.PENDING
    publish_fees = transactions_of(db, TariffTransactionType.PUBLISH)
    assert [tx.ttx_charge for tx in publish_fees] == [10.0]

    market.activate(START + timedelta(hours=2), 2)
    assert market.find_tariff(1001).state == TariffState.PENDING
    assert broker_proxy.broadcasts == []

    market.activate(START + timedelta(hours=6), 2)
    tariff = market.find_tariff(1001)
    assert tariff.state == TariffState.OFFERED
    assert listener.batches == [[tariff]]
    assert broker_proxy.broadcasts == [[tariff.specification]]


def test_subscribe_then_revoke(market, offered_tariff, customer, db):
    subscription = market.subscribe_to_tariff(offered_tariff, customer, 5)
    assert subscription.customers_committed == 5

    status = market.receive_message(TariffRevoke(broker="alice", msg_id=77, tariff_id=offered_tariff.id))

    assert status.status == TariffStatusCode.SUCCESS
    assert offered_tariff.state == TariffState.KILLED
    revoke_fees = transactions_of(db, TariffTransactionType.REVOKE)
    assert [tx.ttx_charge for tx in revoke_fees] == [20.0]

    revoked = market.get_revoked_subscription_list(customer)
    assert revoked == [subscription]
    assert revoked[0].customers_committed == 5
