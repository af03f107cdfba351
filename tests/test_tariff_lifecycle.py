from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from tariffmarket.models import Customer, PowerType, TariffState, TariffTransactionType
from tariffmarket.repositories import TariffTransactionRepository
from tariffmarket.schemas import (
    HourlyChargeData,
    RateData,
    TariffExpire,
    TariffRevoke,
    TariffStatusCode,
    VariableRateUpdate,
)
from tariffmarket.services import build_tariff_market
from tests.conftest import START, make_publish, transactions_of

VARIABLE_RATES = [
    RateData(rate_id=11, fixed=False, min_value=0.05, max_value=0.30, expected_mean=0.15),
    RateData(rate_id=12, fixed=True, value=0.10),
]


def rate_update(value, rate_id=11, at_time=datetime(2024, 1, 1, 8), msg_id=5):
    return VariableRateUpdate(
        broker="alice", msg_id=msg_id, tariff_id=201, rate_id=rate_id,
        hourly_charge=HourlyChargeData(at_time=at_time, value=value),
    )


@pytest.fixture
def variable_tariff(market):
    market.receive_message(make_publish(spec_id=201, rates=VARIABLE_RATES))
    return market.find_tariff(201)


class TestExpire:

    def test_expiration_in_the_past_is_invalid_update(self, market, offered_tariff, time_service):
        status = market.receive_message(
            TariffExpire(broker="alice", msg_id=4, tariff_id=101, new_expiration=time_service.current_time - timedelta(hours=2))
        )

        assert status.status == TariffStatusCode.INVALID_UPDATE
        assert status.message == "attempt to set expiration in the past"
        assert offered_tariff.expiration is None

    def test_future_expiration_is_stored_without_state_change(self, market, offered_tariff, time_service):
        new_expiration = time_service.current_time + timedelta(days=2)

        status = market.receive_message(
            TariffExpire(broker="alice", msg_id=4, tariff_id=101, new_expiration=new_expiration)
        )

        assert status.status == TariffStatusCode.SUCCESS
        assert offered_tariff.expiration == new_expiration
        assert offered_tariff.state == TariffState.OFFERED

    def test_null_expiration_makes_tariff_open_ended(self, market, time_service):
        market.receive_message(make_publish(spec_id=102, expiration=time_service.current_time + timedelta(hours=3)))

        status = market.receive_message(TariffExpire(broker="alice", msg_id=4, tariff_id=102, new_expiration=None))

        assert status.status == TariffStatusCode.SUCCESS
        assert market.find_tariff(102).expiration is None


class TestRevoke:

    def test_revoke_without_subscriptions_charges_no_fee(self, market, offered_tariff, db):
        status = market.receive_message(TariffRevoke(broker="alice", msg_id=6, tariff_id=101))

        assert status.status == TariffStatusCode.SUCCESS
        assert offered_tariff.state == TariffState.KILLED
        assert transactions_of(db, TariffTransactionType.REVOKE) == []

    def test_revoke_ignores_subscriptions_with_zero_committed(self, market, offered_tariff, customer, db):
        subscription = market.subscribe_to_tariff(offered_tariff, customer, 4)
        market.unsubscribe(subscription, 4)

        market.receive_message(TariffRevoke(broker="alice", msg_id=6, tariff_id=101))

        assert offered_tariff.state == TariffState.KILLED
        assert transactions_of(db, TariffTransactionType.REVOKE) == []

    def test_revoke_charges_one_fee_regardless_of_subscription_count(self, market, offered_tariff, db):
        for name in ("village-a", "village-b", "village-c"):
            customer = market.register_customer(Customer(cus_name=name, cus_power_type=PowerType.CONSUMPTION))
            market.subscribe_to_tariff(offered_tariff, customer, 2)

        status = market.receive_message(TariffRevoke(broker="alice", msg_id=6, tariff_id=101))

        assert status.status == TariffStatusCode.SUCCESS
        fees = transactions_of(db, TariffTransactionType.REVOKE)
        assert len(fees) == 1
        assert fees[0].ttx_charge == 20.0

    def test_revoked_tariff_stays_queryable_by_id(self, market, offered_tariff):
        market.receive_message(TariffRevoke(broker="alice", msg_id=6, tariff_id=101))

        assert market.find_tariff(101) is not None
        assert market.get_active_tariff_list(PowerType.CONSUMPTION) == []


class TestVariableRateUpdate:

    def test_charge_on_variable_rate_is_accepted(self, market, variable_tariff):
        status = market.receive_message(rate_update(0.2))

        assert status.status == TariffStatusCode.SUCCESS
        assert [c.hch_value for c in variable_tariff.charges_for_rate(11)] == [0.2]

    def test_charge_for_same_hour_replaces_previous(self, market, variable_tariff):
        market.receive_message(rate_update(0.2))
        market.receive_message(rate_update(0.25, msg_id=6))

        assert [c.hch_value for c in variable_tariff.charges_for_rate(11)] == [0.25]

    @pytest.mark.parametrize("rate_id, value", [(99, 0.2), (12, 0.2), (11, 0.5), (11, 0.01)])
    def test_rejected_charges_leave_tariff_untouched(self, market, variable_tariff, rate_id, value):
        status = market.receive_message(rate_update(value, rate_id=rate_id))

        assert status.status == TariffStatusCode.INVALID_UPDATE
        assert status.message == "update: could not add hourly charge"
        assert variable_tariff.hourly_charges == []

    def test_usage_charge_follows_latest_published_charge(self, market, variable_tariff):
        market.receive_message(rate_update(0.2, at_time=datetime(2024, 1, 1, 8)))
        market.receive_message(rate_update(0.3, at_time=datetime(2024, 1, 1, 10), msg_id=6))

        assert variable_tariff.usage_charge(11, datetime(2024, 1, 1, 7)) == 0.15
        assert variable_tariff.usage_charge(11, datetime(2024, 1, 1, 9)) == 0.2
        assert variable_tariff.usage_charge(11, datetime(2024, 1, 1, 12)) == 0.3
        assert variable_tariff.usage_charge(12, datetime(2024, 1, 1, 12)) == 0.10
        assert variable_tariff.usage_charge(99, datetime(2024, 1, 1, 12)) is None


class LedgerDown:
    """Libro contable que falla para los tipos de transacción indicados."""

    def __init__(self, *fail_on):
        self.fail_on = set(fail_on)
        self.charged = []

    def add_tariff_transaction(self, tx_type, tariff, charge):
        if tx_type in self.fail_on:
            raise SQLAlchemyError("libro contable no disponible")
        self.charged.append((tx_type, tariff.trf_id, charge))


def market_with_ledger(db, time_service, broker_proxy, phase_runner, market_config, ledger):
    return build_tariff_market(db, time_service, broker_proxy, phase_runner, market_config, accounting=ledger)


class TestPublish:

    def test_specifications_may_reuse_rate_ids(self, market, db):
        first = market.receive_message(make_publish(spec_id=101, broker="alice", rates=[RateData(rate_id=1, value=0.1)]))
        second = market.receive_message(make_publish(spec_id=102, broker="bob", rates=[RateData(rate_id=1, value=0.2)]))

        assert first.status == TariffStatusCode.SUCCESS
        assert second.status == TariffStatusCode.SUCCESS
        assert market.find_tariff(101).specification.find_rate(1).rte_value == 0.1
        assert market.find_tariff(102).specification.find_rate(1).rte_value == 0.2

        ledger = TariffTransactionRepository(db)
        assert [tx.ttx_charge for tx in ledger.find_transactions_for_tariff(102)] == [10.0]
        assert [tx.ttx_broker for tx in ledger.find_transactions_for_tariff(101)] == ["alice"]

    def test_variable_charges_stay_with_their_own_tariff(self, market):
        variable = [RateData(rate_id=1, fixed=False, min_value=0.0, max_value=1.0, expected_mean=0.5)]
        market.receive_message(make_publish(spec_id=101, rates=variable))
        market.receive_message(make_publish(spec_id=102, broker="bob", rates=variable))

        market.receive_message(VariableRateUpdate(
            broker="bob", msg_id=3, tariff_id=102, rate_id=1,
            hourly_charge=HourlyChargeData(at_time=START, value=0.7),
        ))

        assert market.find_tariff(101).charges_for_rate(1) == []
        assert [c.hch_value for c in market.find_tariff(102).charges_for_rate(1)] == [0.7]

    def test_repeated_rate_id_in_one_specification_is_refused(self):
        with pytest.raises(ValueError):
            make_publish(rates=[RateData(rate_id=1), RateData(rate_id=1, value=0.3)])

    def test_failed_fee_leaves_no_tariff_behind(self, db, time_service, broker_proxy, phase_runner, market_config):
        ledger = LedgerDown(TariffTransactionType.PUBLISH)
        market = market_with_ledger(db, time_service, broker_proxy, phase_runner, market_config, ledger)

        status = market.receive_message(make_publish(spec_id=101))

        assert status.status == TariffStatusCode.ILLEGAL_OPERATION
        assert status.message == "internal error"
        assert market.find_tariff(101) is None
        assert market.tariff_repo.find_specification_by_id(101) is None

        market.activate(START, 2)
        assert broker_proxy.broadcasts == [[]]

    def test_failed_revocation_fee_keeps_tariff_offered(self, db, time_service, broker_proxy, phase_runner, market_config):
        ledger = LedgerDown(TariffTransactionType.REVOKE)
        market = market_with_ledger(db, time_service, broker_proxy, phase_runner, market_config, ledger)
        market.receive_message(make_publish(spec_id=101))
        market.activate(START, 2)
        customer = market.register_customer(Customer(cus_name="village-9", cus_power_type=PowerType.CONSUMPTION))
        market.subscribe_to_tariff(market.find_tariff(101), customer, 3)

        status = market.receive_message(TariffRevoke(broker="alice", msg_id=6, tariff_id=101))

        assert status.status == TariffStatusCode.ILLEGAL_OPERATION
        assert market.find_tariff(101).state == TariffState.OFFERED
        assert ledger.charged == [(TariffTransactionType.PUBLISH, 101, 10.0)]
