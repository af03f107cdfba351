import pytest
from datetime import datetime
from sqlalchemy.orm import sessionmaker

import tariffmarket.models  # noqa: F401  registra las tablas
from tariffmarket.core import MarketConfig
from tariffmarket.core.clock import TimeService, TimeslotPhaseRunner
from tariffmarket.database import Base, create_db_engine
from tariffmarket.models import Customer, PowerType, TariffTransactionType
from tariffmarket.repositories import TariffTransactionRepository
from tariffmarket.schemas import RateData, TariffPublish
from tariffmarket.services import build_tariff_market

# Medianoche: frontera de publicación para cualquier intervalo divisor de 24
START = datetime(2024, 1, 1)


class RecordingBrokerProxy:
    def __init__(self):
        self.sent = []
        self.broadcasts = []
        self.listeners = []

    def send_message(self, broker, message):
        self.sent.append((broker, message))

    def broadcast_messages(self, messages):
        self.broadcasts.append(list(messages))

    def register_broker_tariff_listener(self, listener):
        self.listeners.append(listener)


class RecordingListener:
    def __init__(self):
        self.batches = []

    def publish_new_tariffs(self, tariffs):
        self.batches.append(list(tariffs))


def make_publish(spec_id=101, broker="alice", power_type=PowerType.CONSUMPTION, expiration=None, rates=None):
    if rates is None:
        rates = [RateData(rate_id=1, fixed=True, value=0.12)]
    return TariffPublish(
        broker=broker,
        spec_id=spec_id,
        power_type=power_type,
        rates=rates,
        expiration=expiration,
    )


def transactions_of(db, tx_type: TariffTransactionType):
    return [tx for tx in TariffTransactionRepository(db).find_all() if tx.ttx_type == tx_type]


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def time_service():
    return TimeService(START)


@pytest.fixture
def phase_runner(time_service):
    return TimeslotPhaseRunner(time_service)


@pytest.fixture
def broker_proxy():
    return RecordingBrokerProxy()


@pytest.fixture
def market_config():
    return MarketConfig(publication_fee=10.0, revocation_fee=20.0, publication_interval=6, simulation_phase=2)


@pytest.fixture
def market(db, time_service, broker_proxy, phase_runner, market_config):
    return build_tariff_market(db, time_service, broker_proxy, phase_runner, market_config)


@pytest.fixture
def listener(market):
    listener = RecordingListener()
    market.register_new_tariff_listener(listener)
    return listener


@pytest.fixture
def customer(market):
    return market.register_customer(
        Customer(cus_name="village-1", cus_power_type=PowerType.CONSUMPTION, cus_population=100)
    )


@pytest.fixture
def offered_tariff(market, time_service):
    """Tarifa publicada y liberada en la frontera de START."""
    market.receive_message(make_publish(spec_id=101))
    market.activate(time_service.current_time, 2)
    return market.find_tariff(101)
