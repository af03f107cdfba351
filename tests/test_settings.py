import logging

from tariffmarket.core.settings import Settings, load_market_config


def make_settings(**values):
    # _env_file=None: el test no debe leer un .env local
    return Settings(_env_file=None, **values)


def test_missing_values_fall_back_to_defaults(caplog, monkeypatch):
    for name in ("TARIFF_PUBLICATION_FEE", "TARIFF_REVOCATION_FEE", "PUBLICATION_INTERVAL"):
        monkeypatch.delenv(name, raising=False)

    with caplog.at_level(logging.ERROR, logger="tariffmarket"):
        config = load_market_config(make_settings())

    assert config.publication_fee == 0.0
    assert config.revocation_fee == 0.0
    assert config.publication_interval == 6
    assert config.simulation_phase == 2
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 3


def test_configured_values_are_used(caplog):
    with caplog.at_level(logging.ERROR, logger="tariffmarket"):
        config = load_market_config(
            make_settings(TARIFF_PUBLICATION_FEE=10.0, TARIFF_REVOCATION_FEE=20.0, PUBLICATION_INTERVAL=4)
        )

    assert (config.publication_fee, config.revocation_fee, config.publication_interval) == (10.0, 20.0, 4)
    assert caplog.records == []


def test_interval_of_30_is_clamped_to_24(caplog):
    with caplog.at_level(logging.ERROR, logger="tariffmarket"):
        config = load_market_config(
            make_settings(TARIFF_PUBLICATION_FEE=1.0, TARIFF_REVOCATION_FEE=1.0, PUBLICATION_INTERVAL=30)
        )

    assert config.publication_interval == 24
    assert len(caplog.records) == 1
    assert caplog.records[0].getMessage() == "tariff publication interval 30 > 24 hr, using 24"


def test_non_positive_interval_uses_default(caplog):
    with caplog.at_level(logging.ERROR, logger="tariffmarket"):
        config = load_market_config(
            make_settings(TARIFF_PUBLICATION_FEE=1.0, TARIFF_REVOCATION_FEE=1.0, PUBLICATION_INTERVAL=0)
        )

    assert config.publication_interval == 6
    assert [r.getMessage() for r in caplog.records] == ["tariff publication interval 0 < 1 hr, using 6"]


def test_values_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("TARIFF_PUBLICATION_FEE", "12.5")
    monkeypatch.setenv("PUBLICATION_INTERVAL", "12")

    config = load_market_config(make_settings())

    assert config.publication_fee == 12.5
    assert config.publication_interval == 12
