# tariffmarket/core/settings.py

from dataclasses import dataclass
import logging

from pydantic_settings import BaseSettings

DEFAULT_PUBLICATION_FEE = 0.0
DEFAULT_REVOCATION_FEE = 0.0
DEFAULT_PUBLICATION_INTERVAL = 6
MAX_PUBLICATION_INTERVAL = 24
DEFAULT_SIMULATION_PHASE = 2


class Settings(BaseSettings):
    URL_DATABASE_SQL: str = "sqlite://"
    TARIFF_PUBLICATION_FEE: float | None = None
    TARIFF_REVOCATION_FEE: float | None = None
    PUBLICATION_INTERVAL: int | None = None
    SIMULATION_PHASE: int = DEFAULT_SIMULATION_PHASE
    MQTT_BROKER_HOST: str = "localhost"
    MQTT_BROKER_PORT: int = 1883
    MQTT_USER: str | None = None
    MQTT_PASS: str | None = None
    MQTT_TOPIC_PREFIX: str = "tariffmarket"
    DISCORD_WEBHOOK_URL: str | None = None
    LOG_DIR: str | None = None
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


@dataclass(frozen=True)
class MarketConfig:
    publication_fee: float = DEFAULT_PUBLICATION_FEE
    revocation_fee: float = DEFAULT_REVOCATION_FEE
    publication_interval: int = DEFAULT_PUBLICATION_INTERVAL
    simulation_phase: int = DEFAULT_SIMULATION_PHASE


def clamp_publication_interval(interval: int) -> int:
    """
    Corrige el intervalo de publicacion (en horas) sin fallar nunca.
    Mas de 24 horas se recorta a 24; menos de 1 hora vuelve al valor por defecto.
    """
    log = logging.getLogger("tariffmarket")
    if interval > MAX_PUBLICATION_INTERVAL:
        log.error(f"tariff publication interval {interval} > {MAX_PUBLICATION_INTERVAL} hr, using {MAX_PUBLICATION_INTERVAL}")
        return MAX_PUBLICATION_INTERVAL
    if interval < 1:
        log.error(f"tariff publication interval {interval} < 1 hr, using {DEFAULT_PUBLICATION_INTERVAL}")
        return DEFAULT_PUBLICATION_INTERVAL
    return interval


def load_market_config(source: Settings) -> MarketConfig:
    """
    Construye la configuracion del mercado. Los valores faltantes se registran
    como error y se reemplazan por su valor por defecto; nunca aborta el arranque.
    """
    log = logging.getLogger("tariffmarket")

    publication_fee = source.TARIFF_PUBLICATION_FEE
    if publication_fee is None:
        log.error(f"Tariff publication fee not specified. Default to {DEFAULT_PUBLICATION_FEE}")
        publication_fee = DEFAULT_PUBLICATION_FEE

    revocation_fee = source.TARIFF_REVOCATION_FEE
    if revocation_fee is None:
        log.error(f"Tariff revocation fee not specified. Default to {DEFAULT_REVOCATION_FEE}")
        revocation_fee = DEFAULT_REVOCATION_FEE

    interval = source.PUBLICATION_INTERVAL
    if interval is None:
        log.error(f"Tariff publication interval not specified. Default to {DEFAULT_PUBLICATION_INTERVAL}")
        interval = DEFAULT_PUBLICATION_INTERVAL

    return MarketConfig(
        publication_fee=float(publication_fee),
        revocation_fee=float(revocation_fee),
        publication_interval=clamp_publication_interval(int(interval)),
        simulation_phase=source.SIMULATION_PHASE,
    )


settings = Settings()
