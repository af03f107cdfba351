# tariffmarket/core/logger.py

import logging
from logging.handlers import RotatingFileHandler
import os

from .discord_logger import send_discord_alert
from .settings import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Carpeta de logs (fuera del código fuente, configurable con LOG_DIR)
LOG_DIR = settings.LOG_DIR or os.path.join(os.path.dirname(__file__), "../../logs")
LOG_FILE = os.path.join(LOG_DIR, "tariffmarket.log")

logger = logging.getLogger("tariffmarket")


def configure_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Instala los handlers de archivo y consola una sola vez por proceso."""
    logger.setLevel(level)
    if logger.handlers:
        return logger

    os.makedirs(LOG_DIR, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    file_handler = RotatingFileHandler(LOG_FILE, maxBytes=10_000_000, backupCount=5)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)
    return logger


def log_critical_error(msg: str):
    """Guarda en logs y manda alerta a Discord."""
    logger.error(msg)
    send_discord_alert(msg, level="CRITICAL")


configure_logging()
