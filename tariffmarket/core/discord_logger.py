# tariffmarket/core/discord_logger.py

import time
import requests
from .settings import settings

FLOOD_INTERVAL = 20  # segundos entre alertas del mismo nivel

LEVEL_EMOJI = {
    "INFO": "ℹ️",
    "WARN": "⚠️",
    "ERROR": "🔥",
    "CRITICAL": "💀",
}

# Ultimo envio por nivel, para el control de flood
_last_alert_time: dict[str, float] = {}


def _flood_blocked(level: str, now: float) -> bool:
    if now - _last_alert_time.get(level, 0) < FLOOD_INTERVAL:
        return True
    _last_alert_time[level] = now
    return False


def send_discord_alert(message: str, level: str = "INFO", webhook_url: str | None = None) -> bool:
    """
    Envía una alerta al webhook de Discord del equipo de simulación.
    Devuelve True si la alerta salió; nunca lanza.
    """
    url = webhook_url or settings.DISCORD_WEBHOOK_URL
    if not url:
        return False

    if _flood_blocked(level, time.time()):
        return False

    payload = {"content": f"{LEVEL_EMOJI.get(level, '⚡')} **[{level}] TariffMarket:** {message}"}

    try:
        response = requests.post(url, json=payload, timeout=2)
        return response.ok
    except requests.RequestException:
        return False
