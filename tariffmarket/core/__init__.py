from .settings import settings, MarketConfig, load_market_config
from .logger import logger, log_critical_error
