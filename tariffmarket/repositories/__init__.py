# tariffmarket/repositories/__init__.py

from .tariff_repository import TariffRepository
from .subscription_repository import TariffSubscriptionRepository
from .customer_repository import CustomerRepository
from .transaction_repository import TariffTransactionRepository
