from .enums import PowerType, TariffState, TariffTransactionType
from .tariff_specification import TariffSpecification, Rate
from .tariff import Tariff, HourlyCharge
from .customer import Customer
from .tariff_subscription import TariffSubscription
from .tariff_transaction import TariffTransaction
