# tariffmarket/services/__init__.py

# Contabilidad y validación
from .accounting_service import Accounting, LedgerAccountingService
from .tariff_validation_service import FeeAccounting, TariffFound, TariffRejected, validate_update

# Ciclo de vida de tarifas
from .tariff_lifecycle_service import TariffLifecycleService, build_specification

# Suscripciones y tarifas por defecto
from .subscription_service import SubscriptionService, DefaultTariffRegistry

# Dispatcher y publicación periódica
from .message_dispatcher import MessageDispatcher
from .publication_scheduler import PublicationScheduler, NewTariffListener

# Raíz de composición
from .tariff_market import TariffMarket, build_tariff_market
