# tariffmarket/schemas/__init__.py

# Mensajes de brokers
from .tariff_message_schema import (
    RateData,
    HourlyChargeData,
    TariffPublish,
    TariffExpire,
    TariffRevoke,
    VariableRateUpdate,
    TariffCommand,
    tariff_command_adapter,
    TariffStatus,
    TariffStatusCode,
)

# Respuestas de tarifas
from .tariff_schema import RateResponse, TariffSpecificationResponse, HourlyChargeResponse, TariffResponse

# Clientes y suscripciones
from .subscription_schema import (
    CustomerCreate,
    CustomerResponse,
    SubscribeRequest,
    UnsubscribeRequest,
    SubscriptionResponse,
    ClockTick,
)
