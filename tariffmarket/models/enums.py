# tariffmarket/models/enums.py

import enum


class PowerType(str, enum.Enum):
    CONSUMPTION = "CONSUMPTION"
    INTERRUPTIBLE_CONSUMPTION = "INTERRUPTIBLE_CONSUMPTION"
    THERMAL_STORAGE_CONSUMPTION = "THERMAL_STORAGE_CONSUMPTION"
    PRODUCTION = "PRODUCTION"
    SOLAR_PRODUCTION = "SOLAR_PRODUCTION"
    WIND_PRODUCTION = "WIND_PRODUCTION"
    BATTERY_STORAGE = "BATTERY_STORAGE"
    ELECTRIC_VEHICLE = "ELECTRIC_VEHICLE"


class TariffState(str, enum.Enum):
    PENDING = "PENDING"     # publicada por el broker, aún no visible
    OFFERED = "OFFERED"     # visible y suscribible
    KILLED = "KILLED"       # revocada, terminal


class TariffTransactionType(str, enum.Enum):
    PUBLISH = "PUBLISH"
    REVOKE = "REVOKE"
