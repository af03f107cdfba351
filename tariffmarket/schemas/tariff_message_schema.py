# tariffmarket/schemas/tariff_message_schema.py

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import AfterValidator, BaseModel, Field, TypeAdapter, field_validator

from tariffmarket.core.clock import to_sim_time
from tariffmarket.models import PowerType

# Tiempos de simulación: siempre UTC sin tzinfo, igual que en la BD
SimTime = Annotated[datetime, AfterValidator(to_sim_time)]


class RateData(BaseModel):
    rate_id: int = Field(gt=0)
    fixed: bool = True
    value: float = 0.0
    min_value: float | None = None
    max_value: float | None = None
    expected_mean: float = 0.0


class HourlyChargeData(BaseModel):
    at_time: SimTime
    value: float


class TariffPublish(BaseModel):
    """Publicación de una nueva especificación; el id lo asigna el broker."""
    kind: Literal["publish"] = "publish"
    broker: str = Field(min_length=1, max_length=100)
    spec_id: int = Field(gt=0)
    power_type: PowerType
    rates: list[RateData] = Field(min_length=1)
    expiration: SimTime | None = None

    @field_validator("rates")
    @classmethod
    def rate_ids_unique(cls, rates: list[RateData]) -> list[RateData]:
        ids = [rate.rate_id for rate in rates]
        if len(ids) != len(set(ids)):
            raise ValueError("rate_id repetido en la especificación")
        return rates


class TariffExpire(BaseModel):
    kind: Literal["expire"] = "expire"
    broker: str = Field(min_length=1, max_length=100)
    msg_id: int
    tariff_id: int
    new_expiration: SimTime | None = None


class TariffRevoke(BaseModel):
    kind: Literal["revoke"] = "revoke"
    broker: str = Field(min_length=1, max_length=100)
    msg_id: int
    tariff_id: int


class VariableRateUpdate(BaseModel):
    kind: Literal["variable_rate_update"] = "variable_rate_update"
    broker: str = Field(min_length=1, max_length=100)
    msg_id: int
    tariff_id: int
    rate_id: int
    hourly_charge: HourlyChargeData


TariffCommand = Annotated[
    Union[TariffPublish, TariffExpire, TariffRevoke, VariableRateUpdate],
    Field(discriminator="kind"),
]

tariff_command_adapter = TypeAdapter(TariffCommand)


class TariffStatusCode(str, Enum):
    SUCCESS = "success"
    NO_SUCH_TARIFF = "no-such-tariff"
    INVALID_UPDATE = "invalid-update"
    ILLEGAL_OPERATION = "illegal-operation"


class TariffStatus(BaseModel):
    """Respuesta que recibe el broker por cada comando."""
    broker: str | None = None
    tariff_id: int = 0
    original_msg_id: int | None = None
    status: TariffStatusCode
    message: str | None = None

    def with_message(self, message: str) -> "TariffStatus":
        return self.model_copy(update={"message": message})
