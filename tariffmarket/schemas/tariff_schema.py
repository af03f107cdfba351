# tariffmarket/schemas/tariff_schema.py

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from tariffmarket.models import PowerType, TariffState


class RateResponse(BaseModel):
    rte_id: int
    rte_fixed: bool
    rte_value: float
    rte_min_value: float | None
    rte_max_value: float | None
    rte_expected_mean: float

    model_config = ConfigDict(from_attributes=True)


class TariffSpecificationResponse(BaseModel):
    tsp_id: int
    tsp_broker: str
    tsp_power_type: PowerType
    tsp_expiration: datetime | None
    rates: list[RateResponse]

    model_config = ConfigDict(from_attributes=True)


class HourlyChargeResponse(BaseModel):
    hch_rate_id: int
    hch_at_time: datetime
    hch_value: float

    model_config = ConfigDict(from_attributes=True)


class TariffResponse(BaseModel):
    trf_id: int
    trf_state: TariffState
    trf_expiration: datetime | None
    specification: TariffSpecificationResponse
    hourly_charges: list[HourlyChargeResponse] = []

    model_config = ConfigDict(from_attributes=True)
