# tariffmarket/schemas/subscription_schema.py

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tariffmarket.models import PowerType


class CustomerCreate(BaseModel):
    cus_name: str = Field(min_length=1, max_length=100)
    cus_power_type: PowerType = PowerType.CONSUMPTION
    cus_population: int = Field(default=1, gt=0)


class CustomerResponse(CustomerCreate):
    cus_id: int

    model_config = ConfigDict(from_attributes=True)


class SubscribeRequest(BaseModel):
    customer_id: int
    tariff_id: int
    count: int = Field(gt=0)


class UnsubscribeRequest(BaseModel):
    count: int = Field(gt=0)


class SubscriptionResponse(BaseModel):
    tsu_id: int
    tsu_customer_id: int
    tsu_tariff_id: int
    tsu_customers_committed: int

    model_config = ConfigDict(from_attributes=True)


class ClockTick(BaseModel):
    time: datetime
