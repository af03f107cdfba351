# tariffmarket/routers/subscription_router.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tariffmarket.models import Customer
from tariffmarket.schemas import (
    CustomerCreate,
    CustomerResponse,
    SubscribeRequest,
    UnsubscribeRequest,
    SubscriptionResponse,
)
from tariffmarket.services import TariffMarket
from .dependencies import get_market

router = APIRouter(tags=["Subscriptions"])

@router.post("/customers", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer_route(customer_data: CustomerCreate, market: TariffMarket = Depends(get_market)):
    customer = market.register_customer(Customer(**customer_data.model_dump()))
    if not customer:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="El cliente ya existe.")
    return customer

@router.get("/customers/{cus_id}/revoked-subscriptions", response_model=List[SubscriptionResponse])
def get_revoked_subscriptions_route(cus_id: int, market: TariffMarket = Depends(get_market)):
    customer = market.find_customer(cus_id)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado.")
    return market.get_revoked_subscription_list(customer)

@router.get("/customers/{cus_id}/subscriptions", response_model=List[SubscriptionResponse])
def get_active_subscriptions_route(cus_id: int, market: TariffMarket = Depends(get_market)):
    customer = market.find_customer(cus_id)
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente no encontrado.")
    return market.get_active_subscription_list(customer)

@router.post("/subscriptions", response_model=SubscriptionResponse)
def subscribe_route(request: SubscribeRequest, market: TariffMarket = Depends(get_market)):
    customer = market.find_customer(request.customer_id)
    tariff = market.find_tariff(request.tariff_id)
    if not customer or not tariff:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente o tarifa no encontrados.")

    subscription = market.subscribe_to_tariff(tariff, customer, request.count)
    if not subscription:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="La tarifa ya expiró.")
    return subscription

@router.post("/subscriptions/{tsu_id}/unsubscribe", response_model=SubscriptionResponse)
def unsubscribe_route(tsu_id: int, request: UnsubscribeRequest, market: TariffMarket = Depends(get_market)):
    subscription = market.find_subscription(tsu_id)
    if not subscription:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Suscripción no encontrada.")
    return market.unsubscribe(subscription, request.count)
