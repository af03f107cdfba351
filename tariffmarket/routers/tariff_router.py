# tariffmarket/routers/tariff_router.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from tariffmarket.models import PowerType
from tariffmarket.schemas import TariffCommand, TariffPublish, TariffResponse, TariffStatus
from tariffmarket.services import TariffMarket
from .dependencies import get_market

router = APIRouter(prefix="/tariffs", tags=["Tariffs"])

@router.post("/messages", response_model=TariffStatus)
def receive_tariff_message_route(command: TariffCommand, market: TariffMarket = Depends(get_market)):
    """
    Entrada HTTP de comandos de brokers. La misma respuesta se envía
    también al broker por el transporte.
    """
    return market.receive_message(command)

@router.get("/active/{power_type}", response_model=List[TariffResponse])
def get_active_tariffs_route(power_type: PowerType, market: TariffMarket = Depends(get_market)):
    return [TariffResponse.model_validate(t) for t in market.get_active_tariff_list(power_type)]

@router.get("/default/{power_type}", response_model=TariffResponse)
def get_default_tariff_route(power_type: PowerType, market: TariffMarket = Depends(get_market)):
    tariff = market.get_default_tariff(power_type)
    if not tariff:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No hay tarifa por defecto para ese tipo.")
    return TariffResponse.model_validate(tariff)

@router.post("/default", response_model=TariffResponse, status_code=status.HTTP_201_CREATED)
def set_default_tariff_route(spec_data: TariffPublish, market: TariffMarket = Depends(get_market)):
    if not market.set_default_tariff(spec_data):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="La especificación ya existe.")
    return TariffResponse.model_validate(market.get_default_tariff(spec_data.power_type))

@router.get("/{tariff_id}", response_model=TariffResponse)
def get_tariff_route(tariff_id: int, market: TariffMarket = Depends(get_market)):
    tariff = market.find_tariff(tariff_id)
    if not tariff:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tarifa no encontrada.")
    return TariffResponse.model_validate(tariff)
