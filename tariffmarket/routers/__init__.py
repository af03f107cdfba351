# tariffmarket/routers/__init__.py

from fastapi import APIRouter

from . import tariff_router, subscription_router, clock_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(tariff_router.router)
api_router.include_router(subscription_router.router)
api_router.include_router(clock_router.router)
