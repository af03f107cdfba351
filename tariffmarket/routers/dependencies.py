# tariffmarket/routers/dependencies.py

from fastapi import Request

from tariffmarket.core.clock import TimeslotPhaseRunner
from tariffmarket.services import TariffMarket


def get_market(request: Request) -> TariffMarket:
    return request.app.state.market


def get_phase_runner(request: Request) -> TimeslotPhaseRunner:
    return request.app.state.phase_runner
