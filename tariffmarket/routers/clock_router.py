# tariffmarket/routers/clock_router.py

from fastapi import APIRouter, Depends

from tariffmarket.core.clock import TimeslotPhaseRunner
from tariffmarket.schemas import ClockTick
from .dependencies import get_phase_runner

router = APIRouter(prefix="/clock", tags=["Clock"])

@router.post("/tick")
def clock_tick_route(tick: ClockTick, runner: TimeslotPhaseRunner = Depends(get_phase_runner)):
    """Avanza el reloj de la simulación y activa las fases registradas."""
    runner.advance(tick.time)
    return {"current_time": runner.time_service.current_time.isoformat()}
