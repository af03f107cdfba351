# tariffmarket/core/clock.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from .logger import logger

EPOCH = datetime(1970, 1, 1)


class TimeslotPhaseProcessor(Protocol):
    def activate(self, time: datetime, phase: int) -> None: ...


class CompetitionControl(Protocol):
    def register_timeslot_phase(self, processor: TimeslotPhaseProcessor, phase: int) -> None: ...


def to_sim_time(dt: datetime) -> datetime:
    """Normaliza a UTC sin tzinfo, que es como se guardan los tiempos en la BD."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


class TimeService:
    """Reloj de la simulación. Solo avanza cuando el driver externo lo indica."""

    SECOND = 1000
    MINUTE = 60 * SECOND
    HOUR = 60 * MINUTE
    DAY = 24 * HOUR

    def __init__(self, start: Optional[datetime] = None):
        self._current_time = to_sim_time(start) if start else EPOCH

    @property
    def current_time(self) -> datetime:
        return self._current_time

    def set_current_time(self, time: datetime) -> None:
        self._current_time = to_sim_time(time)

    @staticmethod
    def millis(time: datetime) -> int:
        delta = to_sim_time(time) - EPOCH
        return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


class TimeslotPhaseRunner:
    """
    Implementación mínima de CompetitionControl: en cada tick fija el reloj y
    activa a los procesadores por fase ascendente, en orden de registro dentro
    de cada fase.
    """

    def __init__(self, time_service: TimeService):
        self.time_service = time_service
        self._phases: Dict[int, List[TimeslotPhaseProcessor]] = {}

    def register_timeslot_phase(self, processor: TimeslotPhaseProcessor, phase: int) -> None:
        self._phases.setdefault(phase, []).append(processor)
        logger.info(f"Procesador {type(processor).__name__} registrado en la fase {phase}")

    def advance(self, time: datetime) -> None:
        self.time_service.set_current_time(time)
        now = self.time_service.current_time
        for phase in sorted(self._phases):
            for processor in self._phases[phase]:
                processor.activate(now, phase)
