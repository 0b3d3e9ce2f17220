"""Reloj inyectable para el "hoy" de pared.

Es la unica comparacion dependiente de zona horaria del motor: separar
vencidas de en proceso dentro del mes actual y decidir cual es ese mes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Clock(ABC):
    """Fuente del dia calendario actual."""

    @abstractmethod
    def today(self) -> date:
        raise NotImplementedError


class SystemClock(Clock):
    """Dia calendario actual en la zona horaria configurada (p.ej. `Europe/Madrid`).

    `now` devuelve el instante actual con zona; por defecto el reloj del
    sistema en UTC.
    """

    def __init__(self, tz: str, now: Optional[Callable[[], datetime]] = None) -> None:
        self._zone = ZoneInfo(tz)
        self._now = now or _utc_now

    def today(self) -> date:
        return self._now().astimezone(self._zone).date()


class FixedClock(Clock):
    """Reloj congelado (tests, recalculos historicos)."""

    def __init__(self, day: date) -> None:
        self._day = day

    def today(self) -> date:
        return self._day
