"""Los cinco conjuntos disjuntos de prioridades que alimentan un periodo.

Los predicados viven aqui una sola vez: los usa el repositorio en
memoria, la clasificacion de una prioridad suelta y los tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from priorityradar.domain.enums import PriorityStatus
from priorityradar.domain.models import PeriodQuery, Priority, to_utc
from priorityradar.domain.periods import Period


class DatasetSlot(str, Enum):
    """Conjunto al que pertenece una prioridad para un periodo dado."""

    OPEN_CARRIED_OVER = "open_carried_over"
    OPEN_DUE_THIS_PERIOD = "open_due_this_period"
    CLOSED_THIS_PERIOD = "closed_this_period"
    CANCELED_THIS_PERIOD = "canceled_this_period"
    COMPLETED_IN_LATER_PERIOD = "completed_in_later_period"


@dataclass(frozen=True)
class PeriodDataset:
    """Snapshot de los cinco conjuntos para un periodo y alcance."""

    open_carried_over: List[Priority] = field(default_factory=list)
    open_due_this_period: List[Priority] = field(default_factory=list)
    closed_this_period: List[Priority] = field(default_factory=list)
    canceled_this_period: List[Priority] = field(default_factory=list)
    completed_in_later_period: List[Priority] = field(default_factory=list)

    def slot(self, slot: DatasetSlot) -> List[Priority]:
        return getattr(self, slot.value)

    @property
    def row_count(self) -> int:
        return sum(len(self.slot(s)) for s in DatasetSlot)

    @classmethod
    def from_slots(cls, rows: Dict[DatasetSlot, List[Priority]]) -> "PeriodDataset":
        return cls(**{s.value: list(rows.get(s, [])) for s in DatasetSlot})


def _within(value: Optional[datetime], period: Period) -> bool:
    if value is None:
        return False
    instant = to_utc(value)
    return period.start <= instant <= period.end


def matches_scope(priority: Priority, query: PeriodQuery) -> bool:
    """Filtro comun: activa y dentro del alcance posicion/objetivo."""
    if not priority.is_active:
        return False
    if query.position_id and priority.position_id != query.position_id:
        return False
    if query.objective_id and priority.objective_id != query.objective_id:
        return False
    return True


def dataset_slot(priority: Priority, period: Period) -> Optional[DatasetSlot]:
    """Conjunto de `priority` para `period` (ignora alcance e is_active)."""
    until = priority.until_at
    if priority.status == PriorityStatus.OPEN:
        if until is None:
            return None
        if to_utc(until) < period.start:
            return DatasetSlot.OPEN_CARRIED_OVER
        if _within(until, period):
            return DatasetSlot.OPEN_DUE_THIS_PERIOD
        return None

    if priority.status == PriorityStatus.CLOSED:
        if _within(priority.finished_at, period):
            return DatasetSlot.CLOSED_THIS_PERIOD
        finished = priority.finished_at
        if _within(until, period) and finished is not None and to_utc(finished) > period.end:
            return DatasetSlot.COMPLETED_IN_LATER_PERIOD
        return None

    if priority.status == PriorityStatus.CANCELED:
        if _within(priority.canceled_at, period):
            return DatasetSlot.CANCELED_THIS_PERIOD
        return None

    return None


def _ts(value: Optional[datetime]) -> float:
    return to_utc(value).timestamp() if value is not None else float("inf")


# Orden de cada consulta: fecha relevante asc, luego `order` asc.
SLOT_SORT_KEYS: Dict[DatasetSlot, Callable[[Priority], Tuple[float, int]]] = {
    DatasetSlot.OPEN_CARRIED_OVER: lambda p: (_ts(p.until_at), p.order),
    DatasetSlot.OPEN_DUE_THIS_PERIOD: lambda p: (_ts(p.until_at), p.order),
    DatasetSlot.CLOSED_THIS_PERIOD: lambda p: (_ts(p.finished_at), p.order),
    DatasetSlot.CANCELED_THIS_PERIOD: lambda p: (_ts(p.canceled_at), p.order),
    DatasetSlot.COMPLETED_IN_LATER_PERIOD: lambda p: (_ts(p.until_at), p.order),
}


def select_slot(
    priorities: Iterable[Priority], slot: DatasetSlot, query: PeriodQuery
) -> List[Priority]:
    """Filtra y ordena las prioridades de un conjunto para una consulta."""
    period = Period(year=query.year, month=query.month)
    rows = [
        p for p in priorities if matches_scope(p, query) and dataset_slot(p, period) == slot
    ]
    rows.sort(key=SLOT_SORT_KEYS[slot])
    return rows
