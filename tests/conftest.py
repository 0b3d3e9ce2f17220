"""Fixtures compartidas para tests del backend."""

from __future__ import annotations

import importlib
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, TYPE_CHECKING

import pytest

ROOT = Path(__file__).resolve().parents[1]
BACKEND = ROOT / "backend"

# Ensure the backend package is importable without installing.
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

_enums = importlib.import_module("priorityradar.domain.enums")
PriorityStatus = _enums.PriorityStatus
_models = importlib.import_module("priorityradar.domain.models")
Priority = _models.Priority
PeriodQuery = _models.PeriodQuery
_datasets = importlib.import_module("priorityradar.domain.datasets")
DatasetSlot = _datasets.DatasetSlot
select_slot = _datasets.select_slot
_base = importlib.import_module("priorityradar.repositories.base")
PriorityFinder = _base.PriorityFinder

if TYPE_CHECKING:
    from priorityradar.domain.models import Priority as _Priority


def utc(value: str) -> datetime:
    """`YYYY-MM-DD` o ISO completo -> datetime UTC."""
    if len(value) == 10:
        d = date.fromisoformat(value)
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def make_priority(
    pid: str,
    *,
    until: Optional[str],
    status: Optional["PriorityStatus"] = None,
    finished: Optional[str] = None,
    canceled: Optional[str] = None,
    position_id: str = "pos-1",
    objective_id: Optional[str] = None,
    order: int = 0,
    is_active: bool = True,
) -> "_Priority":
    if status is None:
        status = PriorityStatus.OPEN
    until_at = utc(until) if until else None
    return Priority(
        id=pid,
        name=f"Priority {pid}",
        order=order,
        from_at=until_at,
        until_at=until_at,
        finished_at=utc(finished) if finished else None,
        canceled_at=utc(canceled) if canceled else None,
        status=status,
        position_id=position_id,
        objective_id=objective_id,
        is_active=is_active,
    )


class InMemoryFinder(PriorityFinder):
    """Finder sobre una lista en memoria con los mismos predicados que el repo JSON."""

    def __init__(self, priorities: List["_Priority"]) -> None:
        self.priorities = list(priorities)
        self.calls = 0

    def _select(self, slot: "DatasetSlot", q: "PeriodQuery") -> List["_Priority"]:
        self.calls += 1
        return select_slot(self.priorities, slot, q)

    def list_open_carried_over(self, q):  # type: ignore[no-untyped-def]
        return self._select(DatasetSlot.OPEN_CARRIED_OVER, q)

    def list_open_due_in_period(self, q):  # type: ignore[no-untyped-def]
        return self._select(DatasetSlot.OPEN_DUE_THIS_PERIOD, q)

    def list_closed_in_period(self, q):  # type: ignore[no-untyped-def]
        return self._select(DatasetSlot.CLOSED_THIS_PERIOD, q)

    def list_canceled_in_period(self, q):  # type: ignore[no-untyped-def]
        return self._select(DatasetSlot.CANCELED_THIS_PERIOD, q)

    def list_completed_in_later_period(self, q):  # type: ignore[no-untyped-def]
        return self._select(DatasetSlot.COMPLETED_IN_LATER_PERIOD, q)

    def find_by_id(self, priority_id):  # type: ignore[no-untyped-def]
        for p in self.priorities:
            if p.id == priority_id:
                return p
        return None


@pytest.fixture()
def priority_factory() -> Callable[..., "_Priority"]:
    return make_priority


@pytest.fixture()
def march_priorities() -> List["_Priority"]:
    """Un ejemplo de cada clase mensual para marzo de 2024 (hoy = 2024-03-20)."""
    return [
        make_priority("carried", until="2024-01-05"),
        make_priority("overdue", until="2024-03-15"),
        make_priority("in-progress", until="2024-03-25"),
        make_priority(
            "late", until="2024-03-05", status=PriorityStatus.CLOSED, finished="2024-03-12"
        ),
        make_priority(
            "prev-done", until="2024-02-20", status=PriorityStatus.CLOSED, finished="2024-03-02"
        ),
        make_priority(
            "later", until="2024-03-10", status=PriorityStatus.CLOSED, finished="2024-04-02"
        ),
        make_priority(
            "on-time", until="2024-03-18", status=PriorityStatus.CLOSED, finished="2024-03-18"
        ),
        make_priority(
            "canceled", until="2024-03-30", status=PriorityStatus.CANCELED, canceled="2024-03-08"
        ),
        make_priority(
            "early", until="2024-04-15", status=PriorityStatus.CLOSED, finished="2024-03-28"
        ),
    ]
