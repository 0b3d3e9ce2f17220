"""Clasificacion mensual de prioridades.

Funcion pura sobre los cinco conjuntos de un periodo: asigna a cada
prioridad exactamente una `MonthlyClass` y su `ComplianceFlag`. La usan
el listado, el ICP de un periodo y la serie mensual.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from priorityradar.domain.datasets import DatasetSlot, PeriodDataset, dataset_slot
from priorityradar.domain.enums import (
    COMPLIANCE_BY_CLASS,
    MONTHLY_CLASS_ORDER,
    ComplianceFlag,
    MonthlyClass,
)
from priorityradar.domain.models import Priority
from priorityradar.domain.periods import Period
from priorityradar.logging_utils import get_logger

logger = get_logger(__name__)

# Fechas sin las que una fila no se puede clasificar en su conjunto.
_REQUIRED_DATES: Dict[DatasetSlot, Tuple[str, ...]] = {
    DatasetSlot.OPEN_CARRIED_OVER: ("until_at",),
    DatasetSlot.OPEN_DUE_THIS_PERIOD: ("until_at",),
    DatasetSlot.CLOSED_THIS_PERIOD: ("until_at", "finished_at"),
    DatasetSlot.CANCELED_THIS_PERIOD: ("canceled_at",),
    DatasetSlot.COMPLETED_IN_LATER_PERIOD: ("until_at", "finished_at"),
}


@dataclass(frozen=True)
class ClassifiedPriority:
    """Prioridad con su clase mensual y cumplimiento para un periodo."""

    priority: Priority
    monthly_class: MonthlyClass
    compliance: ComplianceFlag


@dataclass(frozen=True)
class ClassificationResult:
    """Salida del clasificador para un periodo.

    `items` ya viene en orden de severidad. `completed_early` cuenta las
    cerradas en el periodo con vencimiento posterior: no se listan ni
    entran en el ICP.
    """

    period: Period
    items: List[ClassifiedPriority] = field(default_factory=list)
    completed_early: int = 0
    skipped: int = 0

    def count(self, monthly_class: MonthlyClass) -> int:
        return sum(1 for item in self.items if item.monthly_class == monthly_class)


def compliance_for(monthly_class: MonthlyClass) -> ComplianceFlag:
    return COMPLIANCE_BY_CLASS[monthly_class]


def _is_malformed(priority: Priority, slot: DatasetSlot) -> bool:
    missing = [name for name in _REQUIRED_DATES[slot] if getattr(priority, name) is None]
    if missing:
        logger.warning(
            "Skipping priority %s in %s: missing %s", priority.id, slot.value, ", ".join(missing)
        )
        return True
    return False


def _classify_closed(priority: Priority, period: Period) -> Optional[MonthlyClass]:
    """Cerrada dentro del periodo; None si vence despues (cerrada por adelantado)."""
    until = priority.until_date
    finished = priority.finished_date
    if until is None or finished is None:
        return None
    if period.contains(until):
        if finished <= until:
            return MonthlyClass.COMPLETED_ON_TIME
        return MonthlyClass.COMPLETED_LATE_THIS_PERIOD
    if period.is_before(until):
        return MonthlyClass.COMPLETED_CARRIED_FROM_EARLIER
    return None


def _open_reference(period: Period, today: date) -> Optional[date]:
    """Fecha frente a la que se juzga el vencimiento; None si el periodo es futuro."""
    current = Period.containing(today)
    if period.index > current.index:
        return None
    if period.index == current.index:
        return today
    return period.last_day


def _classify_open_due(priority: Priority, reference: Optional[date]) -> MonthlyClass:
    until = priority.until_date
    if until is not None and reference is not None and until < reference:
        return MonthlyClass.OVERDUE_THIS_PERIOD
    return MonthlyClass.OPEN


_FIXED_CLASS: Dict[DatasetSlot, MonthlyClass] = {
    DatasetSlot.OPEN_CARRIED_OVER: MonthlyClass.OVERDUE_CARRIED_FROM_EARLIER,
    DatasetSlot.CANCELED_THIS_PERIOD: MonthlyClass.CANCELED,
    DatasetSlot.COMPLETED_IN_LATER_PERIOD: MonthlyClass.COMPLETED_IN_LATER_PERIOD,
}

_ORDER_INDEX = {mc: i for i, mc in enumerate(MONTHLY_CLASS_ORDER)}


def classify(dataset: PeriodDataset, period: Period, today: date) -> ClassificationResult:
    """Clasifica los cinco conjuntos de `period` tomando `today` como hoy de pared."""
    reference = _open_reference(period, today)
    items: List[ClassifiedPriority] = []
    completed_early = 0
    skipped = 0

    for slot in DatasetSlot:
        for priority in dataset.slot(slot):
            if _is_malformed(priority, slot):
                skipped += 1
                continue

            monthly_class: Optional[MonthlyClass]
            if slot == DatasetSlot.CLOSED_THIS_PERIOD:
                monthly_class = _classify_closed(priority, period)
                if monthly_class is None:
                    completed_early += 1
                    continue
            elif slot == DatasetSlot.OPEN_DUE_THIS_PERIOD:
                monthly_class = _classify_open_due(priority, reference)
            else:
                monthly_class = _FIXED_CLASS[slot]

            items.append(
                ClassifiedPriority(
                    priority=priority,
                    monthly_class=monthly_class,
                    compliance=compliance_for(monthly_class),
                )
            )

    # sort estable: dentro de cada clase se respeta el orden de la consulta
    items.sort(key=lambda item: _ORDER_INDEX[item.monthly_class])
    return ClassificationResult(
        period=period, items=items, completed_early=completed_early, skipped=skipped
    )


def classify_priority(
    priority: Priority, period: Period, today: date
) -> Optional[ClassifiedPriority]:
    """Clasifica una prioridad suelta frente a `period`.

    Devuelve None si la prioridad no pertenece a ninguno de los cinco
    conjuntos del periodo o si solo cuenta como cerrada por adelantado.
    """
    slot = dataset_slot(priority, period)
    if slot is None:
        return None
    result = classify(PeriodDataset.from_slots({slot: [priority]}), period, today)
    return result.items[0] if result.items else None
