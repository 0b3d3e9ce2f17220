"""Buckets mensuales e ICP (Indice de Cumplimiento de Prioridades)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from priorityradar.domain.classification import ClassificationResult
from priorityradar.domain.enums import MonthlyClass
from priorityradar.domain.periods import Period

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class PeriodBuckets:
    """Contadores por clase mensual de un periodo."""

    not_completed_previous_months: int = 0
    not_completed_overdue: int = 0
    in_progress: int = 0
    completed_previous_months: int = 0
    completed_late: int = 0
    completed_in_other_month: int = 0
    completed_on_time: int = 0
    canceled: int = 0
    # informativo: cerradas en el periodo con vencimiento posterior
    completed_early: int = 0

    @property
    def total_completed(self) -> int:
        return self.completed_on_time + self.completed_late + self.completed_previous_months

    @property
    def total_planned(self) -> int:
        return (
            self.total_completed
            + self.not_completed_previous_months
            + self.not_completed_overdue
            + self.in_progress
            + self.completed_in_other_month
        )


def build_buckets(result: ClassificationResult) -> PeriodBuckets:
    """Reduce una clasificacion a contadores."""
    return PeriodBuckets(
        not_completed_previous_months=result.count(MonthlyClass.OVERDUE_CARRIED_FROM_EARLIER),
        not_completed_overdue=result.count(MonthlyClass.OVERDUE_THIS_PERIOD),
        in_progress=result.count(MonthlyClass.OPEN),
        completed_previous_months=result.count(MonthlyClass.COMPLETED_CARRIED_FROM_EARLIER),
        completed_late=result.count(MonthlyClass.COMPLETED_LATE_THIS_PERIOD),
        completed_in_other_month=result.count(MonthlyClass.COMPLETED_IN_LATER_PERIOD),
        completed_on_time=result.count(MonthlyClass.COMPLETED_ON_TIME),
        canceled=result.count(MonthlyClass.CANCELED),
        completed_early=result.completed_early,
    )


def round_half_up(value: Decimal, places: Decimal = _TWO_PLACES) -> float:
    return float(value.quantize(places, rounding=ROUND_HALF_UP))


def icp_percentage(total_completed: int, total_planned: int) -> float:
    """Porcentaje completado/planificado redondeado half-up a 2 decimales; 0 sin planificadas."""
    if total_planned <= 0:
        return 0.0
    return round_half_up(Decimal(total_completed) * 100 / Decimal(total_planned))


@dataclass(frozen=True)
class IcpResult:
    """ICP de un periodo con su desglose."""

    period: Period
    buckets: PeriodBuckets
    position_id: Optional[str] = None
    objective_id: Optional[str] = None

    @property
    def total_planned(self) -> int:
        return self.buckets.total_planned

    @property
    def total_completed(self) -> int:
        return self.buckets.total_completed

    @property
    def icp(self) -> float:
        return icp_percentage(self.total_completed, self.total_planned)


def compute_icp(
    result: ClassificationResult,
    position_id: Optional[str] = None,
    objective_id: Optional[str] = None,
) -> IcpResult:
    return IcpResult(
        period=result.period,
        buckets=build_buckets(result),
        position_id=position_id,
        objective_id=objective_id,
    )
