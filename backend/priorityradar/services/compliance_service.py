"""Servicio de cumplimiento: listado clasificado, ICP y serie mensual.

Las tres vistas pasan por `evaluate`, de modo que un mismo periodo y
alcance producen siempre la misma clasificacion y el mismo ICP.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from priorityradar.config import Settings
from priorityradar.domain.classification import (
    ClassificationResult,
    ClassifiedPriority,
    classify,
    classify_priority,
)
from priorityradar.domain.clock import Clock
from priorityradar.domain.enums import MonthlyClass, PriorityStatus
from priorityradar.domain.icp import IcpResult, compute_icp
from priorityradar.domain.models import PeriodQuery, Priority
from priorityradar.domain.periods import Period, resolve_period, resolve_range
from priorityradar.logging_utils import get_logger
from priorityradar.repositories.base import PriorityFinder
from priorityradar.services.dataset_fetcher import DatasetFetcher

logger = get_logger(__name__)


class PriorityNotFound(LookupError):
    """No existe una prioridad con el id solicitado."""


@dataclass(frozen=True)
class PriorityPage:
    """Pagina del listado clasificado con el ICP del mismo alcance."""

    items: List[ClassifiedPriority]
    total: int
    page: int
    limit: int
    icp: IcpResult


@dataclass(frozen=True)
class IcpSeries:
    """ICP mes a mes de un rango cronologico."""

    start: Period
    end: Period
    position_id: Optional[str] = None
    objective_id: Optional[str] = None
    items: List[IcpResult] = field(default_factory=list)


@dataclass(frozen=True)
class PriorityDetail:
    priority: Priority
    period: Period
    classified: Optional[ClassifiedPriority] = None


class ComplianceService:
    """Orquesta carga, clasificacion y agregacion por periodo."""

    def __init__(self, finder: PriorityFinder, settings: Settings, clock: Clock) -> None:
        self._finder = finder
        self._settings = settings
        self._clock = clock
        self._fetcher = DatasetFetcher(finder, max_workers=settings.fetch_workers)

    def evaluate(
        self,
        period: Period,
        position_id: Optional[str] = None,
        objective_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Tuple[ClassificationResult, IcpResult]:
        """Pipeline completo de un periodo: conjuntos -> clases -> buckets -> ICP."""
        ref_today = today if today is not None else self._clock.today()
        query = PeriodQuery(
            month=period.month,
            year=period.year,
            position_id=position_id,
            objective_id=objective_id,
        )
        dataset = self._fetcher.fetch(query)
        result = classify(dataset, period, ref_today)
        if result.skipped:
            logger.warning("Period %s: %s malformed priorities skipped", period.label, result.skipped)
        return result, compute_icp(result, position_id=position_id, objective_id=objective_id)

    def icp(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        position_id: Optional[str] = None,
        objective_id: Optional[str] = None,
    ) -> IcpResult:
        """ICP de un periodo (por defecto el mes actual)."""
        today = self._clock.today()
        period = resolve_period(month, year, today)
        _, icp = self.evaluate(period, position_id, objective_id, today=today)
        return icp

    def list(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        position_id: Optional[str] = None,
        objective_id: Optional[str] = None,
        status: Optional[PriorityStatus] = None,
        monthly_class: Optional[MonthlyClass] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> PriorityPage:
        """Listado del periodo en orden de severidad, paginado al final.

        `status` y `monthly_class` solo filtran los items; el ICP adjunto
        siempre corresponde al alcance completo.
        """
        today = self._clock.today()
        period = resolve_period(month, year, today)
        result, icp = self.evaluate(period, position_id, objective_id, today=today)

        items = result.items
        if status is not None:
            items = [i for i in items if i.priority.status == status]
        if monthly_class is not None:
            items = [i for i in items if i.monthly_class == monthly_class]

        page = max(1, page)
        size = limit if limit is not None else self._settings.list_page_size_default
        size = max(1, min(size, self._settings.list_page_size_max))
        start = (page - 1) * size
        return PriorityPage(
            items=items[start : start + size],
            total=len(items),
            page=page,
            limit=size,
            icp=icp,
        )

    def series(
        self,
        from_: str,
        to: str,
        position_id: Optional[str] = None,
        objective_id: Optional[str] = None,
    ) -> IcpSeries:
        """Serie de ICP por mes; cada mes se evalua de cero con el mismo `today`."""
        periods = resolve_range(from_, to, max_months=self._settings.series_max_months)
        today = self._clock.today()

        def run(period: Period) -> IcpResult:
            _, icp = self.evaluate(period, position_id, objective_id, today=today)
            return icp

        workers = min(self._settings.series_workers, len(periods))
        if workers <= 1:
            items = [run(p) for p in periods]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                items = list(pool.map(run, periods))

        logger.debug(
            "ICP series %s..%s (%s months) position=%s objective=%s",
            periods[0].label,
            periods[-1].label,
            len(periods),
            position_id,
            objective_id,
        )
        return IcpSeries(
            start=periods[0],
            end=periods[-1],
            position_id=position_id,
            objective_id=objective_id,
            items=items,
        )

    def detail(
        self, priority_id: str, month: Optional[int] = None, year: Optional[int] = None
    ) -> PriorityDetail:
        """Prioridad suelta clasificada frente al periodo pedido."""
        priority = self._finder.find_by_id(priority_id)
        if priority is None:
            raise PriorityNotFound(priority_id)
        today = self._clock.today()
        period = resolve_period(month, year, today)
        classified = classify_priority(priority, period, today) if priority.is_active else None
        return PriorityDetail(priority=priority, period=period, classified=classified)
