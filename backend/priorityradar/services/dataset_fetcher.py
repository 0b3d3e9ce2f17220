"""Carga concurrente de los cinco conjuntos de un periodo."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List

from priorityradar.domain.datasets import DatasetSlot, PeriodDataset
from priorityradar.domain.models import PeriodQuery, Priority
from priorityradar.logging_utils import get_logger
from priorityradar.repositories.base import PriorityFinder

logger = get_logger(__name__)


class DatasetFetcher:
    """Lanza las cinco consultas independientes en paralelo y las une."""

    def __init__(self, finder: PriorityFinder, max_workers: int = 5) -> None:
        self._finder = finder
        self._max_workers = max(1, max_workers)

    @staticmethod
    def _queries(
        finder: PriorityFinder,
    ) -> Dict[DatasetSlot, Callable[[PeriodQuery], List[Priority]]]:
        return {
            DatasetSlot.OPEN_CARRIED_OVER: finder.list_open_carried_over,
            DatasetSlot.OPEN_DUE_THIS_PERIOD: finder.list_open_due_in_period,
            DatasetSlot.CLOSED_THIS_PERIOD: finder.list_closed_in_period,
            DatasetSlot.CANCELED_THIS_PERIOD: finder.list_canceled_in_period,
            DatasetSlot.COMPLETED_IN_LATER_PERIOD: finder.list_completed_in_later_period,
        }

    def fetch(self, q: PeriodQuery) -> PeriodDataset:
        """Devuelve el snapshot del periodo; un fallo de persistencia se propaga.

        Las cinco consultas leen la misma vista del finder, asi que una
        prioridad no puede caer en dos conjuntos aunque el origen cambie.
        """
        queries = self._queries(self._finder.snapshot())
        if self._max_workers == 1:
            rows = {slot: query(q) for slot, query in queries.items()}
        else:
            with ThreadPoolExecutor(max_workers=min(self._max_workers, len(queries))) as pool:
                futures = {slot: pool.submit(query, q) for slot, query in queries.items()}
                rows = {slot: future.result() for slot, future in futures.items()}

        dataset = PeriodDataset.from_slots(rows)
        logger.debug(
            "Fetched %s rows for %04d-%02d (position=%s, objective=%s): %s",
            dataset.row_count,
            q.year,
            q.month,
            q.position_id,
            q.objective_id,
            ", ".join(f"{slot.value}={len(r)}" for slot, r in rows.items()),
        )
        return dataset
