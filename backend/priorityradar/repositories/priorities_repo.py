"""Repositorio de prioridades sobre un snapshot JSON (lectura/escritura)."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Iterable, List, Optional

from priorityradar.domain.datasets import DatasetSlot, select_slot
from priorityradar.domain.models import PeriodQuery, Priority, PriorityDocument
from priorityradar.repositories.base import PriorityFinder


class PrioritiesSnapshot(PriorityFinder):
    """Finder sobre una lista fija de prioridades (un documento ya cargado)."""

    def __init__(self, priorities: Iterable[Priority]) -> None:
        self._priorities = list(priorities)

    def _select(self, slot: DatasetSlot, q: PeriodQuery) -> List[Priority]:
        return select_slot(self._priorities, slot, q)

    def list_open_carried_over(self, q: PeriodQuery) -> List[Priority]:
        return self._select(DatasetSlot.OPEN_CARRIED_OVER, q)

    def list_open_due_in_period(self, q: PeriodQuery) -> List[Priority]:
        return self._select(DatasetSlot.OPEN_DUE_THIS_PERIOD, q)

    def list_closed_in_period(self, q: PeriodQuery) -> List[Priority]:
        return self._select(DatasetSlot.CLOSED_THIS_PERIOD, q)

    def list_canceled_in_period(self, q: PeriodQuery) -> List[Priority]:
        return self._select(DatasetSlot.CANCELED_THIS_PERIOD, q)

    def list_completed_in_later_period(self, q: PeriodQuery) -> List[Priority]:
        return self._select(DatasetSlot.COMPLETED_IN_LATER_PERIOD, q)

    def find_by_id(self, priority_id: str) -> Optional[Priority]:
        for priority in self._priorities:
            if priority.id == priority_id:
                return priority
        return None


class PrioritiesRepo(PriorityFinder):
    """Acceso a prioridades almacenadas como JSON.

    El documento se cachea en memoria y se relee cuando cambia el mtime
    del fichero. Cada consulta suelta lee el documento vigente; `snapshot`
    fija uno para varias consultas.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._cached_doc: PriorityDocument | None = None
        self._cached_mtime: float | None = None
        self._lock = Lock()

    def load(self) -> PriorityDocument:
        """Carga el snapshot; si no existe, devuelve un PriorityDocument vacio."""
        with self._lock:
            if not self._path.exists():
                return PriorityDocument(generated_at=datetime.now().astimezone())
            try:
                mtime = self._path.stat().st_mtime
            except OSError:
                mtime = None
            if self._cached_doc is not None and self._cached_mtime == mtime:
                return self._cached_doc

            data = json.loads(self._path.read_text(encoding="utf-8"))
            doc = PriorityDocument.model_validate(data)
            self._cached_doc = doc
            self._cached_mtime = mtime
            return doc

    def save(self, doc: PriorityDocument) -> None:
        """Guarda el snapshot en disco."""
        payload = doc.model_dump(mode="json")
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            try:
                self._cached_mtime = self._path.stat().st_mtime
            except OSError:
                self._cached_mtime = None
            self._cached_doc = doc

    def snapshot(self) -> PrioritiesSnapshot:
        return PrioritiesSnapshot(self.load().priorities)

    def list_open_carried_over(self, q: PeriodQuery) -> List[Priority]:
        return self.snapshot().list_open_carried_over(q)

    def list_open_due_in_period(self, q: PeriodQuery) -> List[Priority]:
        return self.snapshot().list_open_due_in_period(q)

    def list_closed_in_period(self, q: PeriodQuery) -> List[Priority]:
        return self.snapshot().list_closed_in_period(q)

    def list_canceled_in_period(self, q: PeriodQuery) -> List[Priority]:
        return self.snapshot().list_canceled_in_period(q)

    def list_completed_in_later_period(self, q: PeriodQuery) -> List[Priority]:
        return self.snapshot().list_completed_in_later_period(q)

    def find_by_id(self, priority_id: str) -> Optional[Priority]:
        return self.snapshot().find_by_id(priority_id)
