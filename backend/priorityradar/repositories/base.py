"""Contrato de lectura de prioridades que consume el motor de ICP."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from priorityradar.domain.models import PeriodQuery, Priority


class PriorityFinder(ABC):
    """Las cinco consultas de un periodo mas la busqueda por id.

    Todas excluyen prioridades inactivas y aplican los filtros opcionales
    de posicion y objetivo de `PeriodQuery`.
    """

    @abstractmethod
    def list_open_carried_over(self, q: PeriodQuery) -> List[Priority]:
        """OPEN con vencimiento anterior al inicio del periodo."""
        raise NotImplementedError

    @abstractmethod
    def list_open_due_in_period(self, q: PeriodQuery) -> List[Priority]:
        """OPEN con vencimiento dentro del periodo."""
        raise NotImplementedError

    @abstractmethod
    def list_closed_in_period(self, q: PeriodQuery) -> List[Priority]:
        """CLOSED con finalizacion dentro del periodo."""
        raise NotImplementedError

    @abstractmethod
    def list_canceled_in_period(self, q: PeriodQuery) -> List[Priority]:
        """CANCELED con anulacion dentro del periodo."""
        raise NotImplementedError

    @abstractmethod
    def list_completed_in_later_period(self, q: PeriodQuery) -> List[Priority]:
        """CLOSED con vencimiento en el periodo y finalizacion posterior a su fin."""
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, priority_id: str) -> Optional[Priority]:
        raise NotImplementedError

    def snapshot(self) -> "PriorityFinder":
        """Vista coherente para las cinco consultas de un mismo periodo.

        Las implementaciones con almacenamiento mutable devuelven un finder
        congelado; las inmutables pueden devolverse a si mismas.
        """
        return self
