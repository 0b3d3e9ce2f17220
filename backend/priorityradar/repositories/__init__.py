"""Repositorios de persistencia (snapshot JSON de prioridades)."""

from priorityradar.repositories.base import PriorityFinder
from priorityradar.repositories.priorities_repo import PrioritiesRepo, PrioritiesSnapshot

__all__ = ["PrioritiesRepo", "PrioritiesSnapshot", "PriorityFinder"]
