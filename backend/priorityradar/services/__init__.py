"""Servicios de negocio (carga de conjuntos, clasificacion, ICP y series)."""

from priorityradar.services.compliance_service import (
    ComplianceService,
    IcpSeries,
    PriorityDetail,
    PriorityPage,
    PriorityNotFound,
)
from priorityradar.services.dataset_fetcher import DatasetFetcher

__all__ = [
    "ComplianceService",
    "DatasetFetcher",
    "IcpSeries",
    "PriorityDetail",
    "PriorityNotFound",
    "PriorityPage",
]
