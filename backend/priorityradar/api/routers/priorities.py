"""Endpoints de prioridades: listado clasificado, ICP y serie mensual."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, Query, Request

from priorityradar.domain.classification import ClassifiedPriority
from priorityradar.domain.enums import MonthlyClass, PriorityStatus
from priorityradar.domain.icp import IcpResult
from priorityradar.domain.models import Priority
from priorityradar.domain.periods import PeriodError
from priorityradar.services.compliance_service import ComplianceService, PriorityNotFound

router = APIRouter()

YEAR_MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


def _service(request: Request) -> ComplianceService:
    state = request.app.state
    return ComplianceService(state.priorities_repo, state.settings, state.clock)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _priority_row(p: Priority) -> Dict[str, Any]:
    return {
        "id": p.id,
        "isActive": p.is_active,
        "name": p.name,
        "description": p.description,
        "order": p.order,
        "fromAt": _iso(p.from_at),
        "untilAt": _iso(p.until_at),
        "finishedAt": _iso(p.finished_at),
        "canceledAt": _iso(p.canceled_at),
        "month": p.month,
        "year": p.year,
        "status": p.status.value,
        "positionId": p.position_id,
        "objectiveId": p.objective_id,
        "createdBy": p.created_by,
        "updatedBy": p.updated_by,
        "createdAt": _iso(p.created_at),
        "updatedAt": _iso(p.updated_at),
    }


def _classified_row(item: ClassifiedPriority) -> Dict[str, Any]:
    row = _priority_row(item.priority)
    row["monthlyClass"] = item.monthly_class.value
    row["compliance"] = item.compliance.value
    row["compliancePct"] = item.compliance.label
    return row


def _icp_breakdown(result: IcpResult) -> Dict[str, Any]:
    b = result.buckets
    return {
        "month": result.period.month,
        "year": result.period.year,
        "totalPlanned": result.total_planned,
        "totalCompleted": result.total_completed,
        "icp": result.icp,
        "notCompletedPreviousMonths": b.not_completed_previous_months,
        "notCompletedOverdue": b.not_completed_overdue,
        "inProgress": b.in_progress,
        "completedPreviousMonths": b.completed_previous_months,
        "completedLate": b.completed_late,
        "completedInOtherMonth": b.completed_in_other_month,
        "completedOnTime": b.completed_on_time,
        "canceled": b.canceled,
        "completedEarly": b.completed_early,
    }


def _icp_payload(result: IcpResult) -> Dict[str, Any]:
    payload = _icp_breakdown(result)
    if result.position_id is not None:
        payload["positionId"] = result.position_id
    if result.objective_id is not None:
        payload["objectiveId"] = result.objective_id
    return payload


@router.get("")
def list_priorities(
    request: Request,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    position_id: Optional[str] = Query(None, alias="positionId"),
    objective_id: Optional[str] = Query(None, alias="objectiveId"),
    status: Optional[PriorityStatus] = None,
    monthly_class: Optional[MonthlyClass] = Query(None, alias="monthlyClass"),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1),
) -> Dict[str, Any]:
    """Lista clasificada y ordenada por severidad de un periodo, con su ICP."""
    try:
        result = _service(request).list(
            month=month,
            year=year,
            position_id=position_id,
            objective_id=objective_id,
            status=status,
            monthly_class=monthly_class,
            page=page,
            limit=limit,
        )
    except PeriodError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "items": [_classified_row(item) for item in result.items],
        "total": result.total,
        "page": result.page,
        "limit": result.limit,
        "icp": _icp_payload(result.icp),
    }


@router.get("/icp/series")
def icp_series(
    request: Request,
    from_: str = Query(..., alias="from", pattern=YEAR_MONTH_PATTERN),
    to: str = Query(..., pattern=YEAR_MONTH_PATTERN),
    position_id: Optional[str] = Query(None, alias="positionId"),
    objective_id: Optional[str] = Query(None, alias="objectiveId"),
) -> Dict[str, Any]:
    """Serie de ICP mes a mes entre `from` y `to` (YYYY-MM, inclusive)."""
    try:
        series = _service(request).series(from_, to, position_id, objective_id)
    except PeriodError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    payload: Dict[str, Any] = {
        "positionId": series.position_id,
        "from": series.start.label,
        "to": series.end.label,
        "items": [_icp_breakdown(item) for item in series.items],
    }
    if series.objective_id is not None:
        payload["objectiveId"] = series.objective_id
    return payload


@router.get("/icp")
def calculate_icp(
    request: Request,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    position_id: Optional[str] = Query(None, alias="positionId"),
    objective_id: Optional[str] = Query(None, alias="objectiveId"),
) -> Dict[str, Any]:
    """ICP de un periodo con su desglose por clase mensual."""
    try:
        result = _service(request).icp(month, year, position_id, objective_id)
    except PeriodError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _icp_payload(result)


@router.get("/{priority_id}")
def get_priority(
    request: Request,
    priority_id: str,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1900, le=9999),
) -> Dict[str, Any]:
    """Detalle de una prioridad con su clase mensual para el periodo pedido."""
    try:
        detail = _service(request).detail(priority_id, month, year)
    except PriorityNotFound as exc:
        raise HTTPException(status_code=404, detail="Priority not found") from exc
    except PeriodError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if detail.classified is not None:
        payload = _classified_row(detail.classified)
    else:
        payload = _priority_row(detail.priority)
        payload["monthlyClass"] = None
        payload["compliance"] = None
        payload["compliancePct"] = None
    payload["period"] = detail.period.label
    return payload
