"""Modelos canonicos del dominio (Pydantic)."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, cast

from pydantic import BaseModel, Field, model_validator

from priorityradar.domain.enums import PriorityStatus


def to_utc(value: datetime) -> datetime:
    """Normaliza un datetime a UTC; los naive se interpretan como UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_date(value: datetime) -> date:
    """Fecha calendario UTC (sin hora) de un instante."""
    return to_utc(value).date()


class Priority(BaseModel):
    """Compromiso acotado en el tiempo asignado a una posicion."""

    id: str
    name: str = ""
    description: Optional[str] = None
    order: int = 0

    from_at: Optional[datetime] = None
    until_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None

    # Periodo "hogar" desnormalizado; solo sirve de pista de indice.
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = None

    status: PriorityStatus = PriorityStatus.OPEN
    position_id: str
    objective_id: Optional[str] = None
    is_active: bool = True

    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def fill_home_period(self) -> "Priority":
        """Completa month/year desde until_at (UTC) si no vienen informados."""
        if self.until_at is not None:
            until = to_utc(self.until_at)
            if self.month is None:
                self.month = until.month
            if self.year is None:
                self.year = until.year
        return self

    @property
    def until_date(self) -> Optional[date]:
        return utc_date(self.until_at) if self.until_at else None

    @property
    def finished_date(self) -> Optional[date]:
        return utc_date(self.finished_at) if self.finished_at else None

    @property
    def canceled_date(self) -> Optional[date]:
        return utc_date(self.canceled_at) if self.canceled_at else None


class PriorityDocument(BaseModel):
    """Snapshot de prioridades persistido como JSON."""

    schema_version: str = "1.0"
    generated_at: datetime
    priorities: List[Priority] = Field(default_factory=lambda: cast(List[Priority], []))


class PeriodQuery(BaseModel):
    """Consulta de un periodo con filtros de alcance opcionales."""

    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1, le=9999)
    position_id: Optional[str] = None
    objective_id: Optional[str] = None
