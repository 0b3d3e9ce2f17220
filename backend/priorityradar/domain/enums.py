"""Enums de dominio para estado, clase mensual y cumplimiento de prioridades."""

from __future__ import annotations

from enum import Enum


class PriorityStatus(str, Enum):
    """Estados de vida persistidos de una prioridad."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CANCELED = "CANCELED"


class MonthlyClass(str, Enum):
    """Clase mensual (derivada, nunca persistida) de una prioridad frente a un periodo."""

    OVERDUE_CARRIED_FROM_EARLIER = "OVERDUE_CARRIED_FROM_EARLIER"
    OVERDUE_THIS_PERIOD = "OVERDUE_THIS_PERIOD"
    OPEN = "OPEN"
    COMPLETED_LATE_THIS_PERIOD = "COMPLETED_LATE_THIS_PERIOD"
    COMPLETED_CARRIED_FROM_EARLIER = "COMPLETED_CARRIED_FROM_EARLIER"
    COMPLETED_IN_LATER_PERIOD = "COMPLETED_IN_LATER_PERIOD"
    COMPLETED_ON_TIME = "COMPLETED_ON_TIME"
    CANCELED = "CANCELED"


class ComplianceFlag(str, Enum):
    """Cumplimiento de una prioridad dentro del periodo evaluado."""

    MET = "MET"
    NOT_MET = "NOT_MET"
    NOT_APPLICABLE = "NOT_APPLICABLE"

    @property
    def label(self) -> str:
        """Etiqueta porcentual usada por el frontend ("100%", "0%", "-")."""
        return _COMPLIANCE_LABELS[self]


_COMPLIANCE_LABELS = {
    ComplianceFlag.MET: "100%",
    ComplianceFlag.NOT_MET: "0%",
    ComplianceFlag.NOT_APPLICABLE: "-",
}

# Orden de severidad para listados: primero lo que mas penaliza.
MONTHLY_CLASS_ORDER: tuple[MonthlyClass, ...] = (
    MonthlyClass.OVERDUE_CARRIED_FROM_EARLIER,
    MonthlyClass.OVERDUE_THIS_PERIOD,
    MonthlyClass.OPEN,
    MonthlyClass.COMPLETED_LATE_THIS_PERIOD,
    MonthlyClass.COMPLETED_CARRIED_FROM_EARLIER,
    MonthlyClass.COMPLETED_IN_LATER_PERIOD,
    MonthlyClass.COMPLETED_ON_TIME,
    MonthlyClass.CANCELED,
)

COMPLIANCE_BY_CLASS: dict[MonthlyClass, ComplianceFlag] = {
    MonthlyClass.OVERDUE_CARRIED_FROM_EARLIER: ComplianceFlag.NOT_MET,
    MonthlyClass.OVERDUE_THIS_PERIOD: ComplianceFlag.NOT_MET,
    MonthlyClass.OPEN: ComplianceFlag.NOT_APPLICABLE,
    MonthlyClass.COMPLETED_LATE_THIS_PERIOD: ComplianceFlag.MET,
    MonthlyClass.COMPLETED_CARRIED_FROM_EARLIER: ComplianceFlag.MET,
    MonthlyClass.COMPLETED_IN_LATER_PERIOD: ComplianceFlag.NOT_APPLICABLE,
    MonthlyClass.COMPLETED_ON_TIME: ComplianceFlag.MET,
    MonthlyClass.CANCELED: ComplianceFlag.NOT_APPLICABLE,
}
