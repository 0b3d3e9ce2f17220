"""Resolucion de periodos mensuales y sus limites UTC.

Un periodo es un mes calendario. Todas las comparaciones del motor usan
los limites UTC del mes salvo el "hoy" de pared, que lo aporta el reloj.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


class PeriodError(ValueError):
    """Error de entrada al resolver periodos."""


class InvalidPeriod(PeriodError):
    """Mes/anio fuera de rango o texto YYYY-MM invalido."""


class InvalidRange(PeriodError):
    """Rango from/to invertido o mas largo que el maximo permitido."""


@dataclass(frozen=True, order=True)
class Period:
    """Mes calendario consultado."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidPeriod(f"month must be between 1 and 12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise InvalidPeriod(f"year out of range: {self.year}")

    @property
    def index(self) -> int:
        """Indice absoluto de mes (year * 12 + month - 1) para comparar periodos."""
        return self.year * 12 + (self.month - 1)

    @classmethod
    def from_index(cls, index: int) -> "Period":
        return cls(year=index // 12, month=index % 12 + 1)

    @classmethod
    def containing(cls, day: date) -> "Period":
        return cls(year=day.year, month=day.month)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    @property
    def start(self) -> datetime:
        """Primer instante UTC del mes."""
        return datetime(self.year, self.month, 1, tzinfo=timezone.utc)

    @property
    def end(self) -> datetime:
        """Ultimo instante UTC del mes."""
        last = self.last_day
        return datetime(last.year, last.month, last.day, 23, 59, 59, 999999, tzinfo=timezone.utc)

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def contains(self, day: date) -> bool:
        return self.first_day <= day <= self.last_day

    def is_before(self, day: date) -> bool:
        """True si `day` cae antes del primer dia del periodo."""
        return day < self.first_day

    def is_after(self, day: date) -> bool:
        """True si `day` cae despues del ultimo dia del periodo."""
        return day > self.last_day

    def next(self) -> "Period":
        return Period.from_index(self.index + 1)


def resolve_period(month: Optional[int], year: Optional[int], today: date) -> Period:
    """Periodo unico; los valores ausentes se toman del mes calendario de `today`."""
    return Period(
        year=year if year is not None else today.year,
        month=month if month is not None else today.month,
    )


def parse_year_month(value: str) -> Period:
    """Parsea un texto `YYYY-MM`."""
    match = _YEAR_MONTH_RE.match(value.strip())
    if not match:
        raise InvalidPeriod(f"expected YYYY-MM, got {value!r}")
    return Period(year=int(match.group(1)), month=int(match.group(2)))


def resolve_range(from_: str, to: str, max_months: int = 36) -> List[Period]:
    """Expande `from`..`to` (ambos inclusive) en periodos cronologicos."""
    start = parse_year_month(from_)
    end = parse_year_month(to)
    if start > end:
        raise InvalidRange(f"from ({start.label}) must not be after to ({end.label})")
    span = end.index - start.index + 1
    if span > max_months:
        raise InvalidRange(f"range spans {span} months, maximum is {max_months}")
    return [Period.from_index(i) for i in range(start.index, end.index + 1)]
