"""CLI para consultar ICP, series y listados desde terminal."""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

import uvicorn

from priorityradar.config import settings
from priorityradar.domain.clock import SystemClock
from priorityradar.domain.enums import MonthlyClass, PriorityStatus
from priorityradar.domain.periods import PeriodError
from priorityradar.logging_utils import configure_logging, get_logger
from priorityradar.repositories import PrioritiesRepo
from priorityradar.services import ComplianceService


@dataclass(frozen=True)
class Exit:
    code: int = 0


def _service() -> ComplianceService:
    repo = PrioritiesRepo(settings.priorities_path)
    return ComplianceService(repo, settings, SystemClock(settings.app_tz))


def _print(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def cmd_icp(
    month: Optional[int], year: Optional[int], position: Optional[str], objective: Optional[str]
) -> Exit:
    result = _service().icp(month, year, position, objective)
    b = result.buckets
    _print(
        {
            "period": result.period.label,
            "positionId": result.position_id,
            "objectiveId": result.objective_id,
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
    )
    return Exit(0)


def cmd_series(from_: str, to: str, position: Optional[str], objective: Optional[str]) -> Exit:
    series = _service().series(from_, to, position, objective)
    _print(
        {
            "from": series.start.label,
            "to": series.end.label,
            "positionId": series.position_id,
            "objectiveId": series.objective_id,
            "items": [
                {
                    "period": item.period.label,
                    "icp": item.icp,
                    "totalPlanned": item.total_planned,
                    "totalCompleted": item.total_completed,
                }
                for item in series.items
            ],
        }
    )
    return Exit(0)


def cmd_list(
    month: Optional[int],
    year: Optional[int],
    position: Optional[str],
    objective: Optional[str],
    status: Optional[str],
    monthly_class: Optional[str],
    page_number: int = 1,
    limit: Optional[int] = None,
) -> Exit:
    page = _service().list(
        month=month,
        year=year,
        position_id=position,
        objective_id=objective,
        status=PriorityStatus(status) if status else None,
        monthly_class=MonthlyClass(monthly_class) if monthly_class else None,
        page=page_number,
        limit=limit if limit is not None else settings.list_page_size_max,
    )
    for item in page.items:
        until = item.priority.until_date
        print(
            f"{item.monthly_class.value:<32} {item.compliance.label:>4}  "
            f"{until.isoformat() if until else '-':<10}  {item.priority.id}  {item.priority.name}"
        )
    first = (page.page - 1) * page.limit + 1 if page.items else 0
    last = first + len(page.items) - 1 if page.items else 0
    print(
        f"[OK] showing {first}-{last} of {page.total} priorities (page {page.page}), "
        f"ICP {page.icp.icp}% ({page.icp.period.label})"
    )
    return Exit(0)


def cmd_serve(host: str, port: int) -> Exit:
    uvicorn.run("priorityradar.api.main:app", host=host, port=port, reload=True)
    return Exit(0)


def _add_scope(p: argparse.ArgumentParser) -> None:
    p.add_argument("--position", default=None, help="positionId")
    p.add_argument("--objective", default=None, help="objectiveId")


def _add_period(p: argparse.ArgumentParser) -> None:
    p.add_argument("--month", type=int, default=None)
    p.add_argument("--year", type=int, default=None)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="prr", description="Priority Compliance Radar CLI")
    sub = p.add_subparsers(dest="cmd", required=True)

    ip = sub.add_parser("icp", help="ICP de un mes (por defecto el actual)")
    _add_period(ip)
    _add_scope(ip)

    sp = sub.add_parser("series", help="Serie mensual de ICP entre dos meses YYYY-MM")
    sp.add_argument("--from", dest="from_", required=True)
    sp.add_argument("--to", required=True)
    _add_scope(sp)

    lp = sub.add_parser("list", help="Prioridades clasificadas de un mes")
    _add_period(lp)
    _add_scope(lp)
    lp.add_argument("--status", choices=[s.value for s in PriorityStatus], default=None)
    lp.add_argument(
        "--class", dest="monthly_class", choices=[m.value for m in MonthlyClass], default=None
    )
    lp.add_argument("--page", type=int, default=1)
    lp.add_argument("--limit", type=int, default=None, help="por defecto LIST_PAGE_SIZE_MAX")

    srv = sub.add_parser("serve", help="Serve FastAPI")
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)

    return p


def main(argv: Sequence[str] | None = None) -> None:
    configure_logging(force=True)
    logger = get_logger(__name__)
    args = build_parser().parse_args(argv)

    started = datetime.now().astimezone()
    logger.info("%s - %s", settings.app_name, started.isoformat())

    try:
        if args.cmd == "icp":
            raise SystemExit(cmd_icp(args.month, args.year, args.position, args.objective).code)
        if args.cmd == "series":
            raise SystemExit(cmd_series(args.from_, args.to, args.position, args.objective).code)
        if args.cmd == "list":
            raise SystemExit(
                cmd_list(
                    args.month,
                    args.year,
                    args.position,
                    args.objective,
                    args.status,
                    args.monthly_class,
                    args.page,
                    args.limit,
                ).code
            )
        if args.cmd == "serve":
            raise SystemExit(cmd_serve(args.host, args.port).code)
    except PeriodError as exc:
        logger.error("Invalid period: %s", exc)
        print(f"[ERROR] {exc}")
        raise SystemExit(2) from exc

    raise SystemExit(2)


if __name__ == "__main__":
    main()
