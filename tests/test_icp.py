from __future__ import annotations

from datetime import date
from typing import List

import pytest

from priorityradar.domain.classification import classify
from priorityradar.domain.datasets import DatasetSlot, PeriodDataset, select_slot
from priorityradar.domain.icp import PeriodBuckets, build_buckets, compute_icp, icp_percentage
from priorityradar.domain.models import PeriodQuery, Priority
from priorityradar.domain.periods import Period

MARCH = Period(year=2024, month=3)
TODAY = date(2024, 3, 20)


def _classified(rows: List[Priority]):  # type: ignore[no-untyped-def]
    q = PeriodQuery(month=3, year=2024)
    dataset = PeriodDataset.from_slots({s: select_slot(rows, s, q) for s in DatasetSlot})
    return classify(dataset, MARCH, TODAY)


def test_buckets_count_each_class(march_priorities: List[Priority]) -> None:
    buckets = build_buckets(_classified(march_priorities))
    assert buckets == PeriodBuckets(
        not_completed_previous_months=1,
        not_completed_overdue=1,
        in_progress=1,
        completed_previous_months=1,
        completed_late=1,
        completed_in_other_month=1,
        completed_on_time=1,
        canceled=1,
        completed_early=1,
    )


def test_icp_numerator_and_denominator(march_priorities: List[Priority]) -> None:
    result = compute_icp(_classified(march_priorities), position_id="pos-1")
    b = result.buckets
    assert result.total_completed == 3
    assert result.total_planned == 7
    assert result.total_planned == (
        result.total_completed
        + b.not_completed_previous_months
        + b.not_completed_overdue
        + b.in_progress
        + b.completed_in_other_month
    )
    assert result.icp == 42.86
    assert result.position_id == "pos-1"
    assert result.period == MARCH


def test_icp_is_zero_without_planned() -> None:
    result = compute_icp(_classified([]))
    assert result.total_planned == 0
    assert result.total_completed == 0
    assert result.icp == 0


def test_canceled_and_early_never_enter_the_ratio() -> None:
    only_excluded = PeriodBuckets(canceled=4, completed_early=2)
    assert only_excluded.total_planned == 0
    assert only_excluded.total_completed == 0


@pytest.mark.parametrize(
    ("completed", "planned", "expected"),
    [
        (1, 3, 33.33),
        (2, 3, 66.67),
        (5, 8, 62.5),
        (1, 800, 0.13),  # half-up, not banker's rounding
        (3, 3, 100.0),
        (0, 9, 0.0),
    ],
)
def test_icp_percentage_rounds_half_up(completed: int, planned: int, expected: float) -> None:
    assert icp_percentage(completed, planned) == expected


def test_icp_percentage_bounds() -> None:
    for planned in range(1, 40):
        for completed in range(0, planned + 1):
            value = icp_percentage(completed, planned)
            assert 0 <= value <= 100
