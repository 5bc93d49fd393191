from datetime import date

import pytest

from app.services.schedule_service import (
    build_schedule, validate_schedule, schedule_from_request, ScheduleRow, MODE_CART, MODE_SCHEDULE,
)
from app.schemas.booking import ScheduleDayIn


def test_three_day_span_yields_three_rows():
    rows = build_schedule(date(2025, 5, 1), date(2025, 5, 3))
    assert [r.day for r in rows] == [date(2025, 5, 1), date(2025, 5, 2), date(2025, 5, 3)]
    assert all(r.item_ids == [] for r in rows)


def test_multi_year_span_has_one_row_per_day():
    rows = build_schedule(date(2024, 1, 1), date(2025, 12, 31))
    assert len(rows) == 731
    assert rows[-1].day == date(2025, 12, 31)


def test_single_day_range():
    assert len(build_schedule(date(2025, 5, 1), date(2025, 5, 1))) == 1


def test_start_after_end_is_rejected():
    with pytest.raises(ValueError):
        build_schedule(date(2025, 5, 3), date(2025, 5, 1))


def test_rebuild_keeps_assignments_for_surviving_days():
    previous = [ScheduleRow(date(2025, 5, 1), ["a"]), ScheduleRow(date(2025, 5, 2), ["b"])]
    rows = build_schedule(date(2025, 5, 2), date(2025, 5, 4), previous)
    assert [(r.day, r.item_ids) for r in rows] == [
        (date(2025, 5, 2), ["b"]), (date(2025, 5, 3), []), (date(2025, 5, 4), []),
    ]


def test_schedule_mode_requires_every_day():
    rows = [ScheduleRow(date(2025, 5, 1), ["a"]), ScheduleRow(date(2025, 5, 2), [])]
    with pytest.raises(ValueError, match="2025-05-02"):
        validate_schedule(rows, MODE_SCHEDULE)
    validate_schedule(rows, MODE_CART)


def test_cart_mode_requires_one_assignment():
    with pytest.raises(ValueError):
        validate_schedule([ScheduleRow(date(2025, 5, 1), [])], MODE_CART)


def test_request_days_outside_range_are_ignored_and_ids_deduplicated():
    days = [ScheduleDayIn(date=date(2025, 5, 1), itemIds=["a", "a", "b"]),
            ScheduleDayIn(date=date(2025, 6, 1), itemIds=["c"])]
    rows = schedule_from_request(date(2025, 5, 1), date(2025, 5, 2), days)
    assert rows[0].item_ids == ["a", "b"]
    assert rows[1].item_ids == []
