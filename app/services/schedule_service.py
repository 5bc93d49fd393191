from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

MODE_SCHEDULE = "schedule"  # every day needs at least one facility
MODE_CART = "cart"          # at least one facility somewhere in the range


@dataclass
class ScheduleRow:
    day: date
    item_ids: list[str] = field(default_factory=list)


def build_schedule(start: date, end: date, previous: Iterable[ScheduleRow] | None = None) -> list[ScheduleRow]:
    """One row per calendar day, both ends inclusive.

    Assignments from `previous` survive for days still in the range; the rest are dropped.
    """
    if start > end:
        raise ValueError("start date must not be after end date")
    span = (end - start).days + 1
    kept = {r.day: list(r.item_ids) for r in (previous or [])}
    rows = []
    for i in range(span):
        d = start + timedelta(days=i)
        rows.append(ScheduleRow(day=d, item_ids=kept.get(d, [])))
    return rows


def validate_schedule(rows: list[ScheduleRow], mode: str = MODE_SCHEDULE) -> None:
    if not rows:
        raise ValueError("Please add at least one day to the schedule.")
    if mode == MODE_SCHEDULE:
        missing = [r.day.isoformat() for r in rows if not r.item_ids]
        if missing:
            raise ValueError("Please select at least one facility for: " + ", ".join(missing))
    elif mode == MODE_CART:
        if not any(r.item_ids for r in rows):
            raise ValueError("Please assign at least one facility.")
    else:
        raise ValueError("mode must be schedule or cart")


def schedule_from_request(start: date, end: date, days) -> list[ScheduleRow]:
    """Lay the submitted per-day assignments onto the date range; days outside the range are ignored."""
    submitted = [ScheduleRow(day=d.date, item_ids=_unique(d.itemIds)) for d in days]
    return build_schedule(start, end, previous=submitted)


def _unique(ids: list[str]) -> list[str]:
    seen, out = set(), []
    for i in ids:
        if i and i not in seen:
            seen.add(i)
            out.append(i)
    return out
