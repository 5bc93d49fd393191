import logging
from datetime import date, datetime
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.models.booking import Booking
from app.models.dormitory import Dormitory
from app.models.hall import Hall

logger = logging.getLogger(__name__)


def _to_date(value) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            return None
    return None


def booking_covers_day(booking, day: date) -> bool:
    """Inclusive on both ends. A booking whose dates cannot be read covers nothing."""
    start, end = _to_date(getattr(booking, "start_date", None)), _to_date(getattr(booking, "end_date", None))
    if start is None or end is None:
        return False
    return start <= day <= end


def booked_item_ids(booking) -> set[str]:
    return {getattr(i, "item_id", None) for i in (getattr(booking, "items", None) or [])} - {None}


def filter_available(day: date, candidates: Iterable, bookings: Iterable) -> list:
    """Candidates not referenced by any booking covering `day`. Pure; order of candidates is kept."""
    taken: set[str] = set()
    for b in bookings:
        if booking_covers_day(b, day):
            taken |= booked_item_ids(b)
    return [c for c in candidates if c.id not in taken]


def _candidates(db: Session, category: str) -> list:
    if category == "facility":
        return db.query(Hall).filter(Hall.is_available == True).order_by(Hall.name.asc()).all()
    if category == "dormitory":
        return (
            db.query(Dormitory)
            .filter(Dormitory.is_available == True)
            .order_by(Dormitory.floor.asc(), Dormitory.room_number.asc())
            .all()
        )
    raise ValueError("category must be facility or dormitory")


def load_overlapping_bookings(db: Session, category: str, first: date, last: date) -> list[Booking]:
    # Only bookings whose span can touch [first, last]; rows without dates never conflict anyway
    stmt = (
        select(Booking)
        .options(selectinload(Booking.items))
        .where(
            Booking.category == category,
            Booking.start_date.isnot(None),
            Booking.end_date.isnot(None),
            Booking.start_date <= last,
            Booking.end_date >= first,
        )
    )
    return list(db.execute(stmt).scalars().all())


def availability_by_day(db: Session, days: list[date], category: str) -> dict[date, list]:
    """Available items per day. Each day is evaluated independently."""
    if not days:
        return {}
    candidates = _candidates(db, category)
    bookings = load_overlapping_bookings(db, category, min(days), max(days))
    logger.debug("availability: %d candidates, %d bookings, %d days", len(candidates), len(bookings), len(days))
    return {d: filter_available(d, candidates, bookings) for d in days}
