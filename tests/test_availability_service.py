from datetime import date
from types import SimpleNamespace

from app.services.availability_service import filter_available, booking_covers_day, availability_by_day
from app.models.booking import Booking, BookingItem

from conftest import make_hall, make_dorm


def cand(i):
    return SimpleNamespace(id=i)


def booking(start, end, *ids):
    return SimpleNamespace(start_date=start, end_date=end, items=[SimpleNamespace(item_id=i) for i in ids])


def test_booking_covering_the_day_excludes_its_items():
    candidates = [cand("a"), cand("b"), cand("c")]
    bookings = [booking(date(2025, 1, 1), date(2025, 1, 3), "b")]
    assert [c.id for c in filter_available(date(2025, 1, 3), candidates, bookings)] == ["a", "c"]
    assert [c.id for c in filter_available(date(2025, 1, 4), candidates, bookings)] == ["a", "b", "c"]


def test_malformed_dates_never_conflict():
    candidates = [cand("a")]
    assert filter_available(date(2025, 1, 1), candidates, [booking("not-a-date", "2025-01-05", "a")]) == candidates
    assert filter_available(date(2025, 1, 1), candidates, [booking(None, None, "a")]) == candidates


def test_string_dates_are_parsed():
    assert booking_covers_day(booking("2025-01-01", "2025-01-02"), date(2025, 1, 2))


def test_filter_is_repeatable():
    candidates = [cand("a"), cand("b")]
    bookings = [booking(date(2025, 1, 1), date(2025, 1, 1), "a")]
    first = filter_available(date(2025, 1, 1), candidates, bookings)
    assert first == filter_available(date(2025, 1, 1), candidates, bookings)


def test_availability_by_day_reads_bookings_from_the_database(db_session):
    big = make_hall(db_session, "Main Hall")
    small = make_hall(db_session, "Section A", item_type="section")
    make_hall(db_session, "Closed Hall", is_available=False)
    b = Booking(id="b1", category="facility", start_date=date(2025, 2, 1), end_date=date(2025, 2, 2),
                payment_status="pending", approval_status="pending")
    b.items.append(BookingItem(id="i1", position=0, item_id=big.id, name=big.name, item_type="hall",
                               day=date(2025, 2, 1)))
    db_session.add(b)
    db_session.commit()

    result = availability_by_day(db_session, [date(2025, 2, 1), date(2025, 2, 3)], "facility")
    assert [h.id for h in result[date(2025, 2, 1)]] == [small.id]
    assert {h.id for h in result[date(2025, 2, 3)]} == {big.id, small.id}


def test_dormitory_bookings_do_not_block_halls(db_session):
    hall = make_hall(db_session, "Main Hall")
    dorm = make_dorm(db_session, "101")
    b = Booking(id="b2", category="dormitory", start_date=date(2025, 2, 1), end_date=date(2025, 2, 1))
    b.items.append(BookingItem(id="i2", position=0, item_id=dorm.id, name=dorm.name, item_type="dormitory"))
    db_session.add(b)
    db_session.commit()

    assert [h.id for h in availability_by_day(db_session, [date(2025, 2, 1)], "facility")[date(2025, 2, 1)]] == [hall.id]
    assert availability_by_day(db_session, [date(2025, 2, 1)], "dormitory")[date(2025, 2, 1)] == []
