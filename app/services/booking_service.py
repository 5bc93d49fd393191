import logging
import uuid
from sqlalchemy.orm import Session
from app.models.user import User
from app.models.booking import Booking, BookingItem
from app.models.dormitory import Dormitory
from app.models.hall import Hall
from app.schemas.booking import FacilityBookingCreate, FacilityQuoteRequest, DormitoryBookingCreate, BookingOut, BookingItemOut
from app.services.settings_service import get_pricing
from app.services.pricing_service import aggregate_cost, resolve_day_cost
from app.services.schedule_service import build_schedule, schedule_from_request, validate_schedule, MODE_SCHEDULE
from app.services.availability_service import availability_by_day
from app.services.notification_service import dispatch_new_booking_notification

logger = logging.getLogger(__name__)


def _halls_by_id(db: Session, rows) -> dict[str, Hall]:
    ids = {i for r in rows for i in r.item_ids}
    if not ids:
        return {}
    return {h.id: h for h in db.query(Hall).filter(Hall.id.in_(ids)).all()}


def quote_facility_booking(db: Session, body: FacilityQuoteRequest) -> dict:
    """Schedule rows with per-day availability and the running total, without writing anything."""
    rows = schedule_from_request(body.startDate, body.endDate, body.schedule)
    pricing = get_pricing(db)
    halls = _halls_by_id(db, rows)
    available = availability_by_day(db, [r.day for r in rows], "facility")
    total = aggregate_cost(rows, halls, pricing, body.numberOfAttendees, body.lunch, body.refreshment)
    return {
        "days": [
            {
                "date": r.day.isoformat(),
                "itemIds": r.item_ids,
                "available": [{"id": h.id, "name": h.name, "itemType": h.item_type,
                               "rentalCost": resolve_day_cost(h, pricing)} for h in available.get(r.day, [])],
            }
            for r in rows
        ],
        "missingDays": [r.day.isoformat() for r in rows if not r.item_ids],
        "totalCost": total,
    }


def submit_facility_booking(db: Session, body: FacilityBookingCreate, booker: User, mode: str = MODE_SCHEDULE) -> Booking:
    rows = schedule_from_request(body.startDate, body.endDate, body.schedule)
    validate_schedule(rows, mode)

    pricing = get_pricing(db)
    halls = _halls_by_id(db, rows)
    busy_days = [r.day for r in rows if r.item_ids]
    available = {d: {h.id for h in hs} for d, hs in availability_by_day(db, busy_days, "facility").items()}

    for r in rows:
        for item_id in r.item_ids:
            hall = halls.get(item_id)
            if hall is None:
                raise ValueError(f"facility not found: {item_id}")
            if item_id not in available.get(r.day, set()):
                raise ValueError(f"{hall.name} is not available on {r.day.isoformat()}")

    total = aggregate_cost(rows, halls, pricing, body.numberOfAttendees, body.lunch, body.refreshment)

    booking = Booking(
        id=str(uuid.uuid4()),
        category="facility",
        user_id=booker.id,
        company_id=booker.company_id,
        company_name=body.companyName,
        contact_person=body.contactPerson,
        email=str(body.email),
        phone=body.phone,
        start_date=body.startDate,
        end_date=body.endDate,
        number_of_attendees=body.numberOfAttendees,
        lunch_tier=body.lunch,
        refreshment_tier=body.refreshment,
        notes=body.notes or "",
        total_cost=total,
        payment_status="pending",
        approval_status="pending",
        agreement_status="pending_admin_action",
    )
    pos = 0
    for r in rows:
        for item_id in r.item_ids:
            hall = halls[item_id]
            booking.items.append(BookingItem(
                id=str(uuid.uuid4()),
                position=pos,
                item_id=hall.id,
                name=hall.name,
                item_type=hall.item_type,
                day=r.day,
                rental_cost=resolve_day_cost(hall, pricing),
            ))
            pos += 1
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("facility booking %s created for %s: %d items, total %d", booking.id, booking.company_name, pos, total)

    dispatch_new_booking_notification(booking.id)
    return booking


def submit_dormitory_booking(db: Session, body: DormitoryBookingCreate, booker: User | None = None) -> Booking:
    rows = build_schedule(body.startDate, body.endDate)
    days = [r.day for r in rows]
    ids = list(dict.fromkeys(body.dormitoryIds))

    dorms = {d.id: d for d in db.query(Dormitory).filter(Dormitory.id.in_(ids)).all()}
    for i in ids:
        if i not in dorms:
            raise ValueError(f"dormitory not found: {i}")
        if not dorms[i].is_available:
            raise ValueError(f"dormitory {dorms[i].room_number} is currently not available for booking")

    available = availability_by_day(db, days, "dormitory")
    for d in days:
        free = {x.id for x in available.get(d, [])}
        for i in ids:
            if i not in free:
                raise ValueError(f"dormitory {dorms[i].room_number} is already booked on {d.isoformat()}")

    pricing = get_pricing(db)
    day_costs = {i: resolve_day_cost(dorms[i], pricing) for i in ids}
    total = sum(day_costs.values()) * len(days)

    booking = Booking(
        id=str(uuid.uuid4()),
        category="dormitory",
        user_id=booker.id if booker else None,
        guest_name=body.guestName,
        guest_employer=body.guestEmployer,
        email=body.email or "",
        phone=body.phone,
        payer_bank_name=body.payerBankName,
        payer_account_number=body.payerAccountNumber,
        start_date=body.startDate,
        end_date=body.endDate,
        number_of_attendees=1,
        notes=body.notes or "",
        total_cost=total,
        payment_status="pending_transfer",
        approval_status="pending",
        key_status="not_issued",
    )
    for pos, i in enumerate(ids):
        booking.items.append(BookingItem(
            id=str(uuid.uuid4()),
            position=pos,
            item_id=i,
            name=dorms[i].name,
            item_type="dormitory",
            rental_cost=day_costs[i],
        ))
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("dormitory booking %s created for %s: %d rooms x %d days, total %d",
                booking.id, booking.guest_name, len(ids), len(days), total)

    dispatch_new_booking_notification(booking.id)
    return booking


def booking_out(b: Booking) -> BookingOut:
    return BookingOut(
        id=b.id,
        category=b.category,
        items=[BookingItemOut(id=i.item_id, name=i.name, itemType=i.item_type, date=i.day, rentalCost=i.rental_cost) for i in b.items],
        startDate=b.start_date,
        endDate=b.end_date,
        requesterName=b.requester_name,
        companyName=b.company_name or "",
        contactPerson=b.contact_person or "",
        guestName=b.guest_name or "",
        email=b.email or "",
        phone=b.phone or "",
        numberOfAttendees=b.number_of_attendees or 1,
        lunch=b.lunch_tier or "none",
        refreshment=b.refreshment_tier or "none",
        totalCost=b.total_cost,
        paymentStatus=b.payment_status,
        approvalStatus=b.approval_status,
        agreementStatus=b.agreement_status,
        keyStatus=b.key_status,
        signedAgreementUrl=b.signed_agreement_url,
        paymentScreenshotUrl=b.payment_screenshot_url,
        version=b.version or 1,
        createdAt=b.created_at.isoformat() if b.created_at else "",
    )
