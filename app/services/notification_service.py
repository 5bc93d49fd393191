"""
Best-effort side channel: web notifications for the admin dashboard plus SMS via the outbox.

Nothing here may fail the operation that triggered it. Every public function catches,
logs and returns; delivery is at most once.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from app.models.booking import Booking
from app.models.dormitory import Dormitory
from app.models.notification import AdminNotification
from app.services.sms_service import queue_sms, phones_for_roles

logger = logging.getLogger(__name__)


def _short(booking_id: str) -> str:
    return booking_id[:6] + "..."


def _item_names(b: Booking) -> str:
    seen = []
    for i in b.items:
        if i.name not in seen:
            seen.append(i.name)
    return ", ".join(seen)


def booking_building(db: Session, b: Booking) -> str | None:
    """Building of the first booked room; facility bookings belong to no building."""
    if b.category != "dormitory" or not b.items:
        return None
    dorm = db.get(Dormitory, b.items[0].item_id)
    return dorm.building_name if dorm else None


def create_web_notification(db: Session, message: str, type_: str, related_id: str, link: str,
                            recipient_role: str = "admin", building: str | None = None) -> str:
    nid = str(uuid.uuid4())
    db.add(AdminNotification(
        id=nid, message=message, type=type_, related_id=related_id,
        recipient_role=recipient_role, building=building, link=link, is_read=False,
    ))
    db.commit()
    return nid


def dispatch_new_booking_notification(booking_id: str) -> None:
    """Fire-and-forget hand-off to the worker right after a booking is committed."""
    try:
        from app.tasks.jobs import notify_admins_of_new_booking
        notify_admins_of_new_booking.delay(booking_id)
    except Exception:
        logger.exception("could not dispatch new-booking notification for %s", booking_id)


def notify_admins_of_new_booking(db: Session, b: Booking) -> int:
    """Web notification plus SMS to every admin/superadmin. Returns the number of SMS queued."""
    try:
        customer = b.requester_name
        items = _item_names(b)
        web_message = f"New booking from {customer} for {items}. Total: {b.total_cost} ETB. ID: {_short(b.id)}"
        sms_message = f"New Booking!\nID: {_short(b.id)}\nItem: {items}\nCustomer: {customer}\nTotal: {b.total_cost} ETB"

        phones = phones_for_roles(db, ("admin", "superadmin"))
        if not phones:
            logger.info("no admin phone numbers; new booking SMS for %s not sent", b.id)
        for phone in phones:
            queue_sms(db, phone, sms_message, related_booking_id=b.id)

        if b.category == "dormitory":
            type_, link = "new_dormitory_booking", f"/admin/manage-dormitory-bookings#{b.id}"
        else:
            type_, link = "new_facility_booking", f"/admin/manage-facility-bookings#{b.id}"
        create_web_notification(db, web_message, type_, b.id, link, building=booking_building(db, b))
        return len(phones)
    except Exception:
        db.rollback()
        logger.exception("notify_admins_of_new_booking failed for %s", b.id)
        return 0


def notify_keyholders_of_dorm_approval(db: Session, b: Booking) -> int:
    if b.category != "dormitory":
        return 0
    try:
        phones = phones_for_roles(db, ("keyholder",))
        if not phones:
            logger.info("no keyholder phone numbers; approval SMS for %s not sent", b.id)
            return 0
        check_in = b.start_date.strftime("%b %d") if b.start_date else "N/A"
        message = (
            f"Booking Approved!\nGuest: {b.guest_name or 'Unknown Guest'}\nRoom: {_item_names(b)}\n"
            f"Check-in: {check_in}\nPlease prepare for key handover."
        )
        for phone in phones:
            queue_sms(db, phone, message, related_booking_id=b.id)
        return len(phones)
    except Exception:
        db.rollback()
        logger.exception("notify_keyholders_of_dorm_approval failed for %s", b.id)
        return 0


def notify_payment_proof_uploaded(db: Session, b: Booking, building: str | None, recipient_phones: list[str]) -> None:
    try:
        message = f"Payment proof uploaded for booking {_short(b.id)} ({b.requester_name}). Please verify."
        for phone in recipient_phones:
            queue_sms(db, phone, message, related_booking_id=b.id)
        create_web_notification(db, message, "payment_proof_uploaded", b.id,
                                f"/admin/manage-dormitory-bookings#{b.id}", building=building)
    except Exception:
        db.rollback()
        logger.exception("notify_payment_proof_uploaded failed for %s", b.id)
