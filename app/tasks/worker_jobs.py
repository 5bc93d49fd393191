import logging

from sqlalchemy.orm import Session
from sqlalchemy.exc import ProgrammingError
from app.db.session import SessionLocal
from app.models.booking import Booking
from app.services.sms_service import deliver_sms
from app.services import notification_service

logger = logging.getLogger(__name__)


def send_sms_message(message_id: str) -> dict:
    db: Session = SessionLocal()
    try:
        try:
            status = deliver_sms(db, message_id)
        except ProgrammingError:
            # DB not migrated yet; don't crash the worker.
            db.rollback()
            return {"skipped": True, "reason": "missing_tables"}
        return {"id": message_id, "status": status}
    finally:
        db.close()


def notify_admins_of_new_booking(booking_id: str) -> dict:
    db: Session = SessionLocal()
    try:
        b = db.get(Booking, booking_id)
        if not b:
            logger.warning("notify_admins_of_new_booking: booking %s not found", booking_id)
            return {"skipped": True, "reason": "booking_not_found"}
        sent = notification_service.notify_admins_of_new_booking(db, b)
        return {"bookingId": booking_id, "sms": sent}
    finally:
        db.close()
