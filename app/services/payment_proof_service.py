"""
Payment proof upload: host the screenshot, mirror it to Airtable, then mark the booking
as awaiting verification and tell the admins of the booking's building.

The upload and the mirror must both succeed before the booking is touched. Recipient lookup
and notifications are best effort.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, StatusConflictError
from app.models.booking import Booking
from app.services.airtable_client import get_airtable_client
from app.services.audit_service import log_change, snapshot
from app.services.media_client import upload_file
from app.services.notification_service import booking_building, notify_payment_proof_uploaded
from app.services.sms_service import phones_for_roles

logger = logging.getLogger(__name__)

PAYMENT_PROOF_FOLDER = "payment_screenshots"


def _recipient_phones(db: Session, building: str | None) -> list[str]:
    try:
        if building:
            return phones_for_roles(db, ("admin",), building=building)
        return phones_for_roles(db, ("admin", "superadmin"))
    except Exception:
        logger.exception("could not look up payment proof recipients for building %s", building)
        return []


def submit_payment_proof(db: Session, booking_id: str, content: bytes, filename: str) -> Booking:
    b = db.get(Booking, booking_id)
    if not b:
        raise NotFoundError("booking not found")
    if b.payment_status == "paid":
        raise StatusConflictError("booking is already paid")

    url = upload_file(content, filename, PAYMENT_PROOF_FOLDER)

    building = booking_building(db, b)
    phones = _recipient_phones(db, building)
    record = get_airtable_client().create_record({
        "Booking ID": b.id,
        "Screenshot": [{"url": url}],
        "Original Filename": filename or "",
        "Recipient phones": ", ".join(phones),
        "Date": datetime.now(timezone.utc).date().isoformat(),
    })

    before = snapshot(b, ("payment_status", "payment_screenshot_url", "version"))
    b.payment_screenshot_url = url
    b.payment_screenshot_record_id = record["id"]
    b.payment_status = "awaiting_verification"
    b.version = (b.version or 1) + 1
    log_change(db, "", "booking.payment_proof_uploaded", "booking", b.id, before,
               snapshot(b, ("payment_status", "payment_screenshot_url", "version")))
    db.commit()
    db.refresh(b)
    logger.info("payment proof for booking %s stored (record %s)", b.id, record["id"])

    notify_payment_proof_uploaded(db, b, building, phones)
    return b
