"""
Booking status actions.

Each axis (payment, approval, agreement, key) is a plain column. Actions are applied one at a
time through `_apply`, which rejects redundant changes, checks the optional version token,
bumps `Booking.version` and records an audit row in the same commit. There is no global
state machine: any combination of statuses can be reached.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.errors import StatusConflictError
from app.models.booking import Booking
from app.models.user import User
from app.services.audit_service import log_change, snapshot
from app.services.settings_service import get_agreement_template
from app.services.notification_service import notify_keyholders_of_dorm_approval, booking_building

logger = logging.getLogger(__name__)

_TRACKED = ("payment_status", "approval_status", "agreement_status", "key_status", "version")


def can_manage_booking(db: Session, user: User, b: Booking) -> bool:
    if user.is_general_admin:
        return True
    if user.role == "admin" and user.building_assignment:
        return b.category == "dormitory" and booking_building(db, b) == user.building_assignment
    return False


def _apply(db: Session, b: Booking, actor: User, action: str, changes: dict, expected_version: int | None = None) -> Booking:
    if expected_version is not None and expected_version != b.version:
        raise StatusConflictError(f"booking was modified by someone else (version {b.version}, expected {expected_version})")
    if all(getattr(b, k) == v for k, v in changes.items()):
        raise StatusConflictError(f"{action}: booking already in that state")
    before = snapshot(b, _TRACKED)
    for k, v in changes.items():
        setattr(b, k, v)
    b.version = (b.version or 1) + 1
    log_change(db, actor.id, f"booking.{action}", "booking", b.id, before, snapshot(b, _TRACKED))
    db.commit()
    db.refresh(b)
    logger.info("booking %s: %s by %s -> v%d", b.id, action, actor.email, b.version)
    return b


def _require_category(b: Booking, category: str, action: str):
    if b.category != category:
        raise StatusConflictError(f"{action} only applies to {category} bookings")


def approve(db: Session, b: Booking, actor: User, expected_version: int | None = None) -> Booking:
    if b.approval_status == "approved":
        raise StatusConflictError("booking is already approved")
    changes = {"approval_status": "approved"}
    if b.category == "facility":
        changes.update(
            agreement_status="sent_to_client",
            agreement_sent_at=datetime.now(timezone.utc),
            agreement_terms=get_agreement_template(db).defaultTerms,
        )
    b = _apply(db, b, actor, "approve", changes, expected_version)
    if b.category == "dormitory":
        notify_keyholders_of_dorm_approval(db, b)
    return b


def reject(db: Session, b: Booking, actor: User, expected_version: int | None = None) -> Booking:
    if b.approval_status == "rejected":
        raise StatusConflictError("booking is already rejected")
    return _apply(db, b, actor, "reject", {"approval_status": "rejected", "payment_status": "failed"}, expected_version)


def set_approval_pending(db: Session, b: Booking, actor: User, expected_version: int | None = None) -> Booking:
    _require_category(b, "dormitory", "reset approval")
    return _apply(db, b, actor, "approval_pending", {"approval_status": "pending"}, expected_version)


def mark_paid(db: Session, b: Booking, actor: User, expected_version: int | None = None) -> Booking:
    if b.payment_status == "paid":
        raise StatusConflictError("booking is already paid")
    return _apply(db, b, actor, "mark_paid", {"payment_status": "paid"}, expected_version)


def verify_payment(db: Session, b: Booking, actor: User, status: str, expected_version: int | None = None) -> Booking:
    if b.payment_status != "awaiting_verification":
        raise StatusConflictError("no payment proof is awaiting verification")
    if status not in ("paid", "failed"):
        raise ValueError("status must be paid or failed")
    return _apply(db, b, actor, f"verify_payment_{status}", {"payment_status": status}, expected_version)


def approve_payment(db: Session, b: Booking, actor: User, expected_version: int | None = None) -> Booking:
    """Payment confirmed and booking approved in one step."""
    was_approved = b.approval_status == "approved"
    b = _apply(db, b, actor, "approve_payment", {"payment_status": "paid", "approval_status": "approved"}, expected_version)
    if b.category == "dormitory" and not was_approved:
        notify_keyholders_of_dorm_approval(db, b)
    return b


def set_agreement_status(db: Session, b: Booking, actor: User, status: str, expected_version: int | None = None) -> Booking:
    _require_category(b, "facility", "agreement status")
    changes: dict = {"agreement_status": status}
    if b.agreement_status == status:
        raise StatusConflictError(f"agreement is already {status}")
    if status == "sent_to_client":
        changes["agreement_sent_at"] = datetime.now(timezone.utc)
        if not b.agreement_terms:
            changes["agreement_terms"] = get_agreement_template(db).defaultTerms
    elif status == "signed_by_client":
        changes["agreement_signed_at"] = datetime.now(timezone.utc)
    return _apply(db, b, actor, f"agreement_{status}", changes, expected_version)


def set_key_status(db: Session, b: Booking, actor: User, status: str, expected_version: int | None = None) -> Booking:
    _require_category(b, "dormitory", "key status")
    current = b.key_status or "not_issued"
    if status == "issued" and current == "issued":
        raise StatusConflictError("key is already issued")
    if status == "returned" and current in ("returned", "not_issued"):
        raise StatusConflictError("key cannot be returned before it is issued")
    if status not in ("issued", "returned"):
        raise ValueError("status must be issued or returned")
    return _apply(db, b, actor, f"key_{status}", {"key_status": status}, expected_version)


def ensure_agreement_uploadable(b: Booking):
    _require_category(b, "facility", "signed agreement upload")
    if b.agreement_status not in ("sent_to_client", "signed_by_client"):
        raise StatusConflictError("agreement has not been sent to the client yet")


def record_signed_agreement(db: Session, b: Booking, actor: User, url: str) -> Booking:
    ensure_agreement_uploadable(b)
    before = snapshot(b, _TRACKED)
    b.signed_agreement_url = url
    b.agreement_status = "signed_by_client"
    b.agreement_signed_at = datetime.now(timezone.utc)
    b.version = (b.version or 1) + 1
    log_change(db, actor.id, "booking.agreement_uploaded", "booking", b.id, before, snapshot(b, _TRACKED))
    db.commit()
    db.refresh(b)
    return b
