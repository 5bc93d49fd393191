import logging
import re
import uuid
from datetime import datetime, timezone

import requests
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ServiceNotConfigured
from app.models.sms_message import SmsMessage
from app.models.user import User

logger = logging.getLogger(__name__)

_ET_MOBILE = re.compile(r"^\+251[79]\d{8}$")


class SmsError(RuntimeError):
    pass


def normalize_phone(raw: str) -> str:
    """Normalize an Ethiopian mobile number to +2519XXXXXXXX / +2517XXXXXXXX."""
    p = re.sub(r"[\s\-()]", "", raw or "")
    if p.startswith("0"):
        p = "+251" + p[1:]
    elif p.startswith("251"):
        p = "+" + p
    elif len(p) == 9 and p[0] in "79":
        p = "+251" + p
    if not _ET_MOBILE.match(p):
        raise SmsError(f"Invalid phone number format for SMS: {raw}")
    return p


def send_sms(to: str, message: str) -> None:
    """Send one SMS via Afro Messaging. Raises on any failure."""
    missing = [k for k in ("AFRO_MESSAGING_API_KEY", "AFRO_MESSAGING_SENDER_ID") if not getattr(settings, k)]
    if missing:
        raise ServiceNotConfigured("SMS service", missing)
    phone = normalize_phone(to)
    r = requests.post(
        settings.AFRO_MESSAGING_URL,
        json={"to": phone, "sender": settings.AFRO_MESSAGING_SENDER_ID, "message": message},
        headers={
            "Authorization": f"Bearer {settings.AFRO_MESSAGING_API_KEY}",
            "Accept": "application/json",
        },
        timeout=20,
    )
    if r.status_code >= 400:
        raise SmsError(f"SMS provider responded with HTTP error {r.status_code}.")
    try:
        data = r.json()
    except ValueError:
        raise SmsError(f"SMS provider returned a non-JSON body: {r.text[:200]}")
    # a 2xx can still carry a logical failure
    if data.get("acknowledge") != "success":
        reason = (data.get("response") or {}).get("message") if isinstance(data.get("response"), dict) else data.get("response")
        raise SmsError(f"SMS provider rejected the message: {reason}")


def queue_sms(db: Session, to_phone: str, body: str, related_booking_id: str = "") -> str:
    """Record the message in the outbox and hand it to the worker. Never raises for delivery problems."""
    sid = str(uuid.uuid4())
    db.add(SmsMessage(id=sid, to_phone=to_phone, body=body, status="queued", related_booking_id=related_booking_id))
    db.commit()
    try:
        from app.tasks.jobs import send_sms_message
        send_sms_message.delay(sid)
    except Exception as e:
        logger.warning("could not enqueue sms %s: %s", sid, e)
        msg = db.get(SmsMessage, sid)
        if msg and msg.status == "queued":
            msg.status = "failed"
            msg.error = f"enqueue failed: {e}"[:500]
            db.commit()
    return sid


def deliver_sms(db: Session, message_id: str) -> str:
    """Send a queued outbox message once. Returns the final status."""
    msg = db.get(SmsMessage, message_id)
    if not msg:
        return "missing"
    if msg.status != "queued":
        return msg.status
    try:
        send_sms(msg.to_phone, msg.body)
        msg.status = "sent"
        msg.sent_at = datetime.now(timezone.utc)
    except Exception as e:
        logger.warning("sms %s to %s failed: %s", msg.id, msg.to_phone, e)
        msg.status = "failed"
        msg.error = str(e)[:500]
    db.commit()
    return msg.status


def phones_for_roles(db: Session, roles: tuple[str, ...], building: str | None = None) -> list[str]:
    q = db.query(User.phone).filter(User.role.in_(roles), User.is_active == True)
    if building:
        q = q.filter(User.building_assignment == building)
    seen, out = set(), []
    for (phone,) in q.all():
        p = (phone or "").strip()
        if p and p not in seen:
            seen.add(p)
            out.append(p)
    return out
