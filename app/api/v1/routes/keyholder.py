from datetime import date
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from app.db.session import get_db
from app.api.deps import require_roles, to_http
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import BookingOut, KeyStatusIn
from app.services import status_service
from app.services.booking_service import booking_out

router = APIRouter(tags=["keyholder"])

_KEY_ROLES = ("keyholder", "admin", "superadmin")


def _approved_dorm_bookings(db: Session):
    return (
        db.query(Booking)
        .options(selectinload(Booking.items))
        .filter(Booking.category == "dormitory", Booking.approval_status == "approved")
    )


@router.get("/keyholder/bookings", response_model=list[BookingOut])
def approved_bookings(keyStatus: str | None = None, db: Session = Depends(get_db),
                      me: User = Depends(require_roles(*_KEY_ROLES))):
    q = _approved_dorm_bookings(db)
    if keyStatus:
        q = q.filter(Booking.key_status == keyStatus)
    return [booking_out(b) for b in q.order_by(Booking.start_date.asc()).all()]


@router.post("/keyholder/bookings/{booking_id}/key-status", response_model=BookingOut)
def set_key_status(booking_id: str, body: KeyStatusIn, db: Session = Depends(get_db),
                   me: User = Depends(require_roles(*_KEY_ROLES))):
    b = db.get(Booking, booking_id)
    if not b:
        raise HTTPException(status_code=404, detail="Not found")
    if me.role == "admin" and not status_service.can_manage_booking(db, me, b):
        raise HTTPException(status_code=403, detail="Booking belongs to another building")
    try:
        return booking_out(status_service.set_key_status(db, b, me, body.status, expected_version=body.expectedVersion))
    except ValueError as e:
        raise to_http(e)


@router.get("/keyholder/daily-report")
def daily_report(day: date | None = None, db: Session = Depends(get_db),
                 me: User = Depends(require_roles(*_KEY_ROLES))):
    """Guests arriving and leaving on `day` (default today)."""
    day = day or date.today()
    check_ins = _approved_dorm_bookings(db).filter(Booking.start_date == day).all()
    check_outs = _approved_dorm_bookings(db).filter(Booking.end_date == day).all()
    return {
        "date": day.isoformat(),
        "checkIns": [booking_out(b).model_dump(mode="json") for b in check_ins],
        "checkOuts": [booking_out(b).model_dump(mode="json") for b in check_outs],
        "keysOutstanding": _approved_dorm_bookings(db).filter(Booking.key_status == "issued").count(),
    }
