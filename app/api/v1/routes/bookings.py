from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session, selectinload

from app.db.session import get_db
from app.api.deps import require_roles, require_general_admin, to_http
from app.models.booking import Booking, BookingItem
from app.models.dormitory import Dormitory
from app.models.user import User
from app.schemas.booking import (
    BookingOut, StatusActionIn, PaymentVerificationIn, AgreementStatusIn,
)
from app.services import status_service
from app.services.agreement_service import agreement_pdf_for_booking
from app.services.audit_service import log_change, snapshot
from app.services.booking_service import booking_out

router = APIRouter(tags=["bookings"])

_SORTS = {
    "createdAt": Booking.created_at.asc(),
    "-createdAt": Booking.created_at.desc(),
    "startDate": Booking.start_date.asc(),
    "-startDate": Booking.start_date.desc(),
    "totalCost": Booking.total_cost.asc(),
    "-totalCost": Booking.total_cost.desc(),
}


def _in_building(building: str):
    first_room = (
        select(BookingItem.booking_id)
        .join(Dormitory, Dormitory.id == BookingItem.item_id)
        .where(BookingItem.position == 0, Dormitory.building_name == building)
    )
    return Booking.id.in_(first_room)


def _managed_booking(db: Session, booking_id: str, me: User) -> Booking:
    b = db.get(Booking, booking_id)
    if not b:
        raise HTTPException(status_code=404, detail="Not found")
    if not status_service.can_manage_booking(db, me, b):
        raise HTTPException(status_code=403, detail="Booking belongs to another building")
    return b


@router.get("/admin/bookings")
def list_bookings(category: str | None = None, approvalStatus: str | None = None,
                  paymentStatus: str | None = None, q: str | None = None,
                  sort: str = "-createdAt", limit: int = 50, offset: int = 0,
                  db: Session = Depends(get_db),
                  me: User = Depends(require_roles("admin", "superadmin"))):
    if sort not in _SORTS:
        raise HTTPException(status_code=400, detail=f"sort must be one of {', '.join(_SORTS)}")
    stmt = select(Booking)
    if not me.is_general_admin:
        stmt = stmt.where(Booking.category == "dormitory", _in_building(me.building_assignment))
    if category:
        stmt = stmt.where(Booking.category == category)
    if approvalStatus:
        stmt = stmt.where(Booking.approval_status == approvalStatus)
    if paymentStatus:
        stmt = stmt.where(Booking.payment_status == paymentStatus)
    if q:
        ql = f"%{q.lower()}%"
        stmt = stmt.where(or_(
            func.lower(Booking.guest_name).like(ql),
            func.lower(Booking.company_name).like(ql),
            func.lower(Booking.contact_person).like(ql),
            func.lower(Booking.email).like(ql),
            Booking.phone.like(ql),
        ))
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar() or 0
    rows = db.execute(
        stmt.options(selectinload(Booking.items))
        .order_by(_SORTS[sort], Booking.id.asc())
        .limit(max(1, min(limit, 200))).offset(max(offset, 0))
    ).scalars().all()
    return {"total": total, "items": [booking_out(b) for b in rows]}


@router.get("/admin/bookings/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: str, db: Session = Depends(get_db),
                me: User = Depends(require_roles("admin", "superadmin"))):
    return booking_out(_managed_booking(db, booking_id, me))


def _run(action, db: Session, booking_id: str, me: User, *args, expected_version: int | None = None) -> BookingOut:
    b = _managed_booking(db, booking_id, me)
    try:
        return booking_out(action(db, b, me, *args, expected_version=expected_version))
    except ValueError as e:
        raise to_http(e)


@router.post("/admin/bookings/{booking_id}/approve", response_model=BookingOut)
def approve(booking_id: str, body: StatusActionIn | None = None, db: Session = Depends(get_db),
            me: User = Depends(require_roles("admin", "superadmin"))):
    return _run(status_service.approve, db, booking_id, me, expected_version=body.expectedVersion if body else None)


@router.post("/admin/bookings/{booking_id}/reject", response_model=BookingOut)
def reject(booking_id: str, body: StatusActionIn | None = None, db: Session = Depends(get_db),
           me: User = Depends(require_roles("admin", "superadmin"))):
    return _run(status_service.reject, db, booking_id, me, expected_version=body.expectedVersion if body else None)


@router.post("/admin/bookings/{booking_id}/approval-pending", response_model=BookingOut)
def approval_pending(booking_id: str, body: StatusActionIn | None = None, db: Session = Depends(get_db),
                     me: User = Depends(require_roles("admin", "superadmin"))):
    return _run(status_service.set_approval_pending, db, booking_id, me,
                expected_version=body.expectedVersion if body else None)


@router.post("/admin/bookings/{booking_id}/mark-paid", response_model=BookingOut)
def mark_paid(booking_id: str, body: StatusActionIn | None = None, db: Session = Depends(get_db),
              me: User = Depends(require_roles("admin", "superadmin"))):
    return _run(status_service.mark_paid, db, booking_id, me, expected_version=body.expectedVersion if body else None)


@router.post("/admin/bookings/{booking_id}/approve-payment", response_model=BookingOut)
def approve_payment(booking_id: str, body: StatusActionIn | None = None, db: Session = Depends(get_db),
                    me: User = Depends(require_roles("admin", "superadmin"))):
    return _run(status_service.approve_payment, db, booking_id, me,
                expected_version=body.expectedVersion if body else None)


@router.post("/admin/bookings/{booking_id}/verify-payment", response_model=BookingOut)
def verify_payment(booking_id: str, body: PaymentVerificationIn, db: Session = Depends(get_db),
                   me: User = Depends(require_roles("admin", "superadmin"))):
    return _run(status_service.verify_payment, db, booking_id, me, body.status, expected_version=body.expectedVersion)


@router.post("/admin/bookings/{booking_id}/agreement-status", response_model=BookingOut)
def agreement_status(booking_id: str, body: AgreementStatusIn, db: Session = Depends(get_db),
                     me: User = Depends(require_general_admin)):
    return _run(status_service.set_agreement_status, db, booking_id, me, body.status,
                expected_version=body.expectedVersion)


@router.get("/admin/bookings/{booking_id}/agreement.pdf")
def agreement_pdf(booking_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    b = _managed_booking(db, booking_id, me)
    try:
        pdf = agreement_pdf_for_booking(b)
    except ValueError as e:
        raise to_http(e)
    return Response(content=pdf, media_type="application/pdf",
                    headers={"Content-Disposition": f'inline; filename="agreement-{b.id}.pdf"'})


@router.delete("/admin/bookings/{booking_id}")
def delete_booking(booking_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    b = db.get(Booking, booking_id)
    if not b:
        raise HTTPException(status_code=404, detail="Not found")
    log_change(db, me.id, "booking.deleted", "booking", b.id,
               snapshot(b, ("category", "payment_status", "approval_status", "total_cost")), None)
    db.delete(b)
    db.commit()
    return {"ok": True}
