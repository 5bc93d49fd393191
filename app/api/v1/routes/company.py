from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import require_approved_company, require_roles, to_http
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import BookingOut, FacilityBookingCreate
from app.services.agreement_service import agreement_pdf_for_booking
from app.services.booking_service import booking_out, submit_facility_booking
from app.services.media_client import upload_file
from app.services.schedule_service import MODE_CART, MODE_SCHEDULE
from app.services.status_service import ensure_agreement_uploadable, record_signed_agreement

router = APIRouter(tags=["company"])


def _own_booking(db: Session, booking_id: str, me: User) -> Booking:
    b = db.get(Booking, booking_id)
    if not b or (b.user_id != me.id and (not me.company_id or b.company_id != me.company_id)):
        raise HTTPException(status_code=404, detail="Not found")
    return b


@router.post("/company/facility-bookings", response_model=BookingOut, status_code=201)
def create_facility_booking(body: FacilityBookingCreate, mode: str = MODE_SCHEDULE,
                            db: Session = Depends(get_db),
                            me: User = Depends(require_approved_company)):
    if mode not in (MODE_SCHEDULE, MODE_CART):
        raise HTTPException(status_code=400, detail="mode must be schedule or cart")
    try:
        return booking_out(submit_facility_booking(db, body, me, mode))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/company/bookings", response_model=list[BookingOut])
def my_bookings(db: Session = Depends(get_db),
                me: User = Depends(require_roles("company_representative"))):
    q = db.query(Booking)
    if me.company_id:
        q = q.filter((Booking.company_id == me.company_id) | (Booking.user_id == me.id))
    else:
        q = q.filter(Booking.user_id == me.id)
    return [booking_out(b) for b in q.order_by(Booking.created_at.desc()).all()]


@router.get("/company/bookings/{booking_id}/agreement.pdf")
def agreement_pdf(booking_id: str, db: Session = Depends(get_db),
                  me: User = Depends(require_roles("company_representative"))):
    b = _own_booking(db, booking_id, me)
    try:
        pdf = agreement_pdf_for_booking(b)
    except ValueError as e:
        raise to_http(e)
    return Response(content=pdf, media_type="application/pdf",
                    headers={"Content-Disposition": f'inline; filename="agreement-{b.id}.pdf"'})


@router.post("/company/bookings/{booking_id}/signed-agreement")
def upload_signed_agreement(booking_id: str, file: UploadFile = File(...),
                                  db: Session = Depends(get_db),
                                  me: User = Depends(require_roles("company_representative"))):
    b = _own_booking(db, booking_id, me)
    content = file.file.read()
    try:
        ensure_agreement_uploadable(b)
        url = upload_file(content, file.filename or "", "signed_agreements")
        b = record_signed_agreement(db, b, me, url)
    except (ValueError, LookupError, RuntimeError) as e:
        raise to_http(e)
    return {"ok": True, "url": url, "agreementStatus": b.agreement_status}
