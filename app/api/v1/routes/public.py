from datetime import date
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import get_optional_user, to_http
from app.core.errors import NotFoundError
from app.models.blog_post import BlogPost
from app.models.booking import Booking
from app.models.dormitory import Dormitory
from app.models.hall import Hall
from app.models.user import User
from app.schemas.booking import BookingOut, DormitoryBookingCreate, FacilityQuoteRequest
from app.services.availability_service import availability_by_day
from app.services.booking_service import booking_out, quote_facility_booking, submit_dormitory_booking
from app.services.catalog_service import blog_out, dormitory_out, hall_out
from app.services.payment_proof_service import submit_payment_proof
from app.services.schedule_service import build_schedule
from app.services.settings_service import get_bank_details, get_pricing, get_site_content, get_brand_assets

router = APIRouter(tags=["public"])


@router.get("/public/pricing")
def public_pricing(db: Session = Depends(get_db)):
    return get_pricing(db).model_dump()


@router.get("/public/halls")
def list_halls(db: Session = Depends(get_db)):
    pricing = get_pricing(db)
    halls = db.query(Hall).filter(Hall.is_available == True).order_by(Hall.name.asc()).all()
    return [hall_out(h, pricing) for h in halls]


@router.get("/public/dormitories")
def list_dormitories(building: str | None = None, db: Session = Depends(get_db)):
    pricing = get_pricing(db)
    q = db.query(Dormitory).filter(Dormitory.is_available == True)
    if building:
        q = q.filter(Dormitory.building_name == building)
    return [dormitory_out(d, pricing) for d in q.order_by(Dormitory.floor.asc(), Dormitory.room_number.asc()).all()]


@router.get("/public/availability")
def availability(category: str, start: date, end: date, db: Session = Depends(get_db)):
    """Per-day list of items nobody has booked on that day."""
    try:
        days = [r.day for r in build_schedule(start, end)]
        by_day = availability_by_day(db, days, category)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    pricing = get_pricing(db)
    out = hall_out if category == "facility" else dormitory_out
    return [{"date": d.isoformat(), "available": [out(i, pricing) for i in by_day[d]]} for d in days]


@router.post("/public/facility-bookings/quote")
def quote(body: FacilityQuoteRequest, db: Session = Depends(get_db)):
    try:
        return quote_facility_booking(db, body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/public/dormitory-bookings", response_model=BookingOut, status_code=201)
def create_dormitory_booking(body: DormitoryBookingCreate, db: Session = Depends(get_db),
                             me: User | None = Depends(get_optional_user)):
    try:
        return booking_out(submit_dormitory_booking(db, body, me))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/public/bookings/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: str, db: Session = Depends(get_db)):
    b = db.get(Booking, booking_id)
    if not b:
        raise HTTPException(status_code=404, detail="Not found")
    return booking_out(b)


@router.post("/public/bookings/{booking_id}/payment-proof")
def upload_payment_proof(booking_id: str, file: UploadFile = File(...), db: Session = Depends(get_db)):
    content = file.file.read()
    try:
        b = submit_payment_proof(db, booking_id, content, file.filename or "")
    except (ValueError, LookupError, RuntimeError) as e:
        raise to_http(e)
    return {
        "ok": True,
        "bookingId": b.id,
        "url": b.payment_screenshot_url,
        "recordId": b.payment_screenshot_record_id,
        "paymentStatus": b.payment_status,
    }


@router.get("/public/bank-details")
def bank_details(db: Session = Depends(get_db)):
    return get_bank_details(db).model_dump()


@router.get("/public/site-content")
def site_content(db: Session = Depends(get_db)):
    return {**get_site_content(db).model_dump(), **get_brand_assets(db).model_dump()}


@router.get("/public/blog")
def list_blog(limit: int = 20, offset: int = 0, db: Session = Depends(get_db)):
    posts = (
        db.query(BlogPost)
        .filter(BlogPost.is_published == True)
        .order_by(BlogPost.created_at.desc())
        .limit(max(1, min(limit, 100))).offset(max(offset, 0))
        .all()
    )
    return [blog_out(p, full=False) for p in posts]


@router.get("/public/blog/{slug}")
def get_blog_post(slug: str, db: Session = Depends(get_db)):
    p = db.query(BlogPost).filter(BlogPost.slug == slug, BlogPost.is_published == True).first()
    if not p:
        raise to_http(NotFoundError("post not found"))
    return blog_out(p)
