import uuid
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.db.session import get_db
from app.api.deps import require_roles, require_general_admin, to_http
from app.api.v1.routes.auth import user_out
from app.core.security import hash_password
from app.models.blog_post import BlogPost
from app.models.booking import Booking
from app.models.dormitory import Dormitory
from app.models.hall import Hall
from app.models.notification import AdminNotification
from app.models.sms_message import SmsMessage
from app.models.user import User, ROLES
from app.schemas.auth import StaffCreate, UserPatch
from app.schemas.catalog import HallIn, DormitoryIn, BlogPostIn
from app.schemas.settings import PricingSettings, AgreementTemplate, BankDetails, SiteContent
from app.services.audit_service import log_change, snapshot
from app.services import settings_service
from app.services.catalog_service import hall_out, dormitory_out, save_hall, save_dormitory, blog_out, create_blog_post
from app.services.media_client import upload_file

router = APIRouter(tags=["admin"])

_USER_FIELDS = ("role", "building_assignment", "is_active", "approval_status")


# users

@router.get("/admin/users")
def list_users(role: str | None = None, q: str | None = None, limit: int = 50, offset: int = 0,
               db: Session = Depends(get_db),
               me: User = Depends(require_roles("superadmin"))):
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    if q:
        ql = f"%{q.lower()}%"
        query = query.filter(func.lower(User.email).like(ql) | func.lower(User.full_name).like(ql))
    total = query.count()
    users = query.order_by(User.created_at.desc()).limit(max(1, min(limit, 200))).offset(max(offset, 0)).all()
    return {"total": total, "items": [user_out(u) for u in users]}


@router.post("/admin/users", status_code=201)
def create_staff(body: StaffCreate, db: Session = Depends(get_db),
                 me: User = Depends(require_roles("superadmin"))):
    email_l = str(body.email).strip().lower()
    if db.query(User).filter(User.email == email_l).first():
        raise HTTPException(status_code=409, detail="email already exists")
    if body.buildingAssignment and body.role != "admin":
        raise HTTPException(status_code=400, detail="only admins can be assigned to a building")
    pw = body.tempPassword or (uuid.uuid4().hex[:10] + "A1!")
    u = User(
        id=str(uuid.uuid4()),
        email=email_l,
        full_name=body.fullName,
        phone=body.phone,
        role=body.role,
        password_hash=hash_password(pw),
        is_active=True,
        building_assignment=body.buildingAssignment,
    )
    db.add(u)
    log_change(db, me.id, "user.created", "user", u.id, None, {"email": u.email, "role": u.role,
                                                              "building_assignment": u.building_assignment})
    db.commit()
    return {"ok": True, "id": u.id, "email": u.email, "tempPassword": pw}


@router.patch("/admin/users/{user_id}")
def update_user(user_id: str, body: UserPatch, db: Session = Depends(get_db),
                me: User = Depends(require_roles("superadmin"))):
    u = db.get(User, user_id)
    if not u:
        raise HTTPException(status_code=404, detail="not found")
    before = snapshot(u, _USER_FIELDS)
    if body.fullName is not None:
        u.full_name = body.fullName
    if body.phone is not None:
        u.phone = body.phone
    if body.role is not None:
        if body.role not in ROLES:
            raise HTTPException(status_code=400, detail="invalid role")
        u.role = body.role
    if body.buildingAssignment is not None:
        u.building_assignment = None if body.buildingAssignment == "none" else body.buildingAssignment
    if u.role != "admin":
        u.building_assignment = None
    if body.isActive is not None:
        if u.id == me.id and not body.isActive:
            raise HTTPException(status_code=400, detail="you cannot deactivate yourself")
        u.is_active = bool(body.isActive)
    log_change(db, me.id, "user.updated", "user", u.id, before, snapshot(u, _USER_FIELDS))
    db.commit()
    return user_out(u)


# companies

@router.get("/admin/companies")
def list_companies(status: str | None = None, db: Session = Depends(get_db),
                   me: User = Depends(require_general_admin)):
    q = db.query(User).filter(User.role == "company_representative")
    if status:
        q = q.filter(User.approval_status == status)
    return [user_out(u) for u in q.order_by(User.created_at.desc()).all()]


def _set_company_approval(db: Session, user_id: str, status: str, me: User) -> dict:
    u = db.get(User, user_id)
    if not u or u.role != "company_representative":
        raise HTTPException(status_code=404, detail="company not found")
    if u.approval_status == status:
        raise HTTPException(status_code=409, detail=f"company is already {status}")
    before = snapshot(u, _USER_FIELDS)
    u.approval_status = status
    log_change(db, me.id, f"company.{status}", "user", u.id, before, snapshot(u, _USER_FIELDS))
    db.commit()
    return user_out(u)


@router.post("/admin/companies/{user_id}/approve")
def approve_company(user_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    return _set_company_approval(db, user_id, "approved", me)


@router.post("/admin/companies/{user_id}/reject")
def reject_company(user_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    return _set_company_approval(db, user_id, "rejected", me)


# settings

@router.get("/admin/settings/pricing")
def get_pricing(db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    return {**settings_service.get_pricing(db).model_dump(),
            "version": settings_service.setting_version(db, settings_service.PRICING)}


@router.put("/admin/settings/pricing")
def put_pricing(body: PricingSettings, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    version = settings_service.set_pricing(db, body, me.id)
    return {**body.model_dump(), "version": version}


@router.get("/admin/settings/agreement-template")
def get_agreement_template(db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    return settings_service.get_agreement_template(db).model_dump()


@router.put("/admin/settings/agreement-template")
def put_agreement_template(body: AgreementTemplate, db: Session = Depends(get_db),
                           me: User = Depends(require_general_admin)):
    settings_service.set_agreement_template(db, body, me.id)
    return body.model_dump()


@router.put("/admin/settings/bank-details")
def put_bank_details(body: BankDetails, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    try:
        settings_service.set_bank_details(db, body, me.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return body.model_dump()


@router.put("/admin/settings/site-content")
def put_site_content(body: SiteContent, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    settings_service.set_site_content(db, body, me.id)
    return body.model_dump()


@router.get("/admin/settings/brand-assets")
def get_brand_assets(db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    return settings_service.get_brand_assets(db).model_dump()


# catalog

@router.get("/admin/halls")
def admin_list_halls(db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    pricing = settings_service.get_pricing(db)
    return [hall_out(h, pricing) for h in db.query(Hall).order_by(Hall.name.asc()).all()]


@router.post("/admin/halls", status_code=201)
def create_hall(body: HallIn, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    return hall_out(save_hall(db, body))


@router.put("/admin/halls/{hall_id}")
def update_hall(hall_id: str, body: HallIn, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    try:
        return hall_out(save_hall(db, body, hall_id))
    except LookupError as e:
        raise to_http(e)


@router.delete("/admin/halls/{hall_id}")
def delete_hall(hall_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    h = db.get(Hall, hall_id)
    if not h:
        raise HTTPException(status_code=404, detail="not found")
    db.delete(h)
    db.commit()
    return {"ok": True}


@router.get("/admin/dormitories")
def admin_list_dormitories(db: Session = Depends(get_db), me: User = Depends(require_roles("admin", "superadmin"))):
    pricing = settings_service.get_pricing(db)
    q = db.query(Dormitory)
    if not me.is_general_admin:
        q = q.filter(Dormitory.building_name == me.building_assignment)
    return [dormitory_out(d, pricing) for d in q.order_by(Dormitory.floor.asc(), Dormitory.room_number.asc()).all()]


@router.post("/admin/dormitories", status_code=201)
def create_dormitory(body: DormitoryIn, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    return dormitory_out(save_dormitory(db, body))


@router.put("/admin/dormitories/{dorm_id}")
def update_dormitory(dorm_id: str, body: DormitoryIn, db: Session = Depends(get_db),
                     me: User = Depends(require_general_admin)):
    try:
        return dormitory_out(save_dormitory(db, body, dorm_id))
    except LookupError as e:
        raise to_http(e)


@router.delete("/admin/dormitories/{dorm_id}")
def delete_dormitory(dorm_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    d = db.get(Dormitory, dorm_id)
    if not d:
        raise HTTPException(status_code=404, detail="not found")
    db.delete(d)
    db.commit()
    return {"ok": True}


# notifications

def _notifications_query(db: Session, me: User):
    q = db.query(AdminNotification).filter(AdminNotification.recipient_role == "admin")
    if not me.is_general_admin:
        q = q.filter(AdminNotification.building == me.building_assignment)
    return q


@router.get("/admin/notifications")
def list_notifications(unreadOnly: bool = False, limit: int = 50, db: Session = Depends(get_db),
                       me: User = Depends(require_roles("admin", "superadmin"))):
    q = _notifications_query(db, me)
    if unreadOnly:
        q = q.filter(AdminNotification.is_read == False)
    return [
        {"id": n.id, "message": n.message, "type": n.type, "relatedId": n.related_id, "link": n.link,
         "building": n.building, "isRead": n.is_read, "createdAt": n.created_at.isoformat()}
        for n in q.order_by(AdminNotification.created_at.desc()).limit(max(1, min(limit, 200))).all()
    ]


@router.post("/admin/notifications/{notification_id}/read")
def mark_notification_read(notification_id: str, db: Session = Depends(get_db),
                           me: User = Depends(require_roles("admin", "superadmin"))):
    n = _notifications_query(db, me).filter(AdminNotification.id == notification_id).first()
    if not n:
        raise HTTPException(status_code=404, detail="not found")
    n.is_read = True
    db.commit()
    return {"ok": True}


@router.post("/admin/notifications/read-all")
def mark_all_read(db: Session = Depends(get_db), me: User = Depends(require_roles("admin", "superadmin"))):
    count = 0
    for n in _notifications_query(db, me).filter(AdminNotification.is_read == False).all():
        n.is_read = True
        count += 1
    db.commit()
    return {"ok": True, "updated": count}


# metrics

@router.get("/admin/metrics/overview")
def metrics_overview(db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    def counts(column):
        return {k: v for k, v in db.query(column, func.count(Booking.id)).group_by(column).all()}

    revenue = (
        db.query(Booking.category, func.coalesce(func.sum(Booking.total_cost), 0))
        .filter(Booking.payment_status == "paid")
        .group_by(Booking.category)
        .all()
    )
    return {
        "totalBookings": db.query(func.count(Booking.id)).scalar() or 0,
        "byCategory": counts(Booking.category),
        "byApprovalStatus": counts(Booking.approval_status),
        "byPaymentStatus": counts(Booking.payment_status),
        "pendingCompanies": db.query(func.count(User.id)).filter(
            User.role == "company_representative", User.approval_status == "pending").scalar() or 0,
        "paidRevenue": {k: int(v) for k, v in revenue},
        "paidRevenueTotal": sum(int(v) for _, v in revenue),
    }


# blog

@router.post("/admin/blog", status_code=201)
def admin_create_post(body: BlogPostIn, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    try:
        return blog_out(create_blog_post(db, body, me.full_name or me.email))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/admin/blog/{post_id}")
def admin_delete_post(post_id: str, db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    p = db.get(BlogPost, post_id)
    if not p:
        raise HTTPException(status_code=404, detail="not found")
    db.delete(p)
    db.commit()
    return {"ok": True}


# uploads

@router.post("/admin/uploads/blog-image")
def upload_blog_image(file: UploadFile = File(...), postId: str | None = None,
                            db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    content = file.file.read()
    try:
        url = upload_file(content, file.filename or "", "blog_images")
    except (ValueError, RuntimeError) as e:
        raise to_http(e)
    if postId:
        p = db.get(BlogPost, postId)
        if p:
            p.image_url = url
            db.commit()
    return {"ok": True, "url": url}


@router.post("/admin/uploads/brand-asset")
def upload_brand_asset(assetType: str, file: UploadFile = File(...),
                             db: Session = Depends(get_db), me: User = Depends(require_general_admin)):
    if assetType not in ("logo", "signature", "stamp"):
        raise HTTPException(status_code=400, detail="assetType must be logo, signature or stamp")
    content = file.file.read()
    try:
        url = upload_file(content, file.filename or "", "brand_assets")
        assets = settings_service.set_brand_asset(db, assetType, url, me.id)
    except (ValueError, RuntimeError) as e:
        raise to_http(e)
    return {"ok": True, "url": url, "assets": assets.model_dump()}


@router.delete("/admin/airtable-records/{record_id}")
def delete_airtable_record(record_id: str, me: User = Depends(require_general_admin)):
    raise HTTPException(status_code=501, detail="Deleting Airtable records is disabled")


@router.get("/admin/sms-outbox")
def sms_outbox(status: str | None = None, limit: int = 100, db: Session = Depends(get_db),
               me: User = Depends(require_general_admin)):
    q = db.query(SmsMessage)
    if status:
        q = q.filter(SmsMessage.status == status)
    return [
        {"id": m.id, "to": m.to_phone, "body": m.body, "status": m.status, "error": m.error,
         "bookingId": m.related_booking_id, "createdAt": m.created_at.isoformat(),
         "sentAt": m.sent_at.isoformat() if m.sent_at else None}
        for m in q.order_by(SmsMessage.created_at.desc()).limit(max(1, min(limit, 500))).all()
    ]
