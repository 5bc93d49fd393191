import re
import uuid

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.blog_post import BlogPost
from app.models.dormitory import Dormitory
from app.models.hall import Hall
from app.schemas.catalog import HallIn, DormitoryIn, BlogPostIn
from app.schemas.settings import PricingSettings
from app.services.pricing_service import resolve_day_cost


def hall_out(h: Hall, pricing: PricingSettings | None = None) -> dict:
    out = {
        "id": h.id,
        "name": h.name,
        "itemType": h.item_type,
        "capacity": h.capacity,
        "isAvailable": h.is_available,
        "rentalCost": h.rental_cost,
        "lunchServiceCost": h.lunch_service_cost,
        "refreshmentServiceCost": h.refreshment_service_cost,
        "description": h.description or "",
        "images": h.images,
    }
    if pricing is not None:
        out["dayCost"] = resolve_day_cost(h, pricing)
    return out


def dormitory_out(d: Dormitory, pricing: PricingSettings | None = None) -> dict:
    out = {
        "id": d.id,
        "name": d.name,
        "roomNumber": d.room_number,
        "floor": d.floor,
        "capacity": d.capacity,
        "isAvailable": d.is_available,
        "pricePerDay": d.price_per_day,
        "buildingName": d.building_name,
        "images": d.images,
    }
    if pricing is not None:
        out["dayCost"] = resolve_day_cost(d, pricing)
    return out


def save_hall(db: Session, body: HallIn, hall_id: str | None = None) -> Hall:
    if hall_id:
        h = db.get(Hall, hall_id)
        if not h:
            raise NotFoundError("hall not found")
    else:
        h = Hall(id=str(uuid.uuid4()))
        db.add(h)
    h.name = body.name.strip()
    h.item_type = body.itemType
    h.capacity = body.capacity
    h.is_available = body.isAvailable
    h.rental_cost = body.rentalCost
    h.lunch_service_cost = body.lunchServiceCost
    h.refreshment_service_cost = body.refreshmentServiceCost
    h.description = body.description
    h.images_csv = ",".join(body.images)
    db.commit()
    db.refresh(h)
    return h


def save_dormitory(db: Session, body: DormitoryIn, dorm_id: str | None = None) -> Dormitory:
    if dorm_id:
        d = db.get(Dormitory, dorm_id)
        if not d:
            raise NotFoundError("dormitory not found")
    else:
        d = Dormitory(id=str(uuid.uuid4()))
        db.add(d)
    d.room_number = body.roomNumber.strip()
    d.floor = body.floor
    d.capacity = body.capacity
    d.is_available = body.isAvailable
    d.price_per_day = body.pricePerDay
    d.building_name = body.buildingName
    d.images_csv = ",".join(body.images)
    db.commit()
    db.refresh(d)
    return d


def slugify(title: str) -> str:
    s = re.sub(r"[^a-z0-9]+", "-", (title or "").lower()).strip("-")
    return s or uuid.uuid4().hex[:8]


def blog_out(p: BlogPost, full: bool = True) -> dict:
    out = {
        "id": p.id,
        "slug": p.slug,
        "title": p.title,
        "excerpt": p.excerpt or "",
        "imageUrl": p.image_url,
        "authorName": p.author_name or "",
        "isPublished": p.is_published,
        "createdAt": p.created_at.isoformat() if p.created_at else "",
    }
    if full:
        out["content"] = p.content or ""
    return out


def create_blog_post(db: Session, body: BlogPostIn, author_name: str = "") -> BlogPost:
    slug = slugify(body.slug or body.title)
    if db.query(BlogPost).filter(BlogPost.slug == slug).first():
        raise ValueError(f"a post with slug '{slug}' already exists")
    p = BlogPost(
        id=str(uuid.uuid4()),
        slug=slug,
        title=body.title,
        excerpt=body.excerpt,
        content=body.content,
        image_url=body.imageUrl,
        author_name=author_name,
        is_published=body.isPublished,
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p
