import os
import uuid

from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError

from app.db.session import SessionLocal
from app.core.security import hash_password
from app.models.setting import Setting
from app.models.user import User
from app.services import settings_service
from app.schemas.settings import PricingSettings, AgreementTemplate, SiteContent


def ensure_user(db: Session, email: str, password: str, role: str, name: str, building: str | None = None):
    u = db.query(User).filter(User.email == email).first()
    if u:
        return
    db.add(
        User(
            id=str(uuid.uuid4()),
            email=email,
            full_name=name,
            role=role,
            password_hash=hash_password(password),
            is_active=True,
            building_assignment=building,
        )
    )
    db.commit()
    print(f"[seed] created {role} {email}")


def ensure_setting(db: Session, key: str, save):
    if db.get(Setting, key) is None:
        save()
        print(f"[seed] default {key} written")


def run(db=None):
    if db is None:
        db = SessionLocal()
    try:
        # If migrations haven't been applied yet, seeding must not crash the API.
        try:
            db.execute(text("SELECT 1 FROM users LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            print("[seed] users table not found yet. Skipping seeding (run alembic upgrade head).")
            return

        admin_password = os.getenv("SEED_ADMIN_PASSWORD", "admin12345")
        ensure_user(db, "superadmin@oec.local", admin_password, "superadmin", "Super Admin")
        ensure_user(db, "admin@oec.local", admin_password, "admin", "Admin")
        ensure_user(db, "keyholder@oec.local", os.getenv("SEED_STAFF_PASSWORD", "staff12345"), "keyholder", "Keyholder")
        ensure_user(db, "store@oec.local", os.getenv("SEED_STAFF_PASSWORD", "staff12345"), "store_manager", "Store Manager")

        ensure_setting(db, settings_service.PRICING, lambda: settings_service.set_pricing(db, PricingSettings()))
        ensure_setting(db, settings_service.AGREEMENT_TEMPLATE,
                       lambda: settings_service.set_agreement_template(db, AgreementTemplate()))
        ensure_setting(db, settings_service.SITE_CONTENT, lambda: settings_service.set_site_content(db, SiteContent()))
    finally:
        db.close()


if __name__ == "__main__":
    run()
