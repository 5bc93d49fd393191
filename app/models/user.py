from sqlalchemy import String, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

ROLES = ("superadmin", "admin", "keyholder", "store_manager", "company_representative", "individual")
STAFF_ROLES = ("admin", "keyholder", "store_manager")
BUILDINGS = ("ifaboru", "buuraboru")

class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String(200), default="")
    phone: Mapped[str] = mapped_column(String(40), default="")
    role: Mapped[str] = mapped_column(String(30), index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # company representatives only
    company_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    company_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    approval_status: Mapped[str | None] = mapped_column(String(20), nullable=True)  # pending, approved, rejected

    # admins scoped to one building; None = general admin
    building_assignment: Mapped[str | None] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def is_general_admin(self) -> bool:
        return self.role == "superadmin" or (self.role == "admin" and not self.building_assignment)
