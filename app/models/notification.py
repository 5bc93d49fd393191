from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

class AdminNotification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    message: Mapped[str] = mapped_column(String(500))
    type: Mapped[str] = mapped_column(String(40), index=True)  # new_facility_booking, new_dormitory_booking, payment_proof_uploaded
    related_id: Mapped[str] = mapped_column(String(36), default="", index=True)
    recipient_role: Mapped[str] = mapped_column(String(30), default="admin")
    building: Mapped[str | None] = mapped_column(String(20), nullable=True)
    link: Mapped[str] = mapped_column(String(200), default="")
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
