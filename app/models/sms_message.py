from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

class SmsMessage(Base):
    """Outbox row for one SMS; sent at most once by the worker, never retried."""
    __tablename__ = "sms_outbox"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    to_phone: Mapped[str] = mapped_column(String(40), index=True)
    body: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(20), default="queued")  # queued, sent, failed
    error: Mapped[str] = mapped_column(String(500), default="")
    related_booking_id: Mapped[str] = mapped_column(String(36), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
