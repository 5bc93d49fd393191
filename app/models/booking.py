from sqlalchemy import String, Integer, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import date, datetime, timezone
from app.db.session import Base

PAYMENT_STATUSES = ("pending", "pending_transfer", "awaiting_verification", "paid", "failed")
APPROVAL_STATUSES = ("pending", "approved", "rejected")
AGREEMENT_STATUSES = ("pending_admin_action", "sent_to_client", "signed_by_client", "completed")
KEY_STATUSES = ("not_issued", "issued", "returned")
SERVICE_TIERS = ("none", "level1", "level2")

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    category: Mapped[str] = mapped_column(String(12), index=True)  # facility|dormitory

    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    company_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    # requester identity (dormitory guests use guest_*; companies use company_name/contact_person)
    guest_name: Mapped[str] = mapped_column(String(200), default="")
    guest_employer: Mapped[str] = mapped_column(String(200), default="")
    company_name: Mapped[str] = mapped_column(String(200), default="")
    contact_person: Mapped[str] = mapped_column(String(200), default="")
    email: Mapped[str] = mapped_column(String(320), default="")
    phone: Mapped[str] = mapped_column(String(40), default="")
    payer_bank_name: Mapped[str] = mapped_column(String(120), default="")
    payer_account_number: Mapped[str] = mapped_column(String(60), default="")

    start_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    number_of_attendees: Mapped[int] = mapped_column(Integer, default=1)
    lunch_tier: Mapped[str] = mapped_column(String(10), default="none")
    refreshment_tier: Mapped[str] = mapped_column(String(10), default="none")
    notes: Mapped[str] = mapped_column(Text, default="")

    # computed once at submission, never recomputed from items
    total_cost: Mapped[int] = mapped_column(Integer, default=0)

    payment_status: Mapped[str] = mapped_column(String(30), default="pending", index=True)
    approval_status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    agreement_status: Mapped[str | None] = mapped_column(String(30), nullable=True)  # facility only
    key_status: Mapped[str | None] = mapped_column(String(20), nullable=True)        # dormitory only

    agreement_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    agreement_sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    agreement_signed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    signed_agreement_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    payment_screenshot_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    payment_screenshot_record_id: Mapped[str | None] = mapped_column(String(40), nullable=True)

    # bumped by every status mutation; optional optimistic concurrency token
    version: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    items: Mapped[list["BookingItem"]] = relationship(
        back_populates="booking", cascade="all, delete-orphan", order_by="BookingItem.position"
    )

    @property
    def requester_name(self) -> str:
        return self.guest_name or self.company_name or self.contact_person or "Unknown"


class BookingItem(Base):
    """Denormalized copy of a booked hall/section/room so later catalog edits do not rewrite history."""
    __tablename__ = "booking_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    booking_id: Mapped[str] = mapped_column(String(36), ForeignKey("bookings.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer, default=0)

    item_id: Mapped[str] = mapped_column(String(36), index=True)  # weak reference to halls.id / dormitories.id
    name: Mapped[str] = mapped_column(String(200))
    item_type: Mapped[str] = mapped_column(String(12))  # hall|section|dormitory
    day: Mapped[date | None] = mapped_column(Date, nullable=True)  # facility schedule day
    rental_cost: Mapped[int] = mapped_column(Integer, default=0)   # resolved per-day cost

    booking: Mapped[Booking] = relationship(back_populates="items")
