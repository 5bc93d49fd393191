from sqlalchemy import String, Integer, Boolean, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

class Hall(Base):
    """A hall or a section of a hall, rented per day to companies."""
    __tablename__ = "halls"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(120))
    item_type: Mapped[str] = mapped_column(String(12), default="hall", index=True)  # hall|section
    capacity: Mapped[int] = mapped_column(Integer, default=0)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)

    # per-item overrides; NULL falls back to the pricing settings
    rental_cost: Mapped[int | None] = mapped_column(Integer, nullable=True)
    lunch_service_cost: Mapped[int | None] = mapped_column(Integer, nullable=True)
    refreshment_service_cost: Mapped[int | None] = mapped_column(Integer, nullable=True)

    description: Mapped[str] = mapped_column(Text, default="")
    images_csv: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def category(self) -> str:
        return self.item_type

    @property
    def override_cost(self) -> int | None:
        return self.rental_cost

    @property
    def images(self) -> list[str]:
        return [s.strip() for s in (self.images_csv or "").split(",") if s.strip()]
