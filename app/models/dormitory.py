from sqlalchemy import String, Integer, Boolean, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from app.db.session import Base

class Dormitory(Base):
    __tablename__ = "dormitories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    room_number: Mapped[str] = mapped_column(String(20), index=True)
    floor: Mapped[int] = mapped_column(Integer, default=1)
    capacity: Mapped[int] = mapped_column(Integer, default=1)  # beds
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    price_per_day: Mapped[int | None] = mapped_column(Integer, nullable=True)
    building_name: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)  # ifaboru|buuraboru
    images_csv: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def name(self) -> str:
        return f"{self.room_number} (Floor {self.floor})"

    @property
    def category(self) -> str:
        return "dormitory"

    @property
    def override_cost(self) -> int | None:
        return self.price_per_day

    @property
    def images(self) -> list[str]:
        return [s.strip() for s in (self.images_csv or "").split(",") if s.strip()]
