import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_manager.database.db import Base

if TYPE_CHECKING:
    from event_manager.models.bookings import Booking


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


PLACEHOLDER_TITLE = "New Event"
PLACEHOLDER_DESCRIPTION = "Event description"


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, default=PLACEHOLDER_TITLE)
    description: Mapped[str] = mapped_column(Text, nullable=False, default=PLACEHOLDER_DESCRIPTION)
    event_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    full_price_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    full_price_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    concession_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    concession_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=EventStatus.DRAFT.value)
    created_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    published_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_modified: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # No cascade: bookings outlive a deleted event
    bookings: Mapped[list["Booking"]] = relationship(
        primaryjoin="Event.id == foreign(Booking.event_id)",
        viewonly=True,
    )

    @property
    def is_published(self) -> bool:
        return self.status == EventStatus.PUBLISHED.value
