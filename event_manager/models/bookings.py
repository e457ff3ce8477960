from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from event_manager.database.db import Base

if TYPE_CHECKING:
    from event_manager.models.events import Event


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Plain column rather than a FOREIGN KEY so deleting an event never touches its bookings
    event_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    attendee_name: Mapped[str] = mapped_column(String(100), nullable=False)
    full_price_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    concession_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    booking_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    event: Mapped["Event"] = relationship(
        primaryjoin="foreign(Booking.event_id) == Event.id",
        viewonly=True,
    )
