from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from event_manager.models.bookings import Booking
from event_manager.models.events import Event


@dataclass(frozen=True)
class BookingLine:
    booking_id: int
    attendee_name: str
    full_price_tickets: int
    concession_tickets: int
    booking_date: datetime | None
    event_id: int
    event_title: str
    event_date: datetime | None
    total_cost: Decimal


def _line_cost():
    return (
        Booking.full_price_tickets * Event.full_price_cost
        + Booking.concession_tickets * Event.concession_cost
    )


def list_bookings(db: Session) -> list[BookingLine]:
    """Every booking with its event, newest first. Orphaned bookings are not listed."""
    stmt = (
        select(Booking, Event.title, Event.event_date, _line_cost())
        .join(Event, Booking.event_id == Event.id)
        .order_by(Booking.booking_date.desc(), Booking.id.desc())
    )
    return [
        BookingLine(
            booking_id=booking.id,
            attendee_name=booking.attendee_name,
            full_price_tickets=booking.full_price_tickets,
            concession_tickets=booking.concession_tickets,
            booking_date=booking.booking_date,
            event_id=booking.event_id,
            event_title=title,
            event_date=event_date,
            total_cost=Decimal(str(cost or 0)).quantize(Decimal("0.01")),
        )
        for booking, title, event_date, cost in db.execute(stmt)
    ]


def bookings_summary(db: Session) -> dict:
    """Return aggregated totals across all bookings of existing events."""
    row = db.execute(
        select(
            func.count(Booking.id),
            func.sum(Booking.full_price_tickets + Booking.concession_tickets),
            func.sum(_line_cost()),
        ).join(Event, Booking.event_id == Event.id)
    ).one()
    total_bookings, total_tickets, total_revenue = row

    return {
        "total_bookings": int(total_bookings or 0),
        "total_tickets": int(total_tickets or 0),
        "total_revenue": Decimal(str(total_revenue or 0)).quantize(Decimal("0.01")),
    }


def bookings_for_event(db: Session, event_id: int) -> list[Booking]:
    """Raw bookings referencing ``event_id``, including ones whose event was deleted."""
    stmt = select(Booking).where(Booking.event_id == event_id).order_by(Booking.id)
    return list(db.scalars(stmt))
