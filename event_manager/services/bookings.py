from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

import redis
from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from event_manager.database.db import transaction
from event_manager.models.bookings import Booking
from event_manager.models.events import Event, EventStatus
from event_manager.services.availability import TierCounts, remaining_for_event
from event_manager.services.errors import CapacityConflictError, EventNotFoundError, ValidationError
from event_manager.services.locks import event_lock

ATTENDEE_NAME_MAX_LENGTH = 100


@dataclass(frozen=True)
class EventSnapshot:
    id: int
    title: str
    description: str
    event_date: datetime | None
    full_price_cost: Decimal
    concession_cost: Decimal

    @classmethod
    def from_event(cls, event: Event) -> "EventSnapshot":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            event_date=event.event_date,
            full_price_cost=event.full_price_cost,
            concession_cost=event.concession_cost,
        )


@dataclass(frozen=True)
class BookingConfirmation:
    booking_id: int
    attendee_name: str
    full_price_tickets: int
    concession_tickets: int
    total_cost: Decimal
    event: EventSnapshot


def sanitize_attendee_name(name: str | None) -> str:
    if not name:
        return ""
    return str(name).strip()[:ATTENDEE_NAME_MAX_LENGTH]


def _validate_request(
    event_id: int, attendee_name: str | None, full_price_tickets: int, concession_tickets: int
) -> tuple[str, TierCounts]:
    if isinstance(event_id, bool) or not isinstance(event_id, int) or event_id <= 0:
        raise ValidationError("Invalid event ID")

    name = sanitize_attendee_name(attendee_name)
    if not name:
        raise ValidationError("Attendee name is required")

    if full_price_tickets == 0 and concession_tickets == 0:
        raise ValidationError("Please select at least one ticket")

    for quantity in (full_price_tickets, concession_tickets):
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise ValidationError("Invalid ticket quantity")

    return name, TierCounts(full_price=full_price_tickets, concession=concession_tickets)


def create_booking(
    db: Session,
    redis_client: redis.Redis,
    *,
    event_id: int,
    attendee_name: str | None,
    full_price_tickets: int = 0,
    concession_tickets: int = 0,
) -> BookingConfirmation:
    """
    Book tickets for a published event without ever overselling a tier.

    The availability check and the insert run under the event's Redis lock and
    inside one database transaction, so two requests for the last ticket
    cannot both succeed.
    """
    name, requested = _validate_request(event_id, attendee_name, full_price_tickets, concession_tickets)

    with event_lock(redis_client, event_id):
        with transaction(db):
            confirmation = _create_booking_in_transaction(db, event_id, name, requested)

    logger.info(
        "Booking {} committed for event {}: full={} concession={}",
        confirmation.booking_id,
        event_id,
        requested.full_price,
        requested.concession,
    )
    return confirmation


def _create_booking_in_transaction(
    db: Session, event_id: int, attendee_name: str, requested: TierCounts
) -> BookingConfirmation:
    """Internal function to check availability and insert within a transaction."""
    event = db.scalar(select(Event).where(Event.id == event_id).with_for_update())
    if event is None or event.status != EventStatus.PUBLISHED.value:
        # Drafts are reported exactly like missing events
        raise EventNotFoundError(event_id)

    remaining = remaining_for_event(db, event)
    if not remaining.covers(requested):
        logger.info(
            "Booking rejected for event {}: requested full={} concession={}, remaining full={} concession={}",
            event_id,
            requested.full_price,
            requested.concession,
            remaining.full_price,
            remaining.concession,
        )
        raise CapacityConflictError(event_id, remaining.full_price, remaining.concession)

    booking = Booking(
        event_id=event_id,
        attendee_name=attendee_name,
        full_price_tickets=requested.full_price,
        concession_tickets=requested.concession,
    )
    db.add(booking)
    db.flush()  # gets booking.id

    total_cost = (
        requested.full_price * Decimal(event.full_price_cost)
        + requested.concession * Decimal(event.concession_cost)
    )
    return BookingConfirmation(
        booking_id=booking.id,
        attendee_name=attendee_name,
        full_price_tickets=requested.full_price,
        concession_tickets=requested.concession,
        total_cost=total_cost.quantize(Decimal("0.01")),
        event=EventSnapshot.from_event(event),
    )
