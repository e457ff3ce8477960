"""Event lifecycle: draft creation, edits, one-way publishing and hard deletes.

Every mutation runs under the event's ledger lock and in a single
transaction. Callers are expected to have passed the organiser gate.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import pydantic
import redis
from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from event_manager.database.db import transaction
from event_manager.models.bookings import Booking
from event_manager.models.events import PLACEHOLDER_DESCRIPTION, PLACEHOLDER_TITLE, Event, EventStatus
from event_manager.schemas.events import EventUpdate
from event_manager.services.errors import EventNotFoundError, InvalidTransitionError, ValidationError
from event_manager.services.locks import event_lock


@dataclass(frozen=True)
class EventSales:
    event: Event
    full_sold: int
    concession_sold: int


@dataclass(frozen=True)
class OrganiserOverview:
    published_events: list[EventSales]
    draft_events: list[Event]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def first_error_message(exc: pydantic.ValidationError) -> str:
    """Return the message of the first failing field, in field order."""
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    return errors[0]["msg"]


def validate_event_fields(data: Mapping[str, Any] | EventUpdate) -> EventUpdate:
    if isinstance(data, EventUpdate):
        return data
    try:
        return EventUpdate.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError(first_error_message(exc)) from exc


def _load_for_update(db: Session, event_id: int) -> Event:
    event = db.scalar(select(Event).where(Event.id == event_id).with_for_update())
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def create_draft_event(db: Session) -> Event:
    """Create a draft holding placeholder values, to be completed through edits."""
    event = Event(
        title=PLACEHOLDER_TITLE,
        description=PLACEHOLDER_DESCRIPTION,
        status=EventStatus.DRAFT.value,
        last_modified=_now(),
    )
    with transaction(db):
        db.add(event)
        db.flush()
        event_id = event.id
    db.refresh(event)
    logger.info("Draft event {} created", event_id)
    return event


def get_event(db: Session, event_id: int) -> Event:
    """Organiser view: any status."""
    event = db.get(Event, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def get_published_event(db: Session, event_id: int) -> Event:
    """Attendee view: drafts are reported as not found."""
    event = db.get(Event, event_id)
    if event is None or not event.is_published:
        raise EventNotFoundError(event_id)
    return event


def edit_event(
    db: Session, redis_client: redis.Redis, event_id: int, data: Mapping[str, Any] | EventUpdate
) -> Event:
    """
    Replace the seven business fields of a draft or published event.

    The fields are validated as one unit before anything is written; the first
    invalid field rejects the whole edit.
    """
    fields = validate_event_fields(data)

    with event_lock(redis_client, event_id):
        with transaction(db):
            event = _load_for_update(db, event_id)
            event.title = fields.title
            event.description = fields.description
            event.event_date = fields.event_date
            event.full_price_tickets = fields.full_price_tickets
            event.full_price_cost = fields.full_price_cost
            event.concession_tickets = fields.concession_tickets
            event.concession_cost = fields.concession_cost
            event.last_modified = _now()

    db.refresh(event)
    logger.info("Event {} edited", event_id)
    return event


def publish_event(db: Session, redis_client: redis.Redis, event_id: int) -> Event:
    """Move a draft to published. Field completeness is not re-checked here."""
    with event_lock(redis_client, event_id):
        with transaction(db):
            event = _load_for_update(db, event_id)
            if event.is_published:
                raise InvalidTransitionError("Event is already published")
            event.status = EventStatus.PUBLISHED.value
            event.published_date = _now()

    db.refresh(event)
    logger.info("Event {} published", event_id)
    return event


def delete_event(db: Session, redis_client: redis.Redis, event_id: int) -> None:
    """Hard delete; existing bookings are left referencing the removed id."""
    with event_lock(redis_client, event_id):
        with transaction(db):
            _load_for_update(db, event_id)
            db.execute(delete(Event).where(Event.id == event_id))
            orphaned = db.scalar(select(func.count(Booking.id)).where(Booking.event_id == event_id))

    if orphaned:
        logger.warning("Event {} deleted with {} bookings still referencing it", event_id, orphaned)
    else:
        logger.info("Event {} deleted", event_id)


def list_published_events(db: Session) -> list[Event]:
    stmt = (
        select(Event)
        .where(Event.status == EventStatus.PUBLISHED.value)
        .order_by(Event.event_date.asc(), Event.id.asc())
    )
    return list(db.scalars(stmt))


def list_draft_events(db: Session) -> list[Event]:
    stmt = (
        select(Event)
        .where(Event.status == EventStatus.DRAFT.value)
        .order_by(Event.created_date.desc(), Event.id.desc())
    )
    return list(db.scalars(stmt))


def list_published_event_sales(db: Session) -> list[EventSales]:
    full_sold = func.coalesce(func.sum(Booking.full_price_tickets), 0)
    concession_sold = func.coalesce(func.sum(Booking.concession_tickets), 0)
    stmt = (
        select(Event, full_sold, concession_sold)
        .outerjoin(Booking, Booking.event_id == Event.id)
        .where(Event.status == EventStatus.PUBLISHED.value)
        .group_by(Event.id)
        .order_by(Event.event_date.asc(), Event.id.asc())
    )
    return [
        EventSales(event=event, full_sold=int(full), concession_sold=int(concession))
        for event, full, concession in db.execute(stmt)
    ]


def organiser_overview(db: Session) -> OrganiserOverview:
    return OrganiserOverview(
        published_events=list_published_event_sales(db),
        draft_events=list_draft_events(db),
    )
