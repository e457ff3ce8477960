import redis
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from event_manager.core.redis_client import get_redis
from event_manager.database.db import get_db
from event_manager.schemas.bookings import BookingConfirmationOut, BookRequest, parse_leading_int
from event_manager.schemas.events import AttendeeHomeOut, EventAvailabilityOut, EventOut
from event_manager.schemas.site_settings import SiteSettingsOut
from event_manager.services.availability import remaining_for_event
from event_manager.services.bookings import create_booking
from event_manager.services.errors import ValidationError
from event_manager.services.events import get_published_event, list_published_events
from event_manager.services.site_settings import get_site_settings

router = APIRouter(prefix="/attendee", tags=["bookings"])


@router.get("", response_model=AttendeeHomeOut)
def attendee_home(db: Session = Depends(get_db)):
    """Site settings and every published event, soonest first."""
    return AttendeeHomeOut(
        settings=SiteSettingsOut.model_validate(get_site_settings(db)),
        events=[EventOut.model_validate(event) for event in list_published_events(db)],
    )


@router.get("/events/{event_id}", response_model=EventAvailabilityOut)
def event_detail(event_id: str, db: Session = Depends(get_db)):
    parsed_id = parse_leading_int(event_id)
    if parsed_id is None or parsed_id <= 0:
        raise ValidationError("Invalid event ID")
    event = get_published_event(db, parsed_id)
    remaining = remaining_for_event(db, event)
    return EventAvailabilityOut(
        event=EventOut.model_validate(event),
        full_price_remaining=remaining.full_price,
        concession_remaining=remaining.concession,
    )


@router.post("/events/{event_id}/book", response_model=BookingConfirmationOut, status_code=201)
def book_tickets(
    event_id: str,
    payload: BookRequest,
    db: Session = Depends(get_db),
    redis_client: redis.Redis = Depends(get_redis),
):
    confirmation = create_booking(
        db,
        redis_client,
        event_id=parse_leading_int(event_id) or 0,
        attendee_name=payload.attendee_name,
        full_price_tickets=payload.full_price_tickets,
        concession_tickets=payload.concession_tickets,
    )
    return BookingConfirmationOut.model_validate(confirmation)
