"""
Test the booking transaction.
"""
import random
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from event_manager.models.bookings import Booking
from event_manager.models.events import EventStatus
from event_manager.services.availability import TierCounts, remaining_for_event
from event_manager.services.bookings import create_booking
from event_manager.services.errors import (
    CapacityConflictError,
    EventNotFoundError,
    LedgerBusyError,
    ValidationError,
)
from event_manager.services.locks import event_lock_key


def count_bookings(db: Session) -> int:
    return db.scalar(select(func.count(Booking.id)))


def book_in_own_session(session_factory, redis_client, event_id: int, name: str, full: int, concession: int):
    """Book from a fresh session, the way each request would. Returns the outcome."""
    db = session_factory()
    try:
        create_booking(
            db,
            redis_client,
            event_id=event_id,
            attendee_name=name,
            full_price_tickets=full,
            concession_tickets=concession,
        )
        return "booked"
    except CapacityConflictError:
        return "conflict"
    finally:
        db.close()


class TestBookingService:
    """Test booking service functions."""

    def test_create_booking_success(self, db_session: Session, redis_client, make_event):
        event = make_event()

        confirmation = create_booking(
            db_session,
            redis_client,
            event_id=event.id,
            attendee_name="  Alice  ",
            full_price_tickets=1,
            concession_tickets=2,
        )

        assert confirmation.booking_id is not None
        assert confirmation.attendee_name == "Alice"
        assert confirmation.full_price_tickets == 1
        assert confirmation.concession_tickets == 2
        assert str(confirmation.total_cost) == "20.00"
        assert confirmation.event.id == event.id
        assert confirmation.event.title == "Spring Concert"

        booking = db_session.get(Booking, confirmation.booking_id)
        assert booking.event_id == event.id
        assert booking.attendee_name == "Alice"

    def test_scenario_sell_out_full_price_tier(self, db_session: Session, redis_client, make_event):
        """full=2 @ $10, concession=3 @ $5: book both full tickets, then one more is refused."""
        event = make_event()

        create_booking(
            db_session, redis_client, event_id=event.id, attendee_name="Alice", full_price_tickets=2
        )
        assert remaining_for_event(db_session, event).full_price == 0

        with pytest.raises(CapacityConflictError, match="Not enough tickets available") as exc_info:
            create_booking(
                db_session, redis_client, event_id=event.id, attendee_name="Bob", full_price_tickets=1
            )

        assert exc_info.value.full_price_remaining == 0
        assert exc_info.value.concession_remaining == 3
        assert remaining_for_event(db_session, event) == TierCounts(full_price=0, concession=3)
        assert count_bookings(db_session) == 1

    def test_booking_exactly_the_remaining_tickets(self, db_session: Session, redis_client, make_event):
        event = make_event()

        create_booking(
            db_session,
            redis_client,
            event_id=event.id,
            attendee_name="Alice",
            full_price_tickets=2,
            concession_tickets=3,
        )

        assert remaining_for_event(db_session, event) == TierCounts(0, 0)

    def test_zero_tickets_rejected(self, db_session: Session, redis_client, make_event):
        event = make_event()

        with pytest.raises(ValidationError, match="at least one ticket"):
            create_booking(
                db_session,
                redis_client,
                event_id=event.id,
                attendee_name="Alice",
                full_price_tickets=0,
                concession_tickets=0,
            )

        assert count_bookings(db_session) == 0

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_attendee_name_rejected(self, db_session: Session, redis_client, make_event, name):
        event = make_event()

        with pytest.raises(ValidationError, match="Attendee name is required"):
            create_booking(
                db_session, redis_client, event_id=event.id, attendee_name=name, full_price_tickets=1
            )

        assert count_bookings(db_session) == 0

    def test_attendee_name_truncated_to_100_characters(self, db_session: Session, redis_client, make_event):
        event = make_event()

        confirmation = create_booking(
            db_session, redis_client, event_id=event.id, attendee_name="x" * 150, full_price_tickets=1
        )

        assert len(confirmation.attendee_name) == 100

    def test_negative_quantity_rejected(self, db_session: Session, redis_client, make_event):
        event = make_event()

        with pytest.raises(ValidationError, match="Invalid ticket quantity"):
            create_booking(
                db_session,
                redis_client,
                event_id=event.id,
                attendee_name="Alice",
                full_price_tickets=-1,
                concession_tickets=2,
            )

        assert count_bookings(db_session) == 0

    @pytest.mark.parametrize("event_id", [0, -3])
    def test_invalid_event_id_rejected(self, db_session: Session, redis_client, event_id):
        with pytest.raises(ValidationError, match="Invalid event ID"):
            create_booking(
                db_session, redis_client, event_id=event_id, attendee_name="Alice", full_price_tickets=1
            )

    def test_missing_event_is_not_found(self, db_session: Session, redis_client):
        with pytest.raises(EventNotFoundError):
            create_booking(
                db_session, redis_client, event_id=99999, attendee_name="Alice", full_price_tickets=1
            )

    def test_draft_event_is_not_found(self, db_session: Session, redis_client, make_event):
        event = make_event(status=EventStatus.DRAFT.value)

        with pytest.raises(EventNotFoundError, match="Event not found"):
            create_booking(
                db_session, redis_client, event_id=event.id, attendee_name="Alice", full_price_tickets=1
            )

        assert count_bookings(db_session) == 0

    def test_rejected_booking_leaves_ledger_untouched(self, db_session: Session, redis_client, make_event):
        event = make_event()
        create_booking(db_session, redis_client, event_id=event.id, attendee_name="Alice", concession_tickets=1)
        before = count_bookings(db_session)

        with pytest.raises(CapacityConflictError):
            create_booking(
                db_session,
                redis_client,
                event_id=event.id,
                attendee_name="Bob",
                full_price_tickets=1,
                concession_tickets=3,
            )

        assert count_bookings(db_session) == before
        assert remaining_for_event(db_session, event) == TierCounts(full_price=2, concession=2)

    def test_lock_held_elsewhere_reports_busy(self, db_session: Session, redis_client, make_event, monkeypatch):
        event = make_event()
        monkeypatch.setenv("EVENT_LOCK_BLOCKING_TIMEOUT", "0.2")
        other_holder = redis_client.lock(event_lock_key(event.id), timeout=10)
        assert other_holder.acquire(blocking=False)

        try:
            with pytest.raises(LedgerBusyError):
                create_booking(
                    db_session, redis_client, event_id=event.id, attendee_name="Alice", full_price_tickets=1
                )
        finally:
            other_holder.release()

        assert count_bookings(db_session) == 0

    def test_lock_released_after_booking(self, db_session: Session, redis_client, make_event):
        event = make_event()

        create_booking(db_session, redis_client, event_id=event.id, attendee_name="Alice", full_price_tickets=1)

        assert redis_client.get(event_lock_key(event.id)) is None

    def test_lock_released_after_rejection(self, db_session: Session, redis_client, make_event):
        event = make_event()

        with pytest.raises(CapacityConflictError):
            create_booking(db_session, redis_client, event_id=event.id, attendee_name="Alice", full_price_tickets=3)

        assert redis_client.get(event_lock_key(event.id)) is None


class TestConcurrentBookings:
    """Test that concurrent bookings never oversell."""

    def test_two_requests_for_last_ticket(self, db_session: Session, session_factory, redis_client, make_event):
        event = make_event(full_price_tickets=1, concession_tickets=0)
        event_id = event.id

        with ThreadPoolExecutor(max_workers=2) as executor:
            futures = [
                executor.submit(book_in_own_session, session_factory, redis_client, event_id, name, 1, 0)
                for name in ("Alice", "Bob")
            ]
            results = [f.result() for f in futures]

        assert sorted(results) == ["booked", "conflict"]
        assert count_bookings(db_session) == 1

    def test_many_requests_respect_capacity(self, db_session: Session, session_factory, redis_client, make_event):
        event = make_event(full_price_tickets=3, concession_tickets=0)
        event_id = event.id

        with ThreadPoolExecutor(max_workers=10) as executor:
            futures = [
                executor.submit(book_in_own_session, session_factory, redis_client, event_id, f"User {i}", 1, 0)
                for i in range(10)
            ]
            results = [f.result() for f in futures]

        assert results.count("booked") == 3
        assert results.count("conflict") == 7
        assert remaining_for_event(db_session, event) == TierCounts(full_price=0, concession=0)

    def test_adversarial_requests_never_exceed_capacity(self, db_session: Session, session_factory, redis_client, make_event):
        event = make_event(full_price_tickets=7, concession_tickets=5)
        event_id = event.id
        rng = random.Random(1234)
        requests = [(rng.randint(0, 4), rng.randint(1, 4)) for _ in range(20)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = [
                executor.submit(book_in_own_session, session_factory, redis_client, event_id, f"User {i}", full, concession)
                for i, (full, concession) in enumerate(requests)
            ]
            for f in futures:
                f.result()

        booked_full = db_session.scalar(
            select(func.coalesce(func.sum(Booking.full_price_tickets), 0)).where(Booking.event_id == event_id)
        )
        booked_concession = db_session.scalar(
            select(func.coalesce(func.sum(Booking.concession_tickets), 0)).where(Booking.event_id == event_id)
        )
        assert booked_full <= 7
        assert booked_concession <= 5
        remaining = remaining_for_event(db_session, event)
        assert remaining.full_price >= 0
        assert remaining.concession >= 0
