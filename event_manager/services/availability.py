"""Remaining-ticket calculation per tier.

``calculate_remaining`` is a pure function of capacities and booked counts;
the helpers below only read the ledger to feed it.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from event_manager.models.bookings import Booking
from event_manager.models.events import Event


@dataclass(frozen=True)
class TierCounts:
    """Ticket quantities for the two tiers."""

    full_price: int = 0
    concession: int = 0

    def covers(self, requested: "TierCounts") -> bool:
        """Return True when ``requested`` fits inside these remaining counts."""
        return requested.full_price <= self.full_price and requested.concession <= self.concession


def calculate_remaining(capacity: TierCounts, bookings: Iterable[TierCounts]) -> TierCounts:
    """Return capacity minus booked tickets for each tier.

    No bookings counts as zero. The result is not clamped, so a negative
    value reveals an over-capacity ledger.
    """
    booked_full = 0
    booked_concession = 0
    for booked in bookings:
        booked_full += booked.full_price
        booked_concession += booked.concession
    return TierCounts(
        full_price=capacity.full_price - booked_full,
        concession=capacity.concession - booked_concession,
    )


def capacity_of(event: Event) -> TierCounts:
    return TierCounts(
        full_price=event.full_price_tickets or 0,
        concession=event.concession_tickets or 0,
    )


def booked_totals(db: Session, event_id: int) -> TierCounts:
    row = db.execute(
        select(
            func.coalesce(func.sum(Booking.full_price_tickets), 0),
            func.coalesce(func.sum(Booking.concession_tickets), 0),
        ).where(Booking.event_id == event_id)
    ).one()
    return TierCounts(full_price=int(row[0]), concession=int(row[1]))


def remaining_for_event(db: Session, event: Event) -> TierCounts:
    return calculate_remaining(capacity_of(event), [booked_totals(db, event.id)])
