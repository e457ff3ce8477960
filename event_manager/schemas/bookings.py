import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_leading_int(value: Any) -> int | None:
    """Read the whole number a value starts with, so "3 seats" is 3 and 2.5 is 2. None if there is none."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


class BookRequest(BaseModel):
    attendee_name: str = ""
    full_price_tickets: int = 0
    concession_tickets: int = 0

    @field_validator("attendee_name", mode="before")
    @classmethod
    def coerce_name(cls, v):
        return "" if v is None else str(v)

    # Unreadable quantities count as zero tickets
    @field_validator("full_price_tickets", "concession_tickets", mode="before")
    @classmethod
    def coerce_quantity(cls, v):
        return parse_leading_int(v) or 0


class EventSnapshotOut(BaseModel):
    id: int
    title: str
    description: str
    event_date: datetime | None
    full_price_cost: Decimal
    concession_cost: Decimal

    class Config:
        from_attributes = True


class BookingConfirmationOut(BaseModel):
    booking_id: int
    attendee_name: str
    full_price_tickets: int
    concession_tickets: int
    total_cost: Decimal
    event: EventSnapshotOut

    class Config:
        from_attributes = True


class BookingOut(BaseModel):
    id: int
    event_id: int
    attendee_name: str
    full_price_tickets: int = Field(ge=0)
    concession_tickets: int = Field(ge=0)
    booking_date: datetime | None

    class Config:
        from_attributes = True
