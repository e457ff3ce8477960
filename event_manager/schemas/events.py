from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_core import PydanticCustomError

from event_manager.schemas.site_settings import SiteSettingsOut

TICKETS_MAX = 10000
COST_MIN = Decimal("0.01")
COST_MAX = Decimal("99999.99")


def _error(message: str) -> PydanticCustomError:
    return PydanticCustomError("event_field", message)


def _required_text(value: Any, label: str, max_length: int) -> str:
    if value is None:
        raise _error(f"{label} is required")
    text = str(value).strip()
    if not text:
        raise _error(f"{label} is required")
    if len(text) > max_length:
        raise _error(f"{label} must be less than {max_length} characters")
    return text


def _ticket_count(value: Any, label: str, minimum_message: str, maximum_message: str) -> int:
    if value is None or value == "":
        raise _error(f"{label} is required")
    if isinstance(value, bool):
        raise _error(f"{label} must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise _error(f"{label} must be a number")
    if not number.is_finite():
        raise _error(f"{label} must be a number")
    if number != number.to_integral_value():
        raise _error(f"{label} must be a whole number")
    if number < 1:
        raise _error(minimum_message)
    if number > TICKETS_MAX:
        raise _error(maximum_message)
    return int(number)


def _ticket_cost(value: Any, label: str) -> Decimal:
    if value is None or value == "":
        raise _error(f"{label} is required")
    if isinstance(value, bool):
        raise _error(f"{label} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise _error(f"{label} must be a number")
    if not amount.is_finite():
        raise _error(f"{label} must be a number")
    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if amount < COST_MIN:
        raise _error(f"{label} must be at least $0.01")
    if amount > COST_MAX:
        raise _error(f"{label} cannot exceed $99,999.99")
    return amount


def _parse_event_date(value: Any) -> datetime:
    if value is None or value == "":
        raise _error("Event date is required")
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise _error("Please enter a valid date and time")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # Offset pushes the instant past the representable range
        raise _error("Please enter a valid date and time")


# ---------- Event ----------
class EventUpdate(BaseModel):
    """The seven business fields of an event, validated together on every edit."""

    title: str = Field(default=None, validate_default=True)
    description: str = Field(default=None, validate_default=True)
    event_date: datetime = Field(default=None, validate_default=True)
    full_price_tickets: int = Field(default=None, validate_default=True)
    full_price_cost: Decimal = Field(default=None, validate_default=True)
    concession_tickets: int = Field(default=None, validate_default=True)
    concession_cost: Decimal = Field(default=None, validate_default=True)

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v):
        return _required_text(v, "Event title", 200)

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, v):
        return _required_text(v, "Event description", 1000)

    @field_validator("event_date", mode="before")
    @classmethod
    def check_event_date(cls, v):
        parsed = _parse_event_date(v)
        if parsed <= datetime.now(timezone.utc):
            raise _error("Event date must be in the future")
        return parsed

    @field_validator("full_price_tickets", mode="before")
    @classmethod
    def check_full_price_tickets(cls, v):
        return _ticket_count(
            v,
            "Number of full price tickets",
            "Must have at least 1 full price ticket",
            "Cannot have more than 10,000 full price tickets",
        )

    @field_validator("full_price_cost", mode="before")
    @classmethod
    def check_full_price_cost(cls, v):
        return _ticket_cost(v, "Full price ticket cost")

    @field_validator("concession_tickets", mode="before")
    @classmethod
    def check_concession_tickets(cls, v):
        return _ticket_count(
            v,
            "Number of concession tickets",
            "Must have at least 1 concession ticket",
            "Cannot have more than 10,000 concession tickets",
        )

    @field_validator("concession_cost", mode="before")
    @classmethod
    def check_concession_cost(cls, v):
        return _ticket_cost(v, "Concession ticket cost")


class EventOut(BaseModel):
    id: int
    title: str
    description: str
    event_date: datetime | None
    full_price_tickets: int
    full_price_cost: Decimal
    concession_tickets: int
    concession_cost: Decimal
    status: str
    created_date: datetime | None
    published_date: datetime | None
    last_modified: datetime | None

    class Config:
        from_attributes = True


class EventAvailabilityOut(BaseModel):
    event: EventOut
    full_price_remaining: int
    concession_remaining: int


class EventSalesOut(BaseModel):
    event: EventOut
    full_sold: int
    concession_sold: int

    class Config:
        from_attributes = True


class OrganiserOverviewOut(BaseModel):
    published_events: list[EventSalesOut]
    draft_events: list[EventOut]

    class Config:
        from_attributes = True


class AttendeeHomeOut(BaseModel):
    settings: SiteSettingsOut
    events: list[EventOut]
