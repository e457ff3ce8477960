from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class BookingLineOut(BaseModel):
    booking_id: int
    attendee_name: str
    full_price_tickets: int
    concession_tickets: int
    booking_date: datetime | None
    event_id: int
    event_title: str
    event_date: datetime | None
    total_cost: Decimal

    class Config:
        from_attributes = True


class BookingsSummaryOut(BaseModel):
    total_bookings: int
    total_tickets: int
    total_revenue: Decimal


class BookingsReportOut(BaseModel):
    bookings: list[BookingLineOut]
    summary: BookingsSummaryOut
