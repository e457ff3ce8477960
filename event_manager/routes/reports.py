from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from event_manager.core.dependencies import require_organiser
from event_manager.database.db import get_db
from event_manager.schemas.reports import BookingLineOut, BookingsReportOut, BookingsSummaryOut
from event_manager.services.reports import bookings_summary, list_bookings

router = APIRouter(prefix="/organiser/bookings", tags=["reports"], dependencies=[Depends(require_organiser)])


@router.get("", response_model=BookingsReportOut)
def bookings_report(db: Session = Depends(get_db)):
    """All bookings with their cost, plus totals across the ledger."""
    return BookingsReportOut(
        bookings=[BookingLineOut.model_validate(line) for line in list_bookings(db)],
        summary=BookingsSummaryOut(**bookings_summary(db)),
    )
