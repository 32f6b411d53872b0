from datetime import date, datetime

from fastapi import APIRouter, Depends, Query

from slotboard.core.errors import LedgerError
from slotboard.dependencies import get_ledger, get_storage
from slotboard.routes.errors import to_http_exception
from slotboard.schemas import Booking, MemberStats, Record
from slotboard.services.calendar_window import CalendarDay, booking_window, describe_window
from slotboard.services.ledger import BookingLedger
from slotboard.services.participation import monthly_participation
from slotboard.storage.base import Storage

router = APIRouter(tags=['calendar'])


class CalendarDayResponse(Record):
    date: date
    booked_count: int
    capacity: int
    is_full: bool
    is_past: bool
    is_bookable: bool
    bookings: list[Booking]


class CalendarResponse(Record):
    week1: list[CalendarDayResponse]
    week2: list[CalendarDayResponse]


def local_now() -> datetime:
    return datetime.now()


def to_day_response(day: CalendarDay) -> CalendarDayResponse:
    return CalendarDayResponse(
        date=day.date,
        booked_count=day.booked_count,
        capacity=day.capacity,
        is_full=day.is_full,
        is_past=day.is_past,
        is_bookable=day.is_bookable,
        bookings=list(day.bookings),
    )


@router.get('/calendar', response_model=CalendarResponse)
def get_calendar(ledger: BookingLedger = Depends(get_ledger)):
    now = local_now()
    window = booking_window(now.date())

    try:
        bookings = [booking for booking in ledger.list_all() if booking.date in window]
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

    week1, week2 = describe_window(window, bookings, now, capacity=ledger.capacity)
    return CalendarResponse(
        week1=[to_day_response(day) for day in week1],
        week2=[to_day_response(day) for day in week2],
    )


@router.get('/participation', response_model=list[MemberStats])
def get_participation(
    year: int | None = Query(default=None, ge=1, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    sort_by: str = Query(default='participationRate', alias='sortBy'),
    direction: str = Query(default='desc'),
    storage: Storage = Depends(get_storage),
):
    today = local_now().date()

    try:
        return monthly_participation(
            year=year or today.year,
            month=month or today.month,
            bookings=storage.bookings.list_all(),
            members=storage.members.list_all(),
            sort_by=sort_by,
            direction=direction,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
