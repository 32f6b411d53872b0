from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from slotboard.core import config
from slotboard.schemas import Booking

WORKING_DAYS_PER_WEEK = 5
WINDOW_DAYS = 14


@dataclass(frozen=True)
class BookingWindow:
    week1: tuple[date, ...]
    week2: tuple[date, ...]

    @property
    def dates(self) -> tuple[date, ...]:
        return self.week1 + self.week2

    def __contains__(self, day: date) -> bool:
        return day in self.dates


def is_weekday(day: date) -> bool:
    return day.weekday() < 5


def start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def booking_window(today: date) -> BookingWindow:
    """Weekdays of the calendar week containing ``today`` and the week after.

    The window is anchored to Monday, so weekdays of the current week that
    have already passed are still part of week 1.
    """
    monday = start_of_week(today)

    weekdays = [
        monday + timedelta(days=offset)
        for offset in range(WINDOW_DAYS)
        if is_weekday(monday + timedelta(days=offset))
    ]

    week1 = tuple(weekdays[:WORKING_DAYS_PER_WEEK])
    week2 = tuple(weekdays[WORKING_DAYS_PER_WEEK:WORKING_DAYS_PER_WEEK * 2])
    return BookingWindow(week1=week1, week2=week2)


@dataclass(frozen=True)
class CalendarDay:
    date: date
    bookings: tuple[Booking, ...]
    capacity: int
    is_past: bool
    is_bookable: bool

    @property
    def booked_count(self) -> int:
        return len(self.bookings)

    @property
    def is_full(self) -> bool:
        return self.booked_count >= self.capacity


def is_booking_open(day: date, now: datetime, cutoff: time | None = None) -> bool:
    """Whether the UI should still offer new bookings for ``day``.

    The ledger accepts any weekday; this only drives the calendar view.
    """
    if cutoff is None:
        cutoff = config.BOOKING_CUTOFF_TIME
    today = now.date()
    if day < today:
        return False
    if day == today:
        return now.time() < cutoff
    return True


def describe_window(
    window: BookingWindow,
    bookings: list[Booking],
    now: datetime,
    capacity: int | None = None,
    cutoff: time | None = None,
) -> tuple[list[CalendarDay], list[CalendarDay]]:
    if capacity is None:
        capacity = config.MAX_SLOTS_PER_DAY
    bookings_by_date: dict[date, list[Booking]] = {}
    for booking in bookings:
        bookings_by_date.setdefault(booking.date, []).append(booking)

    def describe(day: date) -> CalendarDay:
        day_bookings = tuple(bookings_by_date.get(day, []))
        return CalendarDay(
            date=day,
            bookings=day_bookings,
            capacity=capacity,
            is_past=day < now.date(),
            is_bookable=is_booking_open(day, now, cutoff) and len(day_bookings) < capacity,
        )

    return [describe(day) for day in window.week1], [describe(day) for day in window.week2]
