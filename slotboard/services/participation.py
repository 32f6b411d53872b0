"""Monthly participation: how many of a month's weekdays each member booked."""

import calendar
import math
from collections import Counter
from collections.abc import Iterable
from datetime import date
from fractions import Fraction

from slotboard.core.errors import ValidationError
from slotboard.schemas import Booking, Member, MemberStats
from slotboard.services.calendar_window import is_weekday

HIGH_PARTICIPATION_RATE = 50
MEDIUM_PARTICIPATION_RATE = 25

SORT_KEYS = {
    'name': lambda stats: stats.member.name.lower(),
    'participationRate': lambda stats: stats.participation_rate,
    'totalBookings': lambda stats: stats.total_bookings,
}
SORT_DIRECTIONS = {'asc', 'desc'}


def weekdays_in_month(year: int, month: int) -> int:
    _, days_in_month = calendar.monthrange(year, month)
    return sum(1 for day in range(1, days_in_month + 1) if is_weekday(date(year, month, day)))


def participation_rate(total_bookings: int, total_weekdays: int) -> int:
    """Whole percentage, halves rounded up."""
    if total_weekdays <= 0:
        return 0
    return math.floor(Fraction(total_bookings * 100, total_weekdays) + Fraction(1, 2))


def participation_status(rate: int) -> str:
    if rate >= HIGH_PARTICIPATION_RATE:
        return 'High'
    if rate >= MEDIUM_PARTICIPATION_RATE:
        return 'Medium'
    return 'Low'


def monthly_participation(
    year: int,
    month: int,
    bookings: Iterable[Booking],
    members: Iterable[Member],
    sort_by: str = 'participationRate',
    direction: str = 'desc',
) -> list[MemberStats]:
    if not 1 <= month <= 12:
        raise ValidationError('Month must be between 1 and 12.')
    if not 1 <= year <= 9999:
        raise ValidationError('Year is out of range.')
    if sort_by not in SORT_KEYS:
        raise ValidationError(f"Cannot sort by '{sort_by}'. Use one of: {', '.join(SORT_KEYS)}.")
    if direction not in SORT_DIRECTIONS:
        raise ValidationError("Sort direction must be 'asc' or 'desc'.")

    total_weekdays = weekdays_in_month(year, month)
    bookings_per_member = Counter(
        booking.member_id
        for booking in bookings
        if booking.date.year == year and booking.date.month == month
    )

    stats = []
    for member in members:
        total_bookings = bookings_per_member.get(member.id, 0)
        rate = participation_rate(total_bookings, total_weekdays)
        stats.append(
            MemberStats(
                member=member,
                total_bookings=total_bookings,
                participation_rate=rate,
                status=participation_status(rate),
            )
        )

    # sorted() is stable in both directions, so ties keep roster order.
    return sorted(stats, key=SORT_KEYS[sort_by], reverse=direction == 'desc')
