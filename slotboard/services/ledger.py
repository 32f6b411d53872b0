"""Booking ledger: weekday, uniqueness and capacity rules over the booking store."""

import logging
from collections.abc import Callable
from datetime import date, datetime, timezone
from uuid import uuid4

from slotboard.core import config
from slotboard.core.errors import ConflictError, InvalidDateError, NotFoundError, ValidationError
from slotboard.schemas import BOOKED_ACTION, CANCELLED_ACTION, Activity, Booking
from slotboard.services.calendar_window import is_weekday
from slotboard.services.device_info import UNKNOWN_DEVICE
from slotboard.storage.base import Storage

logger = logging.getLogger(__name__)

UNKNOWN_MEMBER_NAME = 'Unknown'


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def require_text(value: str | None, field_label: str) -> str:
    normalized = (value or '').strip()
    if not normalized:
        raise ValidationError(f'{field_label} is required.')
    return normalized


class BookingLedger:
    def __init__(
        self,
        storage: Storage,
        capacity: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._storage = storage
        self.capacity = config.MAX_SLOTS_PER_DAY if capacity is None else capacity
        self._clock = clock

    def _activity(self, member_id: str, member_name: str, action: str, booking_date: date, device_info: str) -> Activity:
        return Activity(
            id=str(uuid4()),
            member_id=member_id,
            member_name=member_name,
            action=action,
            date=booking_date,
            device_info=device_info or UNKNOWN_DEVICE,
            created_at=self._clock(),
        )

    def book_slot(
        self,
        member_id: str,
        member_name: str,
        booking_date: date,
        device_info: str = UNKNOWN_DEVICE,
    ) -> Booking:
        member_id = require_text(member_id, 'Member id')
        member_name = require_text(member_name, 'Member name')

        if not is_weekday(booking_date):
            logger.warning('Rejected weekend booking for member %s on %s', member_id, booking_date.isoformat())
            raise InvalidDateError('Bookings are only allowed on weekdays (Monday-Friday)')

        booking = Booking(
            id=str(uuid4()),
            member_id=member_id,
            member_name=member_name,
            date=booking_date,
            created_at=self._clock(),
        )
        activity = self._activity(member_id, member_name, BOOKED_ACTION, booking_date, device_info)

        try:
            self._storage.bookings.insert(booking, activity, self.capacity)
        except ConflictError as exc:
            logger.warning('Rejected booking for member %s on %s: %s', member_id, booking_date.isoformat(), exc.message)
            raise
        logger.info('%s booked a slot for %s', member_name, booking_date.isoformat())
        return booking

    def _member_name_for(self, member_id: str, booking_date: date) -> str:
        member = self._storage.members.get(member_id)
        if member is not None:
            return member.name

        for booking in self._storage.bookings.list_by_date(booking_date):
            if booking.member_id == member_id and booking.member_name:
                return booking.member_name
        return UNKNOWN_MEMBER_NAME

    def cancel_booking(
        self,
        member_id: str,
        booking_date: date,
        device_info: str = UNKNOWN_DEVICE,
    ) -> Booking:
        """Hard-delete the member's booking for the date.

        Past dates can be cancelled; only new bookings are steered away from
        them, and that happens in the calendar view rather than here.
        """
        member_id = require_text(member_id, 'Member id')
        member_name = self._member_name_for(member_id, booking_date)
        activity = self._activity(member_id, member_name, CANCELLED_ACTION, booking_date, device_info)

        try:
            booking = self._storage.bookings.delete(member_id, booking_date, activity)
        except NotFoundError:
            logger.warning('No booking to cancel for member %s on %s', member_id, booking_date.isoformat())
            raise

        logger.info('%s cancelled a slot for %s', member_name, booking_date.isoformat())
        return booking

    def list_all(self) -> list[Booking]:
        return self._storage.bookings.list_all()

    def list_by_date(self, booking_date: date) -> list[Booking]:
        return self._storage.bookings.list_by_date(booking_date)

    def list_by_member(self, member_id: str) -> list[Booking]:
        return self._storage.bookings.list_by_member(member_id)
