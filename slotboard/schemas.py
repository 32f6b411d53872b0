"""Records shared by the services, the storage backends and the API."""

import re
from datetime import date, datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from slotboard.core.errors import ValidationError

BOOKED_ACTION = 'booked a slot for'
CANCELLED_ACTION = 'cancelled a slot for'

_ISO_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string.

    ``date.fromisoformat`` alone would also take ``20250820`` on newer
    interpreters, so the shape is checked first.
    """
    if not isinstance(value, str) or not _ISO_DATE_PATTERN.match(value.strip()):
        raise ValidationError('Date must be in YYYY-MM-DD format')
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValidationError(f'{value.strip()} is not a valid calendar date') from exc


class Record(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Member(Record):
    id: str
    name: str
    initials: str
    avatar_color: str


class Booking(Record):
    id: str
    member_id: str
    member_name: str
    date: date
    created_at: datetime


class Activity(Record):
    id: str
    member_id: str
    member_name: str
    action: str
    date: date
    device_info: str
    created_at: datetime


class Comment(Record):
    id: str
    member_id: str
    member_name: str
    date: date
    comment: str
    created_at: datetime


class MemberStats(Record):
    member: Member
    total_bookings: int
    participation_rate: int
    status: str


class MessageResponse(BaseModel):
    message: str
