from datetime import date

from fastapi import APIRouter, Depends, Header, status
from pydantic import field_validator

from slotboard.core.errors import LedgerError, ValidationError
from slotboard.dependencies import get_ledger
from slotboard.routes.errors import parse_path_date, to_http_exception
from slotboard.schemas import Booking, MessageResponse, Record, parse_iso_date
from slotboard.services.device_info import describe_device
from slotboard.services.ledger import BookingLedger

router = APIRouter(tags=['bookings'])


def validate_request_date(value):
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(value)
    except ValidationError as exc:
        raise ValueError(exc.message) from exc


class BookSlotRequest(Record):
    member_id: str
    member_name: str
    date: date

    @field_validator('member_id', 'member_name')
    @classmethod
    def validate_member_fields(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Member is required.')
        return normalized

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, value):
        return validate_request_date(value)


@router.get('/bookings', response_model=list[Booking])
def list_bookings(ledger: BookingLedger = Depends(get_ledger)):
    try:
        return ledger.list_all()
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get('/bookings/{booking_date}', response_model=list[Booking])
def list_bookings_for_date(booking_date: str, ledger: BookingLedger = Depends(get_ledger)):
    parsed_date = parse_path_date(booking_date)

    try:
        return ledger.list_by_date(parsed_date)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.post('/bookings', response_model=Booking, status_code=status.HTTP_201_CREATED)
def book_slot(
    data: BookSlotRequest,
    user_agent: str | None = Header(default=None),
    ledger: BookingLedger = Depends(get_ledger),
):
    try:
        return ledger.book_slot(
            member_id=data.member_id,
            member_name=data.member_name,
            booking_date=data.date,
            device_info=describe_device(user_agent),
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.delete('/bookings/{member_id}/{booking_date}', response_model=MessageResponse)
def cancel_booking(
    member_id: str,
    booking_date: str,
    user_agent: str | None = Header(default=None),
    ledger: BookingLedger = Depends(get_ledger),
):
    parsed_date = parse_path_date(booking_date)

    try:
        ledger.cancel_booking(
            member_id=member_id,
            booking_date=parsed_date,
            device_info=describe_device(user_agent),
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc

    return MessageResponse(message='Booking cancelled successfully')
