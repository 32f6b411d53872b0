from fastapi import APIRouter, Depends

from slotboard.core.errors import LedgerError
from slotboard.dependencies import get_ledger, get_storage
from slotboard.routes.errors import to_http_exception
from slotboard.schemas import Booking, Member
from slotboard.services.ledger import BookingLedger
from slotboard.storage.base import Storage

router = APIRouter(tags=['members'])


@router.get('/members', response_model=list[Member])
def list_members(storage: Storage = Depends(get_storage)):
    try:
        return storage.members.list_all()
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get('/members/{member_id}/bookings', response_model=list[Booking])
def list_member_bookings(member_id: str, ledger: BookingLedger = Depends(get_ledger)):
    try:
        return ledger.list_by_member(member_id)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
