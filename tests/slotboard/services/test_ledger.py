from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone

import pytest

from slotboard.core.errors import (
    CapacityExceededError,
    ConflictError,
    DuplicateBookingError,
    InvalidDateError,
    NotFoundError,
    ValidationError,
)
from slotboard.schemas import BOOKED_ACTION, CANCELLED_ACTION, Member
from slotboard.services.ledger import BookingLedger
from slotboard.storage.memory import build_memory_storage

MONDAY = date(2025, 8, 18)
SATURDAY = date(2025, 8, 23)
SUNDAY = date(2025, 8, 24)


def ticking_clock(start: datetime = datetime(2025, 8, 18, 6, 0, tzinfo=timezone.utc)):
    current = [start]

    def clock() -> datetime:
        current[0] += timedelta(seconds=1)
        return current[0]

    return clock


@pytest.fixture
def storage():
    return build_memory_storage()


@pytest.fixture
def ledger(storage):
    return BookingLedger(storage, capacity=6, clock=ticking_clock())


def test_book_slot_creates_booking_and_activity(ledger: BookingLedger, storage) -> None:
    booking = ledger.book_slot('m1', 'Gagan', MONDAY, device_info='Mac Device - Safari')

    assert booking.member_id == 'm1'
    assert booking.member_name == 'Gagan'
    assert booking.date == MONDAY
    assert booking.created_at.tzinfo is not None
    assert ledger.list_by_date(MONDAY) == [booking]

    activities = storage.activities.list_all()
    assert len(activities) == 1
    assert activities[0].action == BOOKED_ACTION
    assert activities[0].member_id == 'm1'
    assert activities[0].device_info == 'Mac Device - Safari'


@pytest.mark.parametrize('weekend_day', [SATURDAY, SUNDAY])
def test_book_slot_rejects_weekends_regardless_of_state(ledger: BookingLedger, storage, weekend_day: date) -> None:
    with pytest.raises(InvalidDateError) as exception_info:
        ledger.book_slot('m1', 'Gagan', weekend_day)

    assert isinstance(exception_info.value, ValidationError)
    assert exception_info.value.message == 'Bookings are only allowed on weekdays (Monday-Friday)'
    assert ledger.list_all() == []
    assert storage.activities.list_all() == []


def test_book_slot_rejects_second_booking_for_same_member_and_date(ledger: BookingLedger, storage) -> None:
    ledger.book_slot('m1', 'Gagan', MONDAY)

    with pytest.raises(DuplicateBookingError) as exception_info:
        ledger.book_slot('m1', 'Gagan', MONDAY)

    assert isinstance(exception_info.value, ConflictError)
    assert exception_info.value.message == 'Member already has a booking for this date'
    assert len(ledger.list_by_date(MONDAY)) == 1
    assert len(storage.activities.list_all()) == 1


def test_book_slot_allows_same_member_on_different_dates(ledger: BookingLedger) -> None:
    ledger.book_slot('m1', 'Gagan', MONDAY)
    ledger.book_slot('m1', 'Gagan', MONDAY + timedelta(days=1))

    assert len(ledger.list_by_member('m1')) == 2


def test_book_slot_rejects_seventh_booking(ledger: BookingLedger) -> None:
    for index in range(6):
        ledger.book_slot(f'm{index}', f'Member {index}', MONDAY)

    with pytest.raises(CapacityExceededError) as exception_info:
        ledger.book_slot('m6', 'Member 6', MONDAY)

    assert exception_info.value.message == 'This date is fully booked (6/6 slots)'
    assert len(ledger.list_by_date(MONDAY)) == 6


def test_duplicate_check_wins_over_capacity_check(ledger: BookingLedger) -> None:
    for index in range(6):
        ledger.book_slot(f'm{index}', f'Member {index}', MONDAY)

    with pytest.raises(DuplicateBookingError):
        ledger.book_slot('m0', 'Member 0', MONDAY)


def test_concurrent_bookings_never_exceed_capacity(storage) -> None:
    ledger = BookingLedger(storage, capacity=6)

    def attempt(index: int) -> bool:
        try:
            ledger.book_slot(f'm{index}', f'Member {index}', MONDAY)
        except CapacityExceededError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(attempt, range(20)))

    assert results.count(True) == 6
    assert len(ledger.list_by_date(MONDAY)) == 6
    assert len(storage.activities.list_all()) == 6


@pytest.mark.parametrize(('member_id', 'member_name'), [('   ', 'Gagan'), ('m1', ''), ('m1', None)])
def test_book_slot_requires_member_fields(ledger: BookingLedger, member_id, member_name) -> None:
    with pytest.raises(ValidationError):
        ledger.book_slot(member_id, member_name, MONDAY)


def test_cancel_booking_missing_raises_not_found_without_activity(ledger: BookingLedger, storage) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        ledger.cancel_booking('m1', MONDAY)

    assert exception_info.value.message == 'Booking not found'
    assert storage.activities.list_all() == []


def test_book_then_cancel_restores_previous_state(ledger: BookingLedger, storage) -> None:
    ledger.book_slot('m2', 'He-man', MONDAY)
    count_before = len(ledger.list_by_date(MONDAY))

    ledger.book_slot('m1', 'Gagan', MONDAY)
    ledger.cancel_booking('m1', MONDAY)

    assert len(ledger.list_by_date(MONDAY)) == count_before
    assert [activity.action for activity in storage.activities.list_all()] == [
        BOOKED_ACTION,
        BOOKED_ACTION,
        CANCELLED_ACTION,
    ]


def test_cancel_booking_uses_roster_name(ledger: BookingLedger, storage) -> None:
    storage.members.add(Member(id='m1', name='Gagan', initials='G', avatar_color='blue'))
    ledger.book_slot('m1', 'Old name', MONDAY)

    ledger.cancel_booking('m1', MONDAY)

    assert storage.activities.list_all()[-1].member_name == 'Gagan'


def test_cancel_booking_falls_back_to_booked_name(ledger: BookingLedger, storage) -> None:
    ledger.book_slot('ghost', 'Casper', MONDAY)

    ledger.cancel_booking('ghost', MONDAY)

    assert storage.activities.list_all()[-1].member_name == 'Casper'


def test_cancel_booking_allows_past_dates(ledger: BookingLedger) -> None:
    past_monday = date(2020, 1, 6)
    ledger.book_slot('m1', 'Gagan', past_monday)

    cancelled = ledger.cancel_booking('m1', past_monday)

    assert cancelled.date == past_monday
    assert ledger.list_by_date(past_monday) == []


def test_list_all_is_idempotent(ledger: BookingLedger) -> None:
    ledger.book_slot('m1', 'Gagan', MONDAY)
    ledger.book_slot('m2', 'Rahul', MONDAY + timedelta(days=2))

    assert ledger.list_all() == ledger.list_all()


def test_uniqueness_holds_after_mixed_operations(ledger: BookingLedger) -> None:
    days = [MONDAY + timedelta(days=offset) for offset in range(5)]
    for day in days:
        for index in range(8):
            try:
                ledger.book_slot(f'm{index % 4}', f'Member {index % 4}', day)
            except ConflictError:
                pass
        ledger.cancel_booking('m1', day)

    for day in days:
        member_ids = [booking.member_id for booking in ledger.list_by_date(day)]
        assert len(member_ids) == len(set(member_ids))
        assert len(member_ids) <= 6


def test_explicit_zero_capacity_is_not_replaced_by_default(storage) -> None:
    ledger = BookingLedger(storage, capacity=0)

    assert ledger.capacity == 0
    with pytest.raises(CapacityExceededError):
        ledger.book_slot('m1', 'Gagan', MONDAY)
    assert storage.bookings.list_all() == []
