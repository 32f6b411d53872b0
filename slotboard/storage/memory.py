"""Process-local storage kept in plain lists behind one lock."""

from datetime import date
from threading import RLock

from slotboard.core.errors import CapacityExceededError, DuplicateBookingError, NotFoundError
from slotboard.schemas import Activity, Booking, Comment, Member
from slotboard.storage.base import ActivityStore, BookingStore, CommentStore, MemberStore, Storage


def duplicate_booking_message() -> str:
    return 'Member already has a booking for this date'


def capacity_message(capacity: int) -> str:
    return f'This date is fully booked ({capacity}/{capacity} slots)'


class MemoryState:
    def __init__(self):
        self.lock = RLock()
        self.members: list[Member] = []
        self.bookings: list[Booking] = []
        self.activities: list[Activity] = []
        self.comments: list[Comment] = []

    def changed(self) -> None:
        """Hook called while holding ``lock`` after every write."""


class MemoryMemberStore(MemberStore):
    def __init__(self, state: MemoryState):
        self._state = state

    def list_all(self) -> list[Member]:
        with self._state.lock:
            return list(self._state.members)

    def get(self, member_id: str) -> Member | None:
        with self._state.lock:
            return next((member for member in self._state.members if member.id == member_id), None)

    def add(self, member: Member) -> Member:
        with self._state.lock:
            self._state.members.append(member)
            self._state.changed()
        return member


class MemoryBookingStore(BookingStore):
    def __init__(self, state: MemoryState):
        self._state = state

    def list_all(self) -> list[Booking]:
        with self._state.lock:
            return list(self._state.bookings)

    def list_by_date(self, booking_date: date) -> list[Booking]:
        with self._state.lock:
            return [booking for booking in self._state.bookings if booking.date == booking_date]

    def list_by_member(self, member_id: str) -> list[Booking]:
        with self._state.lock:
            return [booking for booking in self._state.bookings if booking.member_id == member_id]

    def insert(self, booking: Booking, activity: Activity, capacity: int) -> Booking:
        with self._state.lock:
            same_day = [existing for existing in self._state.bookings if existing.date == booking.date]

            if any(existing.member_id == booking.member_id for existing in same_day):
                raise DuplicateBookingError(duplicate_booking_message())
            if len(same_day) >= capacity:
                raise CapacityExceededError(capacity_message(capacity))

            self._state.bookings.append(booking)
            self._state.activities.append(activity)
            self._state.changed()
        return booking

    def delete(self, member_id: str, booking_date: date, activity: Activity) -> Booking:
        with self._state.lock:
            for index, booking in enumerate(self._state.bookings):
                if booking.member_id == member_id and booking.date == booking_date:
                    break
            else:
                raise NotFoundError('Booking not found')

            del self._state.bookings[index]
            self._state.activities.append(activity)
            self._state.changed()
        return booking


class MemoryActivityStore(ActivityStore):
    def __init__(self, state: MemoryState):
        self._state = state

    def list_all(self) -> list[Activity]:
        with self._state.lock:
            return list(self._state.activities)

    def list_by_date(self, activity_date: date) -> list[Activity]:
        with self._state.lock:
            return [activity for activity in self._state.activities if activity.date == activity_date]

    def append(self, activity: Activity) -> Activity:
        with self._state.lock:
            self._state.activities.append(activity)
            self._state.changed()
        return activity


class MemoryCommentStore(CommentStore):
    def __init__(self, state: MemoryState):
        self._state = state

    def list_all(self) -> list[Comment]:
        with self._state.lock:
            return list(self._state.comments)

    def list_by_date(self, comment_date: date) -> list[Comment]:
        with self._state.lock:
            return [comment for comment in self._state.comments if comment.date == comment_date]

    def append(self, comment: Comment) -> Comment:
        with self._state.lock:
            self._state.comments.append(comment)
            self._state.changed()
        return comment


def build_memory_storage(state: MemoryState | None = None) -> Storage:
    state = state or MemoryState()
    return Storage(
        members=MemoryMemberStore(state),
        bookings=MemoryBookingStore(state),
        activities=MemoryActivityStore(state),
        comments=MemoryCommentStore(state),
    )
