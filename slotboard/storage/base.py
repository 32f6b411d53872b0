"""Storage interfaces the services depend on.

Every backend provides the same four stores. Booking writes take the
matching Activity so the pair is committed in one atomic step together with
the duplicate and capacity checks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from slotboard.schemas import Activity, Booking, Comment, Member


class MemberStore(ABC):
    @abstractmethod
    def list_all(self) -> list[Member]:
        ...

    @abstractmethod
    def get(self, member_id: str) -> Member | None:
        ...

    @abstractmethod
    def add(self, member: Member) -> Member:
        ...


class BookingStore(ABC):
    @abstractmethod
    def list_all(self) -> list[Booking]:
        ...

    @abstractmethod
    def list_by_date(self, booking_date: date) -> list[Booking]:
        ...

    @abstractmethod
    def list_by_member(self, member_id: str) -> list[Booking]:
        ...

    @abstractmethod
    def insert(self, booking: Booking, activity: Activity, capacity: int) -> Booking:
        """Persist ``booking`` and ``activity`` together.

        Raises DuplicateBookingError when the member already holds the date
        and CapacityExceededError when ``capacity`` bookings already exist.
        """

    @abstractmethod
    def delete(self, member_id: str, booking_date: date, activity: Activity) -> Booking:
        """Remove the member's booking for the date and persist ``activity``.

        Raises NotFoundError, writing nothing, when there is no such booking.
        """


class ActivityStore(ABC):
    @abstractmethod
    def list_all(self) -> list[Activity]:
        ...

    @abstractmethod
    def list_by_date(self, activity_date: date) -> list[Activity]:
        ...

    @abstractmethod
    def append(self, activity: Activity) -> Activity:
        ...


class CommentStore(ABC):
    @abstractmethod
    def list_all(self) -> list[Comment]:
        ...

    @abstractmethod
    def list_by_date(self, comment_date: date) -> list[Comment]:
        ...

    @abstractmethod
    def append(self, comment: Comment) -> Comment:
        ...


@dataclass
class Storage:
    members: MemberStore
    bookings: BookingStore
    activities: ActivityStore
    comments: CommentStore

    def initialize(self) -> None:
        """Prepare the backend (tables, files). No-op by default."""
