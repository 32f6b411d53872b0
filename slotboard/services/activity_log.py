from datetime import date

from slotboard.schemas import Activity
from slotboard.storage.base import Storage


def newest_first(records: list) -> list:
    """Order by ``created_at`` descending; equal timestamps show the later write first."""
    return sorted(reversed(records), key=lambda record: record.created_at, reverse=True)


class ActivityLog:
    """Read side of the booking audit trail. Entries are written by the ledger."""

    def __init__(self, storage: Storage):
        self._storage = storage

    def list_all(self) -> list[Activity]:
        return newest_first(self._storage.activities.list_all())

    def list_by_date(self, activity_date: date) -> list[Activity]:
        return newest_first(self._storage.activities.list_by_date(activity_date))
