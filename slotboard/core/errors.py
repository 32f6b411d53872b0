"""Errors raised by the booking ledger, logs and storage backends.

Routers translate these into HTTP responses; nothing here is fatal to the
process.
"""


class LedgerError(Exception):
    """Base class for every recoverable slotboard error."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    """Malformed input such as a bad date string or a blank member id."""


class InvalidDateError(ValidationError):
    """The requested date cannot hold a slot (Saturday or Sunday)."""


class ConflictError(LedgerError):
    """The write would break a booking invariant."""


class DuplicateBookingError(ConflictError):
    pass


class CapacityExceededError(ConflictError):
    pass


class NotFoundError(LedgerError):
    pass


class UnavailableError(LedgerError):
    """The storage backend could not be reached or failed mid-write."""
