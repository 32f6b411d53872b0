from fastapi import HTTPException, status

from slotboard.core.errors import ConflictError, LedgerError, NotFoundError, UnavailableError, ValidationError
from slotboard.schemas import parse_iso_date

# Conflicts answer 400 like validation failures; clients only show the message.
_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def to_http_exception(exc: LedgerError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)


def parse_path_date(value: str):
    try:
        return parse_iso_date(value)
    except ValidationError as exc:
        raise to_http_exception(exc) from exc
