from fastapi import APIRouter, Depends

from slotboard.core.errors import LedgerError
from slotboard.dependencies import get_activity_log
from slotboard.routes.errors import parse_path_date, to_http_exception
from slotboard.schemas import Activity
from slotboard.services.activity_log import ActivityLog

router = APIRouter(tags=['activities'])


@router.get('/activities', response_model=list[Activity])
def list_activities(activity_log: ActivityLog = Depends(get_activity_log)):
    try:
        return activity_log.list_all()
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get('/activities/{activity_date}', response_model=list[Activity])
def list_activities_for_date(activity_date: str, activity_log: ActivityLog = Depends(get_activity_log)):
    parsed_date = parse_path_date(activity_date)

    try:
        return activity_log.list_by_date(parsed_date)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
