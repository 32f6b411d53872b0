import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from slotboard.core import config
from slotboard.core.errors import UnavailableError
from slotboard.routes import activity_routes, booking_routes, calendar_routes, comment_routes, member_routes
from slotboard.services.activity_log import ActivityLog
from slotboard.services.comment_board import CommentBoard
from slotboard.services.ledger import BookingLedger
from slotboard.services.members import seed_default_members
from slotboard.storage.base import Storage
from slotboard.storage.factory import build_storage

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={'message': str(exc.detail)})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            'field': '.'.join(str(part) for part in error['loc'] if part != 'body'),
            'message': error['msg'],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'message': 'Invalid request data', 'errors': errors},
    )


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'message': 'Internal server error'},
    )


def create_app(storage: Storage | None = None, seed_members: bool | None = None) -> FastAPI:
    logging.basicConfig(level=config.LOG_LEVEL, format=LOG_FORMAT)

    if storage is None:
        config.validate_runtime_config()
        storage = build_storage()
    if seed_members is None:
        seed_members = config.SEED_MEMBERS

    app = FastAPI(title='Slotboard API')

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.state.storage = storage
    app.state.ledger = BookingLedger(storage)
    app.state.activity_log = ActivityLog(storage)
    app.state.comment_board = CommentBoard(storage)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)

    @app.on_event('startup')
    def initialize_storage() -> None:
        try:
            storage.initialize()
            if seed_members:
                seed_default_members(storage.members)
        except (SQLAlchemyError, UnavailableError):
            logger.exception('Storage initialization failed. Check STORAGE_BACKEND, DATABASE_URL and DATA_DIR.')

    @app.get('/')
    def root():
        return {'status': 'Slotboard API Running'}

    app.include_router(member_routes.router, prefix='/api')
    app.include_router(booking_routes.router, prefix='/api')
    app.include_router(activity_routes.router, prefix='/api')
    app.include_router(comment_routes.router, prefix='/api')
    app.include_router(calendar_routes.router, prefix='/api')

    return app
