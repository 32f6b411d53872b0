"""Relational storage through SQLAlchemy.

Booking writes run the duplicate and capacity checks, the booking insert
and the activity insert inside one transaction. The ``UNIQUE(member_id,
date)`` constraint keeps the one-booking-per-member rule even when several
processes share the database; the capacity count is serialised per process.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone
from threading import Lock

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from slotboard import schemas
from slotboard.core.errors import CapacityExceededError, DuplicateBookingError, NotFoundError, UnavailableError
from slotboard.database import Base, build_engine, build_session_factory, ensure_ledger_schema
from slotboard.models import activity as activity_model
from slotboard.models import booking as booking_model
from slotboard.models import comment as comment_model
from slotboard.models import member as member_model
from slotboard.services.device_info import UNKNOWN_DEVICE
from slotboard.storage.base import ActivityStore, BookingStore, CommentStore, MemberStore, Storage
from slotboard.storage.memory import capacity_message, duplicate_booking_message

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = 'Database unavailable. Verify DATABASE_URL and database credentials.'


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_member(row: member_model.Member) -> schemas.Member:
    return schemas.Member(
        id=row.id,
        name=row.name,
        initials=row.initials,
        avatar_color=row.avatar_color,
    )


def _to_booking(row: booking_model.Booking) -> schemas.Booking:
    return schemas.Booking(
        id=row.id,
        member_id=row.member_id,
        member_name=row.member_name or '',
        date=row.date,
        created_at=_as_utc(row.created_at),
    )


def _to_activity(row: activity_model.Activity) -> schemas.Activity:
    return schemas.Activity(
        id=row.id,
        member_id=row.member_id or '',
        member_name=row.member_name,
        action=row.action,
        date=row.date,
        device_info=row.device_info or UNKNOWN_DEVICE,
        created_at=_as_utc(row.created_at),
    )


def _to_comment(row: comment_model.Comment) -> schemas.Comment:
    return schemas.Comment(
        id=row.id,
        member_id=row.member_id,
        member_name=row.member_name,
        date=row.date,
        comment=row.comment,
        created_at=_as_utc(row.created_at),
    )


def _activity_row(activity: schemas.Activity) -> activity_model.Activity:
    return activity_model.Activity(
        id=activity.id,
        member_id=activity.member_id,
        member_name=activity.member_name,
        action=activity.action,
        date=activity.date,
        device_info=activity.device_info,
        created_at=activity.created_at,
    )


class SqlState:
    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None):
        self.engine = engine
        self.session_factory = session_factory or build_session_factory(engine)
        self.write_lock = Lock()

    @contextmanager
    def session(self):
        db: Session = self.session_factory()
        try:
            yield db
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception('Database operation failed')
            raise UnavailableError(UNAVAILABLE_MESSAGE) from exc
        finally:
            db.close()


class SqlMemberStore(MemberStore):
    def __init__(self, state: SqlState):
        self._state = state

    def list_all(self) -> list[schemas.Member]:
        with self._state.session() as db:
            rows = db.query(member_model.Member).order_by(member_model.Member.created_at.asc()).all()
            return [_to_member(row) for row in rows]

    def get(self, member_id: str) -> schemas.Member | None:
        with self._state.session() as db:
            row = db.query(member_model.Member).filter(member_model.Member.id == member_id).first()
            return _to_member(row) if row else None

    def add(self, member: schemas.Member) -> schemas.Member:
        with self._state.session() as db:
            db.add(member_model.Member(
                id=member.id,
                name=member.name,
                initials=member.initials,
                avatar_color=member.avatar_color,
                created_at=datetime.now(timezone.utc),
            ))
            db.commit()
        return member


class SqlBookingStore(BookingStore):
    def __init__(self, state: SqlState):
        self._state = state

    def _list(self, *criteria) -> list[schemas.Booking]:
        with self._state.session() as db:
            rows = db.query(booking_model.Booking).filter(*criteria).order_by(
                booking_model.Booking.created_at.asc(),
            ).all()
            return [_to_booking(row) for row in rows]

    def list_all(self) -> list[schemas.Booking]:
        return self._list()

    def list_by_date(self, booking_date: date) -> list[schemas.Booking]:
        return self._list(booking_model.Booking.date == booking_date)

    def list_by_member(self, member_id: str) -> list[schemas.Booking]:
        return self._list(booking_model.Booking.member_id == member_id)

    def insert(self, booking: schemas.Booking, activity: schemas.Activity, capacity: int) -> schemas.Booking:
        with self._state.write_lock, self._state.session() as db:
            same_day = db.query(booking_model.Booking.member_id).filter(
                booking_model.Booking.date == booking.date,
            ).all()

            if any(member_id == booking.member_id for (member_id,) in same_day):
                raise DuplicateBookingError(duplicate_booking_message())
            if len(same_day) >= capacity:
                raise CapacityExceededError(capacity_message(capacity))

            db.add(booking_model.Booking(
                id=booking.id,
                member_id=booking.member_id,
                member_name=booking.member_name,
                date=booking.date,
                created_at=booking.created_at,
            ))
            db.add(_activity_row(activity))

            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise DuplicateBookingError(duplicate_booking_message()) from exc

        return booking

    def delete(self, member_id: str, booking_date: date, activity: schemas.Activity) -> schemas.Booking:
        with self._state.write_lock, self._state.session() as db:
            row = db.query(booking_model.Booking).filter(
                booking_model.Booking.member_id == member_id,
                booking_model.Booking.date == booking_date,
            ).first()

            if row is None:
                raise NotFoundError('Booking not found')

            deleted = _to_booking(row)
            db.delete(row)
            db.add(_activity_row(activity))
            db.commit()

        return deleted


class SqlActivityStore(ActivityStore):
    def __init__(self, state: SqlState):
        self._state = state

    def _list(self, *criteria) -> list[schemas.Activity]:
        with self._state.session() as db:
            rows = db.query(activity_model.Activity).filter(*criteria).order_by(
                activity_model.Activity.created_at.asc(),
            ).all()
            return [_to_activity(row) for row in rows]

    def list_all(self) -> list[schemas.Activity]:
        return self._list()

    def list_by_date(self, activity_date: date) -> list[schemas.Activity]:
        return self._list(activity_model.Activity.date == activity_date)

    def append(self, activity: schemas.Activity) -> schemas.Activity:
        with self._state.session() as db:
            db.add(_activity_row(activity))
            db.commit()
        return activity


class SqlCommentStore(CommentStore):
    def __init__(self, state: SqlState):
        self._state = state

    def _list(self, *criteria) -> list[schemas.Comment]:
        with self._state.session() as db:
            rows = db.query(comment_model.Comment).filter(*criteria).order_by(
                comment_model.Comment.created_at.asc(),
            ).all()
            return [_to_comment(row) for row in rows]

    def list_all(self) -> list[schemas.Comment]:
        return self._list()

    def list_by_date(self, comment_date: date) -> list[schemas.Comment]:
        return self._list(comment_model.Comment.date == comment_date)

    def append(self, comment: schemas.Comment) -> schemas.Comment:
        with self._state.session() as db:
            db.add(comment_model.Comment(
                id=comment.id,
                member_id=comment.member_id,
                member_name=comment.member_name,
                date=comment.date,
                comment=comment.comment,
                created_at=comment.created_at,
            ))
            db.commit()
        return comment


class SqlStorage(Storage):
    def __init__(self, state: SqlState):
        super().__init__(
            members=SqlMemberStore(state),
            bookings=SqlBookingStore(state),
            activities=SqlActivityStore(state),
            comments=SqlCommentStore(state),
        )
        self.state = state

    def initialize(self) -> None:
        Base.metadata.create_all(
            bind=self.state.engine,
            tables=[
                member_model.Member.__table__,
                booking_model.Booking.__table__,
                activity_model.Activity.__table__,
                comment_model.Comment.__table__,
            ],
        )
        ensure_ledger_schema(self.state.engine)


def build_sql_storage(database_url: str | None = None, engine: Engine | None = None) -> SqlStorage:
    if engine is None:
        engine = build_engine(database_url)
    return SqlStorage(SqlState(engine))
