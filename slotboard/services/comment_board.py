import logging
from collections.abc import Callable
from datetime import date, datetime
from uuid import uuid4

from slotboard.core import config
from slotboard.core.errors import ValidationError
from slotboard.schemas import Comment
from slotboard.services.activity_log import newest_first
from slotboard.services.ledger import require_text, utc_now
from slotboard.storage.base import Storage

logger = logging.getLogger(__name__)


class CommentBoard:
    def __init__(
        self,
        storage: Storage,
        max_length: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._storage = storage
        self.max_length = config.MAX_COMMENT_LENGTH if max_length is None else max_length
        self._clock = clock

    def add_comment(self, member_id: str, member_name: str, comment_date: date, text: str) -> Comment:
        member_id = require_text(member_id, 'Member id')
        member_name = require_text(member_name, 'Member name')
        text = require_text(text, 'Comment')
        if len(text) > self.max_length:
            raise ValidationError(f'Comment must be {self.max_length} characters or fewer.')

        comment = Comment(
            id=str(uuid4()),
            member_id=member_id,
            member_name=member_name,
            date=comment_date,
            comment=text,
            created_at=self._clock(),
        )
        self._storage.comments.append(comment)
        logger.info('%s commented on %s', member_name, comment_date.isoformat())
        return comment

    def list_all(self) -> list[Comment]:
        return newest_first(self._storage.comments.list_all())

    def list_by_date(self, comment_date: date) -> list[Comment]:
        return newest_first(self._storage.comments.list_by_date(comment_date))
