from fastapi import Request

from slotboard.services.activity_log import ActivityLog
from slotboard.services.comment_board import CommentBoard
from slotboard.services.ledger import BookingLedger
from slotboard.storage.base import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_ledger(request: Request) -> BookingLedger:
    return request.app.state.ledger


def get_activity_log(request: Request) -> ActivityLog:
    return request.app.state.activity_log


def get_comment_board(request: Request) -> CommentBoard:
    return request.app.state.comment_board
