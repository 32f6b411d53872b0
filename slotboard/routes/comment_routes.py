from datetime import date

from fastapi import APIRouter, Depends, status
from pydantic import field_validator

from slotboard.core.errors import LedgerError
from slotboard.dependencies import get_comment_board
from slotboard.routes.booking_routes import validate_request_date
from slotboard.routes.errors import parse_path_date, to_http_exception
from slotboard.schemas import Comment, Record
from slotboard.services.comment_board import CommentBoard

router = APIRouter(tags=['comments'])


class CreateCommentRequest(Record):
    member_id: str
    member_name: str
    date: date
    comment: str

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, value):
        return validate_request_date(value)


@router.get('/comments', response_model=list[Comment])
def list_comments(board: CommentBoard = Depends(get_comment_board)):
    try:
        return board.list_all()
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.get('/comments/{comment_date}', response_model=list[Comment])
def list_comments_for_date(comment_date: str, board: CommentBoard = Depends(get_comment_board)):
    parsed_date = parse_path_date(comment_date)

    try:
        return board.list_by_date(parsed_date)
    except LedgerError as exc:
        raise to_http_exception(exc) from exc


@router.post('/comments', response_model=Comment, status_code=status.HTTP_201_CREATED)
def create_comment(data: CreateCommentRequest, board: CommentBoard = Depends(get_comment_board)):
    try:
        return board.add_comment(
            member_id=data.member_id,
            member_name=data.member_name,
            comment_date=data.date,
            text=data.comment,
        )
    except LedgerError as exc:
        raise to_http_exception(exc) from exc
