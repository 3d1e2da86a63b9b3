"""Comment Pydantic schemas."""

from datetime import datetime
from typing import Literal, Optional

from fakeso.schemas.base import CamelModel


class CommentIn(CamelModel):
    """Fields submitted when posting a comment."""
    id: Optional[int] = None
    text: str = ""
    comment_by: str = ""
    comment_date_time: Optional[datetime] = None


class CommentOut(CamelModel):
    id: int
    text: str
    comment_by: str
    comment_date_time: datetime
    pinned: bool = False


class AddCommentRequest(CamelModel):
    id: int
    type: Literal["question", "answer"]
    comment: CommentIn
