"""Answer Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from fakeso.schemas.base import CamelModel
from fakeso.schemas.comment import CommentOut


class AnswerIn(CamelModel):
    """Fields submitted when posting or editing an answer."""
    id: Optional[int] = None
    text: str = ""
    ans_by: str = ""
    ans_date_time: Optional[datetime] = None
    is_correct: bool = False


class AnswerOut(CamelModel):
    """Hydrated answer with its comments embedded."""
    id: int
    text: str
    ans_by: str
    ans_date_time: datetime
    comments: List[CommentOut] = []
    locked: bool = False
    pinned: bool = False
    is_correct: bool = False


class AnswerRequest(CamelModel):
    qid: int
    ans: AnswerIn


class AnswerUpdatePayload(CamelModel):
    qid: int
    answer: AnswerOut
    removed: bool = False


class UpdateAnswerRequest(CamelModel):
    ans: AnswerIn
