"""Question Pydantic schemas — request bodies and the hydrated read model."""

from datetime import datetime
from typing import List, Literal, Optional, Union

from fakeso.schemas.answer import AnswerOut
from fakeso.schemas.base import CamelModel
from fakeso.schemas.comment import CommentOut
from fakeso.schemas.tag import TagIn, TagOut

class QuestionIn(CamelModel):
    """Fields submitted when asking or editing a question."""
    id: Optional[int] = None
    title: str = ""
    text: str = ""
    tags: List[TagIn] = []
    asked_by: str = ""
    ask_date_time: Optional[datetime] = None
    preset_tags: List[str] = []


class QuestionOut(CamelModel):
    """Hydrated question: tags, answers and comments are embedded objects."""
    id: int
    title: str
    text: str
    tags: List[TagOut] = []
    answers: List[AnswerOut] = []
    asked_by: str
    ask_date_time: datetime
    views: List[str] = []
    up_votes: List[str] = []
    down_votes: List[str] = []
    comments: List[CommentOut] = []
    locked: bool = False
    pinned: bool = False
    preset_tags: List[str] = []


class VoteRequest(CamelModel):
    qid: int
    username: str


class VoteResult(CamelModel):
    msg: str
    up_votes: List[str]
    down_votes: List[str]


class VoteUpdatePayload(CamelModel):
    qid: int
    up_votes: List[str]
    down_votes: List[str]


class QuestionUpdatePayload(CamelModel):
    quest: QuestionOut
    removed: bool = False


class CommentUpdatePayload(CamelModel):
    result: Union[QuestionOut, AnswerOut]
    type: Literal["question", "answer"]
