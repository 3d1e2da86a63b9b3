"""Draft Pydantic schemas."""

from typing import Optional

from fakeso.schemas.answer import AnswerIn, AnswerOut
from fakeso.schemas.base import CamelModel
from fakeso.schemas.question import QuestionIn, QuestionOut


class SaveQuestionDraftRequest(CamelModel):
    draft: QuestionIn
    username: str
    draft_id: Optional[int] = None
    real_id: Optional[int] = None


class PostQuestionDraftRequest(CamelModel):
    draft_question: QuestionIn
    username: str
    draft_id: Optional[int] = None
    real_id: Optional[int] = None


class SaveAnswerDraftRequest(CamelModel):
    draft: AnswerIn
    qid: int
    username: str
    draft_id: Optional[int] = None
    real_id: Optional[int] = None


class PostAnswerDraftRequest(CamelModel):
    draft_answer: AnswerIn
    qid: int
    username: str
    draft_id: Optional[int] = None
    real_id: Optional[int] = None


class DraftQuestionOut(CamelModel):
    id: int
    username: str
    real_id: Optional[int] = None
    edit_id: QuestionOut


class DraftAnswerOut(CamelModel):
    id: int
    username: str
    real_id: Optional[int] = None
    qid: int
    edit_id: AnswerOut
