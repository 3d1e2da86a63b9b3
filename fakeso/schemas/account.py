"""Account Pydantic schemas — registration, login, settings, profile output."""

from datetime import datetime
from typing import List

from pydantic import EmailStr

from fakeso.models.account import TextSizeEnum, ThemeEnum, UserTypeEnum
from fakeso.schemas.answer import AnswerOut
from fakeso.schemas.base import CamelModel
from fakeso.schemas.comment import CommentOut
from fakeso.schemas.draft import DraftAnswerOut, DraftQuestionOut
from fakeso.schemas.question import QuestionOut


class AccountCreate(CamelModel):
    """Fields submitted on the registration form."""
    username: str
    email: EmailStr
    hashed_password: str


class LoginRequest(CamelModel):
    username: str
    hashed_password: str


class AccountSettings(CamelModel):
    theme: ThemeEnum = ThemeEnum.LIGHT
    text_size: TextSizeEnum = TextSizeEnum.MEDIUM
    screen_reader: bool = False


class UserTypeUpdate(CamelModel):
    user_type: UserTypeEnum


class AccountOut(CamelModel):
    """Public account representation returned by the API."""
    id: int
    username: str
    email: str
    user_type: UserTypeEnum
    score: int = 0
    date_created: datetime
    settings: AccountSettings


class ProfilePagePayload(CamelModel):
    username: str
    score: int = 0
    user_type: UserTypeEnum
    questions: List[QuestionOut] = []
    answers: List[AnswerOut] = []
    comments: List[CommentOut] = []
    up_voted_questions: List[int] = []
    down_voted_questions: List[int] = []
    question_drafts: List[DraftQuestionOut] = []
    answer_drafts: List[DraftAnswerOut] = []
