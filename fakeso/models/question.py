"""
Question model plus the rows that hang off a question.

A question never embeds its children. Tags, answers and comments are kept as
reference rows (``question_tags``, ``question_answers``, ``question_comments``)
and views/votes as one row per username.
"""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fakeso.database import Base


class VoteDirection(str, enum.Enum):
    UP = "up"
    DOWN = "down"


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    asked_by: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    ask_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    locked: Mapped[bool] = mapped_column(Boolean, default=False)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False)
    draft: Mapped[bool] = mapped_column(Boolean, default=False)
    preset_tags: Mapped[List[str]] = mapped_column(JSON, default=list)


class QuestionTag(Base):
    __tablename__ = "question_tags"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[int] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )


class QuestionView(Base):
    __tablename__ = "question_views"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    username: Mapped[str] = mapped_column(String(100), primary_key=True)


class QuestionVote(Base):
    """
    One row per (question, username).

    ``direction`` is NULL once a vote has been cancelled, so a user can only
    ever be in one of the up/down sets.
    """

    __tablename__ = "question_votes"

    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    username: Mapped[str] = mapped_column(String(100), primary_key=True, index=True)
    direction: Mapped[Optional[VoteDirection]] = mapped_column(Enum(VoteDirection))


class QuestionAnswer(Base):
    """Entry in a question's ordered answers list."""

    __tablename__ = "question_answers"

    id: Mapped[int] = mapped_column(primary_key=True)
    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), index=True, nullable=False
    )
    answer_id: Mapped[int] = mapped_column(
        ForeignKey("answers.id", ondelete="CASCADE"), unique=True, nullable=False
    )


class QuestionComment(Base):
    """Entry in a question's comments list."""

    __tablename__ = "question_comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    question_id: Mapped[int] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), index=True, nullable=False
    )
    comment_id: Mapped[int] = mapped_column(
        ForeignKey("comments.id", ondelete="CASCADE"), unique=True, nullable=False
    )
