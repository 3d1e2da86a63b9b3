"""
Draft workflow for questions and answers.

A draft record points at its author, at a draft-flagged Question/Answer row
holding the in-progress content (``edit_id``) and, when editing something
already published, at that entity (``real_id``). Saving reuses the same record
until the draft is posted; posting publishes or applies the content and
deletes both the record and its content row.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.models.answer import Answer
from fakeso.models.draft import DraftAnswer, DraftQuestion
from fakeso.models.question import Question
from fakeso.schemas.answer import AnswerIn, AnswerOut, AnswerUpdatePayload
from fakeso.schemas.draft import DraftAnswerOut, DraftQuestionOut
from fakeso.schemas.question import QuestionIn, QuestionOut, QuestionUpdatePayload
from fakeso.services.answers import (
    create_answer,
    question_of_answer,
    validate_answer,
)
from fakeso.services.events import Event, EventPublisher
from fakeso.services.hydrate import hydrate_answer, hydrate_question, load_answers
from fakeso.services.questions import create_question, validate_question, write_question_content
from fakeso.services.results import (
    Result,
    ServiceError,
    not_found,
    validation,
    wraps_storage_errors,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ═══════════════════════════════════════════════════════════════
#  Question drafts
# ═══════════════════════════════════════════════════════════════

async def _question_draft_out(db: AsyncSession, draft: DraftQuestion) -> Optional[DraftQuestionOut]:
    edit = await hydrate_question(db, draft.edit_id)
    if edit is None:
        return None
    return DraftQuestionOut(id=draft.id, username=draft.username, real_id=draft.real_id, edit_id=edit)


async def _find_question_draft(
    db: AsyncSession, username: str, draft_id: Optional[int], real_id: Optional[int]
) -> Result[Optional[DraftQuestion]]:
    """The record a save/post should reuse, or None for a fresh draft."""
    if draft_id is not None:
        draft = await db.get(DraftQuestion, draft_id)
        if draft is None or draft.username != username:
            return not_found("did not find the draft id")
        return draft
    if real_id is not None:
        result = await db.execute(
            select(DraftQuestion).where(
                DraftQuestion.username == username, DraftQuestion.real_id == real_id
            )
        )
        return result.scalars().first()
    return None


@wraps_storage_errors("Error when saving question draft")
async def save_question_draft(
    db: AsyncSession,
    username: str,
    content: QuestionIn,
    draft_id: Optional[int] = None,
    real_id: Optional[int] = None,
) -> Result[DraftQuestionOut]:
    """Persist in-progress question content without publishing it."""
    if not username:
        return validation("Invalid question save request")

    real_id = real_id if real_id is not None else content.id
    if real_id is not None:
        real = await db.get(Question, real_id)
        if real is None or real.draft:
            return not_found(f"Question {real_id} not found")

    draft = await _find_question_draft(db, username, draft_id, real_id)
    if isinstance(draft, ServiceError):
        return draft

    if draft is None:
        edit = await create_question(
            db,
            content.model_copy(
                update={"asked_by": content.asked_by or username,
                        "ask_date_time": content.ask_date_time or _now()}
            ),
            draft=True,
        )
        draft = DraftQuestion(username=username, real_id=real_id, edit_id=edit.id)
        db.add(draft)
    else:
        edit = await db.get(Question, draft.edit_id)
        await write_question_content(db, edit, content)
        draft.updated_at = _now()

    await db.commit()
    return await _question_draft_out(db, draft)


@wraps_storage_errors("Error when posting question draft")
async def post_question_draft(
    db: AsyncSession,
    publisher: EventPublisher,
    username: str,
    content: QuestionIn,
    draft_id: Optional[int] = None,
    real_id: Optional[int] = None,
) -> Result[QuestionOut]:
    """
    Publish a question draft: a new question when the draft has no real
    target, otherwise an update of that question. The draft is then deleted.
    """
    content = content.model_copy(
        update={"asked_by": content.asked_by or username,
                "ask_date_time": content.ask_date_time or _now()}
    )
    error = validate_question(content)
    if error:
        return error

    draft = await _find_question_draft(db, username, draft_id, real_id)
    if isinstance(draft, ServiceError):
        return draft
    if draft is not None and draft.real_id is not None:
        real_id = draft.real_id

    if real_id is not None:
        row = await db.get(Question, real_id)
        if row is None or row.draft:
            return not_found(f"Question {real_id} not found")
        await write_question_content(db, row, content)
    else:
        row = await create_question(db, content)

    if draft is not None:
        edit_id = draft.edit_id
        await db.delete(draft)
        await db.flush()
        await db.execute(delete(Question).where(Question.id == edit_id))
    await db.commit()
    logger.info(f"Question draft posted as question {row.id} by {username}")

    hydrated = await hydrate_question(db, row.id)
    await publisher.publish(Event.QUESTION_UPDATE, QuestionUpdatePayload(quest=hydrated))
    return hydrated


@wraps_storage_errors("Error when fetching question draft")
async def fetch_question_draft(db: AsyncSession, draft_id: int) -> Result[DraftQuestionOut]:
    draft = await db.get(DraftQuestion, draft_id)
    if draft is None:
        return not_found("did not find the draft id")
    payload = await _question_draft_out(db, draft)
    if payload is None:
        return not_found("did not find the drafts question")
    return payload


async def list_question_drafts(db: AsyncSession, username: str) -> List[DraftQuestionOut]:
    result = await db.execute(
        select(DraftQuestion).where(DraftQuestion.username == username).order_by(DraftQuestion.id)
    )
    drafts = []
    for draft in result.scalars():
        payload = await _question_draft_out(db, draft)
        if payload is not None:
            drafts.append(payload)
    return drafts


# ═══════════════════════════════════════════════════════════════
#  Answer drafts
# ═══════════════════════════════════════════════════════════════

async def _answer_draft_out(db: AsyncSession, draft: DraftAnswer) -> Optional[DraftAnswerOut]:
    edit = await hydrate_answer(db, draft.edit_id)
    if edit is None:
        return None
    return DraftAnswerOut(
        id=draft.id, username=draft.username, real_id=draft.real_id, qid=draft.qid, edit_id=edit
    )


async def _find_answer_draft(
    db: AsyncSession, username: str, draft_id: Optional[int], real_id: Optional[int]
) -> Result[Optional[DraftAnswer]]:
    if draft_id is not None:
        draft = await db.get(DraftAnswer, draft_id)
        if draft is None or draft.username != username:
            return not_found("did not find the draft id")
        return draft
    if real_id is not None:
        result = await db.execute(
            select(DraftAnswer).where(DraftAnswer.username == username, DraftAnswer.real_id == real_id)
        )
        return result.scalars().first()
    return None


@wraps_storage_errors("Error when saving answer draft")
async def save_answer_draft(
    db: AsyncSession,
    username: str,
    qid: int,
    content: AnswerIn,
    draft_id: Optional[int] = None,
    real_id: Optional[int] = None,
) -> Result[DraftAnswerOut]:
    """Persist in-progress answer content for question ``qid``."""
    if not username:
        return validation("Invalid answer save request")

    question = await db.get(Question, qid)
    if question is None or question.draft:
        return not_found(f"Question {qid} not found")

    real_id = real_id if real_id is not None else content.id
    if real_id is not None and await db.get(Answer, real_id) is None:
        return not_found(f"Answer {real_id} not found")

    draft = await _find_answer_draft(db, username, draft_id, real_id)
    if isinstance(draft, ServiceError):
        return draft

    if draft is None:
        edit = Answer(
            text=content.text,
            ans_by=content.ans_by or username,
            ans_date_time=content.ans_date_time or _now(),
            draft=True,
        )
        db.add(edit)
        await db.flush()
        draft = DraftAnswer(username=username, qid=qid, real_id=real_id, edit_id=edit.id)
        db.add(draft)
    else:
        edit = await db.get(Answer, draft.edit_id)
        edit.text = content.text
        draft.updated_at = _now()

    await db.commit()
    return await _answer_draft_out(db, draft)


@wraps_storage_errors("Error when posting answer draft")
async def post_answer_draft(
    db: AsyncSession,
    publisher: EventPublisher,
    username: str,
    qid: int,
    content: AnswerIn,
    draft_id: Optional[int] = None,
    real_id: Optional[int] = None,
) -> Result[AnswerOut]:
    """
    Publish an answer draft: a new answer on ``qid`` (subject to the lock)
    or, with a real target, new text for that answer. The draft is then deleted.
    """
    content = content.model_copy(
        update={"ans_by": content.ans_by or username,
                "ans_date_time": content.ans_date_time or _now()}
    )
    error = validate_answer(content)
    if error:
        return error

    draft = await _find_answer_draft(db, username, draft_id, real_id)
    if isinstance(draft, ServiceError):
        return draft
    if draft is not None and draft.real_id is not None:
        real_id = draft.real_id

    if real_id is not None:
        row = await db.get(Answer, real_id)
        if row is None:
            return not_found(f"Answer {real_id} not found")
        row.text = content.text
        qid = await question_of_answer(db, real_id) or qid
    else:
        row = await create_answer(db, qid, content)
        if isinstance(row, ServiceError):
            return row

    if draft is not None:
        edit_id = draft.edit_id
        await db.delete(draft)
        await db.flush()
        await db.execute(delete(Answer).where(Answer.id == edit_id))
    await db.commit()
    logger.info(f"Answer draft posted as answer {row.id} by {username}")

    hydrated = await hydrate_answer(db, row.id)
    await publisher.publish(Event.ANSWER_UPDATE, AnswerUpdatePayload(qid=qid, answer=hydrated))
    return hydrated


@wraps_storage_errors("Error when fetching answer draft")
async def fetch_answer_draft(db: AsyncSession, draft_id: int) -> Result[DraftAnswerOut]:
    draft = await db.get(DraftAnswer, draft_id)
    if draft is None:
        return not_found("did not find the draft id")
    payload = await _answer_draft_out(db, draft)
    if payload is None:
        return not_found("could not find associated id with the drafts answer")
    return payload


async def list_answer_drafts(db: AsyncSession, username: str) -> List[DraftAnswerOut]:
    result = await db.execute(
        select(DraftAnswer).where(DraftAnswer.username == username).order_by(DraftAnswer.id)
    )
    drafts = list(result.scalars())
    edits = await load_answers(db, [d.edit_id for d in drafts])
    return [
        DraftAnswerOut(id=d.id, username=d.username, real_id=d.real_id, qid=d.qid, edit_id=edits[d.edit_id])
        for d in drafts
        if d.edit_id in edits
    ]
