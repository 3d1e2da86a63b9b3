"""Answer service — posting, fetching, editing and marking answers correct."""

import logging
from typing import Optional

from sqlalchemy import literal, not_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.models.answer import Answer
from fakeso.models.question import Question, QuestionAnswer
from fakeso.schemas.answer import AnswerIn, AnswerOut, AnswerUpdatePayload
from fakeso.services.events import Event, EventPublisher
from fakeso.services.hydrate import hydrate_answer
from fakeso.services.results import (
    Result,
    ServiceError,
    conflict,
    not_found,
    validation,
    wraps_storage_errors,
)

logger = logging.getLogger(__name__)

LOCKED_QUESTION = "Cannot add answers on locked questions"


def validate_answer(ans: AnswerIn) -> Optional[ServiceError]:
    if not ans.text or not ans.ans_by or ans.ans_date_time is None:
        return validation("Invalid answer")
    return None


async def link_answer(db: AsyncSession, qid: int, answer_id: int) -> bool:
    """
    Put ``answer_id`` at the front of the question's answers list, but only
    while the question is unlocked. The lock test and the insert are one
    statement; returns False when nothing was linked.
    """
    guarded = select(literal(qid), literal(answer_id)).select_from(Question).where(
        Question.id == qid, Question.locked.is_(False), Question.draft.is_(False)
    )
    result = await db.execute(
        QuestionAnswer.__table__.insert().from_select(["question_id", "answer_id"], guarded)
    )
    return result.rowcount == 1


async def create_answer(
    db: AsyncSession, qid: int, ans: AnswerIn
) -> Result[Answer]:
    """Store a new answer and link it to its question, honouring the lock."""
    question = await db.get(Question, qid)
    if question is None or question.draft:
        return not_found(f"Question {qid} not found")
    if question.locked:
        return conflict(LOCKED_QUESTION)

    row = Answer(
        text=ans.text,
        ans_by=ans.ans_by,
        ans_date_time=ans.ans_date_time,
        locked=False,
        pinned=False,
    )
    db.add(row)
    await db.flush()

    if not await link_answer(db, qid, row.id):
        # Locked between the read above and the insert
        await db.rollback()
        return conflict(LOCKED_QUESTION)
    return row


@wraps_storage_errors("Error when adding answer to question")
async def add_answer(
    db: AsyncSession,
    publisher: EventPublisher,
    qid: int,
    ans: AnswerIn,
) -> Result[AnswerOut]:
    error = validate_answer(ans)
    if error:
        return error

    row = await create_answer(db, qid, ans)
    if isinstance(row, ServiceError):
        return row
    await db.commit()
    logger.info(f"Answer {row.id} added to question {qid} by {row.ans_by}")

    hydrated = await hydrate_answer(db, row.id)
    await publisher.publish(
        Event.ANSWER_UPDATE, AnswerUpdatePayload(qid=qid, answer=hydrated, removed=False)
    )
    return hydrated


@wraps_storage_errors("Error when fetching answer by id")
async def fetch_answer_by_id(db: AsyncSession, answer_id: int) -> Result[AnswerOut]:
    hydrated = await hydrate_answer(db, answer_id)
    if hydrated is None:
        return not_found(f"Answer {answer_id} not found")
    return hydrated


async def question_of_answer(db: AsyncSession, answer_id: int) -> Optional[int]:
    """Id of the question whose answers list holds ``answer_id``."""
    return await db.scalar(
        select(QuestionAnswer.question_id).where(QuestionAnswer.answer_id == answer_id)
    )


@wraps_storage_errors("Error when updating answer")
async def update_answer_text(
    db: AsyncSession,
    publisher: EventPublisher,
    ans: AnswerIn,
) -> Result[AnswerOut]:
    if ans.id is None or not ans.text:
        return validation("Invalid answer")

    result = await db.execute(
        update(Answer).where(Answer.id == ans.id).values(text=ans.text)
    )
    if result.rowcount == 0:
        return not_found(f"Could not find the answer {ans.id} to update")
    await db.commit()

    hydrated = await hydrate_answer(db, ans.id)
    qid = await question_of_answer(db, ans.id)
    if qid is not None:
        await publisher.publish(Event.ANSWER_UPDATE, AnswerUpdatePayload(qid=qid, answer=hydrated))
    return hydrated


@wraps_storage_errors("mark correct action failed")
async def toggle_answer_correct(
    db: AsyncSession,
    publisher: EventPublisher,
    qid: int,
    answer_id: int,
) -> Result[AnswerOut]:
    """Flip ``isCorrect`` in a single update. The answer must belong to ``qid``."""
    if await question_of_answer(db, answer_id) != qid:
        return not_found(f"Answer {answer_id} not found on question {qid}")
    result = await db.execute(
        update(Answer)
        .where(Answer.id == answer_id)
        .values(is_correct=not_(Answer.is_correct))
        .execution_options(synchronize_session="fetch")
    )
    if result.rowcount == 0:
        return not_found(f"Answer {answer_id} not found")
    await db.commit()

    hydrated = await hydrate_answer(db, answer_id)
    await publisher.publish(Event.ANSWER_UPDATE, AnswerUpdatePayload(qid=qid, answer=hydrated))
    return hydrated
