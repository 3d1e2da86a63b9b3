"""Question service — listing, fetching, asking, editing and voting."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import dialect_insert
from fakeso.models.question import Question, QuestionView, QuestionVote, VoteDirection
from fakeso.schemas.question import (
    QuestionIn,
    QuestionOut,
    QuestionUpdatePayload,
    VoteResult,
    VoteUpdatePayload,
)
from fakeso.services.events import Event, EventPublisher
from fakeso.services.hydrate import hydrate_question, hydrate_questions
from fakeso.services.ordering import filter_by_asked_by, filter_by_search, order_questions
from fakeso.services.results import (
    Result,
    ServiceError,
    not_found,
    validation,
    wraps_storage_errors,
)
from fakeso.services.tags import set_question_tags

logger = logging.getLogger(__name__)

VOTE_MESSAGES = {
    (VoteDirection.UP, True): "Question upvoted successfully",
    (VoteDirection.UP, False): "Upvote cancelled successfully",
    (VoteDirection.DOWN, True): "Question downvoted successfully",
    (VoteDirection.DOWN, False): "Downvote cancelled successfully",
}


def validate_question(question: QuestionIn) -> Optional[ServiceError]:
    if not question.title or not question.text:
        return validation("Invalid question body")
    if not question.tags or not question.asked_by or question.ask_date_time is None:
        return validation("Invalid question body")
    return None


async def write_question_content(db: AsyncSession, row: Question, question: QuestionIn) -> None:
    """Copy editable fields onto a stored question and replace its tags."""
    row.title = question.title
    row.text = question.text
    row.preset_tags = list(question.preset_tags)
    await db.flush()
    await set_question_tags(db, row.id, question.tags)


async def create_question(db: AsyncSession, question: QuestionIn, draft: bool = False) -> Question:
    row = Question(
        title=question.title,
        text=question.text,
        asked_by=question.asked_by,
        ask_date_time=question.ask_date_time,
        preset_tags=list(question.preset_tags),
        draft=draft,
    )
    db.add(row)
    await db.flush()
    await set_question_tags(db, row.id, question.tags)
    return row


# ═══════════════════════════════════════════════════════════════
#  Reads
# ═══════════════════════════════════════════════════════════════

@wraps_storage_errors("Error when fetching questions")
async def get_questions(
    db: AsyncSession,
    order: str = "newest",
    search: Optional[str] = None,
    asked_by: Optional[str] = None,
) -> Result[List[QuestionOut]]:
    """Published questions in the requested order, then filtered."""
    result = await db.execute(select(Question).where(Question.draft.is_(False)))
    questions = await hydrate_questions(db, list(result.scalars()))
    questions = order_questions(questions, order)
    questions = filter_by_asked_by(questions, asked_by)
    return filter_by_search(questions, search)


@wraps_storage_errors("Error when fetching and updating a question")
async def fetch_and_add_view(
    db: AsyncSession,
    publisher: EventPublisher,
    qid: int,
    username: str,
) -> Result[QuestionOut]:
    """Record ``username`` as a viewer and return the populated question."""
    if not username:
        return validation("Invalid username requesting question.")

    question = await db.get(Question, qid)
    if question is None or question.draft:
        return not_found(f"Question {qid} not found")

    await db.execute(
        dialect_insert(db, QuestionView)
        .values(question_id=qid, username=username)
        .on_conflict_do_nothing(index_elements=["question_id", "username"])
    )
    await db.commit()

    hydrated = await hydrate_question(db, qid)
    await publisher.publish(Event.VIEWS_UPDATE, hydrated)
    return hydrated


# ═══════════════════════════════════════════════════════════════
#  Writes
# ═══════════════════════════════════════════════════════════════

@wraps_storage_errors("Error when saving a question")
async def save_question(
    db: AsyncSession,
    publisher: EventPublisher,
    question: QuestionIn,
) -> Result[QuestionOut]:
    error = validate_question(question)
    if error:
        return error

    row = await create_question(db, question)
    await db.commit()
    logger.info(f"Question {row.id} asked by {row.asked_by}")

    hydrated = await hydrate_question(db, row.id)
    await publisher.publish(Event.QUESTION_UPDATE, QuestionUpdatePayload(quest=hydrated))
    return hydrated


@wraps_storage_errors("Error when updating a question")
async def update_question(
    db: AsyncSession,
    publisher: EventPublisher,
    question: QuestionIn,
) -> Result[QuestionOut]:
    """Overwrite title, text, tags and preset tags of a published question."""
    if question.id is None or not question.title or not question.text:
        return validation("Invalid question body")

    row = await db.get(Question, question.id)
    if row is None or row.draft:
        return not_found(f"Could not find the question {question.id} to update")

    await write_question_content(db, row, question)
    await db.commit()

    hydrated = await hydrate_question(db, row.id)
    await publisher.publish(Event.QUESTION_UPDATE, QuestionUpdatePayload(quest=hydrated))
    return hydrated


# ═══════════════════════════════════════════════════════════════
#  Voting
# ═══════════════════════════════════════════════════════════════

async def get_votes(db: AsyncSession, qid: int) -> Tuple[List[str], List[str]]:
    result = await db.execute(
        select(QuestionVote.username, QuestionVote.direction).where(
            QuestionVote.question_id == qid, QuestionVote.direction.is_not(None)
        )
    )
    up, down = [], []
    for username, direction in result.all():
        (up if direction == VoteDirection.UP else down).append(username)
    return up, down


@wraps_storage_errors("Error when voting on question")
async def add_vote_to_question(
    db: AsyncSession,
    publisher: EventPublisher,
    qid: int,
    username: str,
    direction: VoteDirection,
) -> Result[VoteResult]:
    """
    Toggle ``username``'s vote on a question.

    The whole transition is one upsert on the (question, username) row:
    no row → insert ``direction``; same direction → NULL (cancelled);
    other direction or NULL → ``direction``. Concurrent voters never touch
    each other's rows and a user can never hold both an up and a down vote.
    """
    if not username:
        return validation("Invalid request")

    exists = await db.scalar(
        select(Question.id).where(Question.id == qid, Question.draft.is_(False))
    )
    if exists is None:
        return not_found("Question not found!")

    stmt = dialect_insert(db, QuestionVote).values(
        question_id=qid, username=username, direction=direction
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["question_id", "username"],
        set_={
            "direction": case(
                (QuestionVote.direction == stmt.excluded.direction, None),
                else_=stmt.excluded.direction,
            )
        },
    )
    await db.execute(stmt)
    await db.commit()

    up_votes, down_votes = await get_votes(db, qid)
    voted = username in (up_votes if direction == VoteDirection.UP else down_votes)

    await publisher.publish(
        Event.VOTE_UPDATE,
        VoteUpdatePayload(qid=qid, up_votes=up_votes, down_votes=down_votes),
    )
    return VoteResult(
        msg=VOTE_MESSAGES[(direction, voted)],
        up_votes=up_votes,
        down_votes=down_votes,
    )
