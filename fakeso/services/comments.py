"""Comments hang off exactly one question or answer."""

import logging
from typing import Optional, Union

from sqlalchemy import literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.models.answer import Answer, AnswerComment
from fakeso.models.comment import Comment
from fakeso.models.question import Question, QuestionComment
from fakeso.schemas.answer import AnswerOut
from fakeso.schemas.comment import CommentIn, CommentOut
from fakeso.schemas.question import CommentUpdatePayload, QuestionOut
from fakeso.services.events import Event, EventPublisher
from fakeso.services.hydrate import hydrate_answer, hydrate_question
from fakeso.services.results import (
    Result,
    ServiceError,
    conflict,
    not_found,
    validation,
    wraps_storage_errors,
)

logger = logging.getLogger(__name__)

LOCKED_POST = "Cannot comment on a locked post"

# parent type → (parent model, link model, link column pointing at the parent)
PARENTS = {
    "question": (Question, QuestionComment, QuestionComment.question_id),
    "answer": (Answer, AnswerComment, AnswerComment.answer_id),
}


def validate_comment(comment: CommentIn) -> Optional[ServiceError]:
    if not comment.text or not comment.comment_by or comment.comment_date_time is None:
        return validation("Invalid comment")
    return None


async def hydrate_parent(
    db: AsyncSession, parent_type: str, parent_id: int
) -> Optional[Union[QuestionOut, AnswerOut]]:
    if parent_type == "question":
        return await hydrate_question(db, parent_id)
    return await hydrate_answer(db, parent_id)


async def parent_of_comment(db: AsyncSession, comment_id: int):
    """``(parent_type, parent_id)`` of the list holding ``comment_id``, if any."""
    for parent_type, (_, link, column) in PARENTS.items():
        parent_id = await db.scalar(select(column).where(link.comment_id == comment_id))
        if parent_id is not None:
            return parent_type, parent_id
    return None


@wraps_storage_errors("Error when adding comment")
async def add_comment(
    db: AsyncSession,
    publisher: EventPublisher,
    parent_id: int,
    parent_type: str,
    comment: CommentIn,
) -> Result[CommentOut]:
    """Append a comment to a question's or answer's comments list."""
    if parent_type not in PARENTS:
        return validation("Invalid request")
    error = validate_comment(comment)
    if error:
        return error

    model, link, column = PARENTS[parent_type]
    parent = await db.get(model, parent_id)
    if parent is None:
        return not_found(f"{parent_type.capitalize()} {parent_id} not found")
    if parent.locked:
        return conflict(LOCKED_POST)

    row = Comment(
        text=comment.text,
        comment_by=comment.comment_by,
        comment_date_time=comment.comment_date_time,
        pinned=False,
    )
    db.add(row)
    await db.flush()

    # Lock test and link insert in one statement
    guarded = select(literal(parent_id), literal(row.id)).select_from(model).where(
        model.id == parent_id, model.locked.is_(False)
    )
    result = await db.execute(
        link.__table__.insert().from_select([column.key, "comment_id"], guarded)
    )
    if result.rowcount != 1:
        await db.rollback()
        return conflict(LOCKED_POST)
    await db.commit()
    logger.info(f"Comment {row.id} added to {parent_type} {parent_id} by {row.comment_by}")

    hydrated = await hydrate_parent(db, parent_type, parent_id)
    await publisher.publish(
        Event.COMMENT_UPDATE, CommentUpdatePayload(result=hydrated, type=parent_type)
    )
    return CommentOut.model_validate(row)


@wraps_storage_errors("Error when fetching comment by id")
async def fetch_comment_by_id(db: AsyncSession, comment_id: int) -> Result[CommentOut]:
    row = await db.get(Comment, comment_id)
    if row is None:
        return not_found(f"Comment {comment_id} not found")
    return CommentOut.model_validate(row)


@wraps_storage_errors("Error when updating comment")
async def update_comment_text(
    db: AsyncSession,
    publisher: EventPublisher,
    comment: CommentIn,
) -> Result[CommentOut]:
    if comment.id is None or not comment.text:
        return validation("Invalid comment")

    result = await db.execute(
        update(Comment).where(Comment.id == comment.id).values(text=comment.text)
    )
    if result.rowcount == 0:
        return not_found(f"Could not find the comment {comment.id} to update")
    await db.commit()

    parent = await parent_of_comment(db, comment.id)
    if parent is not None:
        parent_type, parent_id = parent
        hydrated = await hydrate_parent(db, parent_type, parent_id)
        await publisher.publish(
            Event.COMMENT_UPDATE, CommentUpdatePayload(result=hydrated, type=parent_type)
        )
    return CommentOut.model_validate(await db.get(Comment, comment.id))
