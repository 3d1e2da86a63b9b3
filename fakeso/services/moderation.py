"""
Moderator actions: pin, lock and remove over questions, answers and comments.

Flag changes are single ``UPDATE`` statements so concurrent moderators never
overwrite each other's reads. Removal deletes the parent's reference row and
then the post itself. Removing a question leaves its answers and comments in
place; only the reference rows pointing at the question go with it.
"""

import logging
from typing import Optional, Tuple, Union

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.models.answer import Answer, AnswerComment
from fakeso.models.comment import Comment
from fakeso.models.question import Question, QuestionAnswer, QuestionComment
from fakeso.schemas.action import ActionRequest
from fakeso.schemas.answer import AnswerOut, AnswerUpdatePayload
from fakeso.schemas.comment import CommentOut
from fakeso.schemas.question import CommentUpdatePayload, QuestionOut, QuestionUpdatePayload
from fakeso.services.accounts import can_perform_actions
from fakeso.services.answers import question_of_answer
from fakeso.services.comments import hydrate_parent, parent_of_comment
from fakeso.services.events import Event, EventPublisher
from fakeso.services.hydrate import hydrate_answer, hydrate_question
from fakeso.services.results import (
    ErrorKind,
    Result,
    ServiceError,
    not_found,
    validation,
    wraps_storage_errors,
)

logger = logging.getLogger(__name__)

ACTION_DONE = "action completed successfully"

POST_TYPES = {
    "question": Question,
    "answer": Answer,
    "comment": Comment,
}

Post = Union[QuestionOut, AnswerOut, CommentOut]


def removal_parent_error(
    post_type: str, parent_id: Optional[int], parent_post_type: Optional[str]
) -> Optional[ServiceError]:
    """Answers and comments can only be removed through their declared parent."""
    if post_type == "answer" and parent_id is None:
        return validation("Removing an answer requires its parent question id")
    if post_type == "comment" and (parent_id is None or parent_post_type not in ("question", "answer")):
        return validation("Removing a comment requires its parent id and parent post type")
    return None


async def hydrate_post(db: AsyncSession, post_type: str, post_id: int) -> Optional[Post]:
    if post_type == "question":
        return await hydrate_question(db, post_id)
    if post_type == "answer":
        return await hydrate_answer(db, post_id)
    row = await db.get(Comment, post_id)
    return CommentOut.model_validate(row) if row is not None else None


# ═══════════════════════════════════════════════════════════════
#  Actions
# ═══════════════════════════════════════════════════════════════

@wraps_storage_errors("pin action failed")
async def pin_post(db: AsyncSession, post_type: str, post_id: int) -> Result[Post]:
    """Set ``pinned`` on a post. Pinning is one-way: there is no unpin."""
    model = POST_TYPES[post_type]
    result = await db.execute(update(model).where(model.id == post_id).values(pinned=True))
    if result.rowcount == 0:
        return not_found(f"{post_type.capitalize()} {post_id} not found")
    await db.commit()
    return await hydrate_post(db, post_type, post_id)


@wraps_storage_errors("lock action failed")
async def lock_post(db: AsyncSession, post_type: str, post_id: int) -> Result[Optional[Post]]:
    """Set ``locked`` on a question or answer. Comments cannot be locked; that is a no-op."""
    if post_type == "comment":
        return None
    model = POST_TYPES[post_type]
    result = await db.execute(update(model).where(model.id == post_id).values(locked=True))
    if result.rowcount == 0:
        return not_found(f"{post_type.capitalize()} {post_id} not found")
    await db.commit()
    return await hydrate_post(db, post_type, post_id)


@wraps_storage_errors("remove action failed")
async def remove_post(
    db: AsyncSession,
    post_type: str,
    post_id: int,
    parent_id: Optional[int] = None,
    parent_post_type: Optional[str] = None,
) -> Result[Post]:
    """
    Hard-delete a post and return its last hydrated state.

    Answers need their question as parent; comments need their question or
    answer. The parent's reference to the post is removed first, and a
    parent that does not list the post is rejected.
    """
    error = removal_parent_error(post_type, parent_id, parent_post_type)
    if error is not None:
        return error
    snapshot = await hydrate_post(db, post_type, post_id)
    if snapshot is None:
        return not_found(f"{post_type.capitalize()} {post_id} not found")

    unlink = None
    if post_type == "answer":
        unlink = delete(QuestionAnswer).where(
            QuestionAnswer.question_id == parent_id, QuestionAnswer.answer_id == post_id
        )
    elif post_type == "comment":
        if parent_post_type == "question":
            link, column = QuestionComment, QuestionComment.question_id
        else:
            link, column = AnswerComment, AnswerComment.answer_id
        unlink = delete(link).where(column == parent_id, link.comment_id == post_id)
    # The parent must actually list the post
    if unlink is not None and (await db.execute(unlink)).rowcount != 1:
        await db.rollback()
        return not_found(f"invalid parentid {parent_id}")

    model = POST_TYPES[post_type]
    await db.execute(delete(model).where(model.id == post_id))
    await db.commit()
    logger.info(f"Removed {post_type} {post_id}")
    return snapshot


# ═══════════════════════════════════════════════════════════════
#  Dispatch
# ═══════════════════════════════════════════════════════════════

async def _resolve_parent(
    db: AsyncSession, req: ActionRequest
) -> Optional[Tuple[str, int]]:
    """The parent whose list holds the answer or comment, as stored."""
    if req.post_type == "answer":
        qid = await question_of_answer(db, req.post_id)
        return ("question", qid) if qid is not None else None
    return await parent_of_comment(db, req.post_id)


async def _publish(
    db: AsyncSession,
    publisher: EventPublisher,
    req: ActionRequest,
    post: Optional[Post],
    parent: Optional[Tuple[str, int]],
) -> None:
    removed = req.action_type == "remove"
    if req.post_type == "question" and post is not None:
        await publisher.publish(Event.QUESTION_UPDATE, QuestionUpdatePayload(quest=post, removed=removed))
    elif req.post_type == "answer" and post is not None and parent is not None:
        await publisher.publish(
            Event.ANSWER_UPDATE, AnswerUpdatePayload(qid=parent[1], answer=post, removed=removed)
        )
    elif req.post_type == "comment" and parent is not None:
        hydrated = await hydrate_parent(db, *parent)
        if hydrated is not None:
            await publisher.publish(
                Event.COMMENT_UPDATE, CommentUpdatePayload(result=hydrated, type=parent[0])
            )


@wraps_storage_errors("Error when taking action")
async def take_action(
    db: AsyncSession,
    publisher: EventPublisher,
    req: ActionRequest,
) -> Result[str]:
    """
    Run a moderator action and push the affected post to live clients.

    Checks run in order: post type, action type, removal parent, then the
    actor's role. None of them touch storage except the role lookup.
    """
    if req.post_type not in POST_TYPES:
        return validation(
            "incorrect information in action request, must correctly specify a post type and action type"
        )
    if req.action_type == "promote":
        return ServiceError(ErrorKind.NOT_IMPLEMENTED, "Promote action is currently unimplemented")
    if req.action_type not in ("pin", "lock", "remove"):
        return ServiceError(
            ErrorKind.NOT_IMPLEMENTED, f"The action {req.action_type} is currently unsupported"
        )
    if req.action_type == "remove":
        error = removal_parent_error(req.post_type, req.parent_id, req.parent_post_type)
        if error is not None:
            return error

    if not await can_perform_actions(db, req.user):
        logger.warning(f"{req.user.username} attempted {req.action_type} without permission")
        return ServiceError(ErrorKind.FORBIDDEN, "You do not have permission to take this action")

    # Resolve before a removal deletes the reference rows
    parent = None
    if req.post_type != "question":
        parent = await _resolve_parent(db, req)

    if req.action_type == "pin":
        post = await pin_post(db, req.post_type, req.post_id)
    elif req.action_type == "lock":
        post = await lock_post(db, req.post_type, req.post_id)
    else:
        post = await remove_post(
            db, req.post_type, req.post_id, req.parent_id, req.parent_post_type
        )
    if isinstance(post, ServiceError):
        return post

    logger.info(f"{req.user.username} applied {req.action_type} to {req.post_type} {req.post_id}")
    await _publish(db, publisher, req, post, parent)
    return ACTION_DONE
