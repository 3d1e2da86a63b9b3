"""
Read-side population of stored references.

Questions and answers keep their children as reference rows. Anything handed
to a client (HTTP response or live event) goes through these functions, which
resolve tags, answers and nested comments into embedded schema objects.
Loading is batched per level so a page of questions costs a fixed number of
queries.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.models.answer import Answer, AnswerComment
from fakeso.models.comment import Comment
from fakeso.models.question import (
    Question,
    QuestionAnswer,
    QuestionComment,
    QuestionTag,
    QuestionView,
    QuestionVote,
    VoteDirection,
)
from fakeso.models.tag import Tag
from fakeso.schemas.answer import AnswerOut
from fakeso.schemas.comment import CommentOut
from fakeso.schemas.question import QuestionOut
from fakeso.schemas.tag import TagOut


async def load_comments(db: AsyncSession, ids: Iterable[int]) -> Dict[int, CommentOut]:
    ids = list(ids)
    if not ids:
        return {}
    result = await db.execute(select(Comment).where(Comment.id.in_(ids)))
    return {c.id: CommentOut.model_validate(c) for c in result.scalars()}


async def load_answers(db: AsyncSession, ids: Iterable[int]) -> Dict[int, AnswerOut]:
    """Answers keyed by id, each with its comments embedded in posting order."""
    ids = list(ids)
    if not ids:
        return {}

    result = await db.execute(select(Answer).where(Answer.id.in_(ids)))
    answers = list(result.scalars())

    links = await db.execute(
        select(AnswerComment.answer_id, AnswerComment.comment_id)
        .where(AnswerComment.answer_id.in_(ids))
        .order_by(AnswerComment.id)
    )
    comment_ids = defaultdict(list)
    for answer_id, comment_id in links.all():
        comment_ids[answer_id].append(comment_id)

    comments = await load_comments(db, [c for cs in comment_ids.values() for c in cs])

    hydrated = {}
    for a in answers:
        out = AnswerOut.model_validate(a, from_attributes=True)
        out.comments = [comments[c] for c in comment_ids[a.id] if c in comments]
        hydrated[a.id] = out
    return hydrated


async def hydrate_answer(db: AsyncSession, answer_id: int) -> Optional[AnswerOut]:
    return (await load_answers(db, [answer_id])).get(answer_id)


async def hydrate_questions(db: AsyncSession, questions: Sequence[Question]) -> List[QuestionOut]:
    """Populate a batch of question rows, keeping the input order."""
    if not questions:
        return []
    ids = [q.id for q in questions]

    # ── Tags ──
    tag_rows = await db.execute(
        select(QuestionTag.question_id, Tag)
        .join(Tag, Tag.id == QuestionTag.tag_id)
        .where(QuestionTag.question_id.in_(ids))
        .order_by(Tag.id)
    )
    tags = defaultdict(list)
    for qid, tag in tag_rows.all():
        tags[qid].append(TagOut.model_validate(tag))

    # ── Views & votes ──
    view_rows = await db.execute(
        select(QuestionView.question_id, QuestionView.username)
        .where(QuestionView.question_id.in_(ids))
    )
    views = defaultdict(list)
    for qid, username in view_rows.all():
        views[qid].append(username)

    vote_rows = await db.execute(
        select(QuestionVote.question_id, QuestionVote.username, QuestionVote.direction)
        .where(QuestionVote.question_id.in_(ids), QuestionVote.direction.is_not(None))
    )
    up_votes, down_votes = defaultdict(list), defaultdict(list)
    for qid, username, direction in vote_rows.all():
        target = up_votes if direction == VoteDirection.UP else down_votes
        target[qid].append(username)

    # ── Answers (newest link first) ──
    answer_links = await db.execute(
        select(QuestionAnswer.question_id, QuestionAnswer.answer_id)
        .where(QuestionAnswer.question_id.in_(ids))
        .order_by(QuestionAnswer.id.desc())
    )
    answer_ids = defaultdict(list)
    for qid, aid in answer_links.all():
        answer_ids[qid].append(aid)
    answers = await load_answers(db, [a for aids in answer_ids.values() for a in aids])

    # ── Comments ──
    comment_links = await db.execute(
        select(QuestionComment.question_id, QuestionComment.comment_id)
        .where(QuestionComment.question_id.in_(ids))
        .order_by(QuestionComment.id)
    )
    comment_ids = defaultdict(list)
    for qid, cid in comment_links.all():
        comment_ids[qid].append(cid)
    comments = await load_comments(db, [c for cs in comment_ids.values() for c in cs])

    hydrated = []
    for q in questions:
        hydrated.append(
            QuestionOut(
                id=q.id,
                title=q.title,
                text=q.text,
                tags=tags[q.id],
                answers=[answers[a] for a in answer_ids[q.id] if a in answers],
                asked_by=q.asked_by,
                ask_date_time=q.ask_date_time,
                views=views[q.id],
                up_votes=up_votes[q.id],
                down_votes=down_votes[q.id],
                comments=[comments[c] for c in comment_ids[q.id] if c in comments],
                locked=q.locked,
                pinned=q.pinned,
                preset_tags=q.preset_tags or [],
            )
        )
    return hydrated


async def hydrate_question(db: AsyncSession, question_id: int) -> Optional[QuestionOut]:
    question = await db.get(Question, question_id)
    if question is None:
        return None
    return (await hydrate_questions(db, [question]))[0]
