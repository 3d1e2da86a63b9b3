"""Tag inserts deduplicated by name, and per-tag question counts."""

import logging
from typing import List

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import dialect_insert
from fakeso.models.question import Question, QuestionTag
from fakeso.models.tag import Tag
from fakeso.schemas.tag import TagCount, TagIn, TagOut
from fakeso.services.results import Result, not_found, wraps_storage_errors

logger = logging.getLogger(__name__)


async def add_tag(db: AsyncSession, tag: TagIn) -> Tag:
    """Insert the tag unless one with the same name exists; return the stored row."""
    stmt = (
        dialect_insert(db, Tag)
        .values(name=tag.name, description=tag.description)
        .on_conflict_do_nothing(index_elements=["name"])
    )
    await db.execute(stmt)
    return (await db.execute(select(Tag).where(Tag.name == tag.name))).scalar_one()


async def process_tags(db: AsyncSession, tags: List[TagIn]) -> List[Tag]:
    """Deduplicate by name (first occurrence wins) and make sure each tag exists."""
    unique = {}
    for tag in tags:
        unique.setdefault(tag.name, tag)
    return [await add_tag(db, tag) for tag in unique.values()]


async def set_question_tags(db: AsyncSession, question_id: int, tags: List[TagIn]) -> None:
    """Replace a question's tag references."""
    await db.execute(QuestionTag.__table__.delete().where(QuestionTag.question_id == question_id))
    rows = [{"question_id": question_id, "tag_id": tag.id} for tag in await process_tags(db, tags)]
    if rows:
        await db.execute(QuestionTag.__table__.insert(), rows)


@wraps_storage_errors("Error when constructing tag map")
async def get_tag_counts(db: AsyncSession) -> Result[List[TagCount]]:
    """Every tag with the number of published questions using it."""
    result = await db.execute(
        select(Tag.name, func.count(Question.id))
        .outerjoin(QuestionTag, QuestionTag.tag_id == Tag.id)
        .outerjoin(
            Question,
            and_(Question.id == QuestionTag.question_id, Question.draft.is_(False)),
        )
        .group_by(Tag.id, Tag.name)
        .order_by(Tag.id)
    )
    return [TagCount(name=name, qcount=count) for name, count in result.all()]


@wraps_storage_errors("Error when fetching tag")
async def get_tag_by_name(db: AsyncSession, name: str) -> Result[TagOut]:
    tag = (await db.execute(select(Tag).where(Tag.name == name))).scalar_one_or_none()
    if tag is None:
        return not_found(f"Tag {name} not found")
    return TagOut.model_validate(tag)
