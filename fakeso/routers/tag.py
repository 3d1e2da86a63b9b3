"""Tag router."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import get_db
from fakeso.routers.errors import unwrap
from fakeso.schemas.tag import TagCount, TagOut
from fakeso.services import tags

router = APIRouter(prefix="/tag", tags=["tag"])


@router.get("/getTagsWithQuestionNumber", response_model=List[TagCount])
async def get_tags_with_question_number(db: AsyncSession = Depends(get_db)):
    return unwrap(await tags.get_tag_counts(db))


@router.get("/getTagByName/{name}", response_model=TagOut)
async def get_tag_by_name(name: str, db: AsyncSession = Depends(get_db)):
    return unwrap(await tags.get_tag_by_name(db, name))
