"""Comment router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import get_db
from fakeso.routers.errors import unwrap
from fakeso.schemas.comment import AddCommentRequest, CommentIn, CommentOut
from fakeso.services import comments
from fakeso.services.events import EventPublisher, get_publisher

router = APIRouter(prefix="/comment", tags=["comment"])


@router.post("/addComment", response_model=CommentOut)
async def add_comment(
    body: AddCommentRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await comments.add_comment(db, publisher, body.id, body.type, body.comment))


@router.get("/getCommentById/{comment_id}", response_model=CommentOut)
async def get_comment_by_id(comment_id: int, db: AsyncSession = Depends(get_db)):
    return unwrap(await comments.fetch_comment_by_id(db, comment_id))


@router.post("/updateComment", response_model=CommentOut)
async def update_comment(
    body: CommentIn,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await comments.update_comment_text(db, publisher, body))
