"""Moderator action router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import get_db
from fakeso.routers.errors import unwrap
from fakeso.schemas.action import ActionRequest
from fakeso.services.events import EventPublisher, get_publisher
from fakeso.services.moderation import take_action

router = APIRouter(prefix="/action", tags=["action"])


@router.post("/takeAction")
async def take_action_route(
    body: ActionRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    """Pin, lock or remove a question, answer or comment."""
    return unwrap(await take_action(db, publisher, body))
