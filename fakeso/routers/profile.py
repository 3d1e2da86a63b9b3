"""Per-user profile payload."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import get_db
from fakeso.routers.errors import unwrap
from fakeso.schemas.account import ProfilePagePayload
from fakeso.services.accounts import get_profile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/{username}", response_model=ProfilePagePayload)
async def view_profile(username: str, db: AsyncSession = Depends(get_db)):
    return unwrap(await get_profile(db, username))
