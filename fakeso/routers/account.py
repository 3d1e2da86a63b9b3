"""Account listing, role changes and accessibility settings."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import get_db
from fakeso.routers.errors import unwrap
from fakeso.schemas.account import AccountOut, AccountSettings, UserTypeUpdate
from fakeso.services import accounts
from fakeso.services.events import EventPublisher, get_publisher

router = APIRouter(prefix="/account", tags=["account"])


@router.get("/", response_model=List[AccountOut])
async def list_accounts(db: AsyncSession = Depends(get_db)):
    return unwrap(await accounts.get_accounts(db))


@router.get("/{username}", response_model=AccountOut)
async def get_account(username: str, db: AsyncSession = Depends(get_db)):
    return unwrap(await accounts.get_account(db, username))


@router.put("/userType/{username}", response_model=AccountOut)
async def update_user_type(
    username: str,
    body: UserTypeUpdate,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    """Promote or demote an account between user, moderator and owner."""
    return unwrap(await accounts.update_user_type(db, publisher, username, body.user_type))


@router.put("/settings/{username}", response_model=AccountOut)
async def update_settings(
    username: str,
    body: AccountSettings,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await accounts.update_account_settings(db, publisher, username, body))
