"""
Login router — username/password sign-in + JWT cookie.

Endpoints:
    POST /login/login          → check credentials, set JWT cookie
    POST /login/createAccount  → register a new account, set JWT cookie
    GET  /login/me             → account behind the current cookie
    GET  /login/logout         → clear JWT cookie
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.config import settings
from fakeso.database import get_db
from fakeso.models.account import Account
from fakeso.routers.errors import unwrap
from fakeso.schemas.account import AccountCreate, AccountOut, LoginRequest
from fakeso.services.accounts import account_out, create_account, find_account, login_to_account

router = APIRouter(prefix="/login", tags=["login"])

COOKIE_KEY = "access_token"


# ═══════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════

def create_access_token(data: dict) -> str:
    """Create a signed JWT with an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _set_auth_cookie(response: Response, username: str) -> Response:
    """Attach the JWT cookie to a response."""
    token = create_access_token({"sub": username})
    response.set_cookie(
        key=COOKIE_KEY,
        value=token,
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )
    return response


async def get_current_account(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Optional[Account]:
    """
    Extract the JWT from the cookie, decode it, and return the Account.
    Returns None when no valid token is present.
    """
    token = request.cookies.get(COOKIE_KEY)
    if not token:
        return None
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        username: str = payload.get("sub", "")
        if not username:
            return None
    except JWTError:
        return None

    return await find_account(db, username)


# ═══════════════════════════════════════════════════════════════
#  Routes
# ═══════════════════════════════════════════════════════════════

@router.post("/login", response_model=AccountOut)
async def login(
    body: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    if not body.username or not body.hashed_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid login request")
    account = unwrap(await login_to_account(db, body.username, body.hashed_password))
    _set_auth_cookie(response, account.username)
    return account_out(account)


@router.post("/createAccount", response_model=AccountOut)
async def register(
    body: AccountCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    account = unwrap(await create_account(db, body))
    _set_auth_cookie(response, account.username)
    return account


@router.get("/me", response_model=AccountOut)
async def me(current_account: Optional[Account] = Depends(get_current_account)):
    if current_account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return account_out(current_account)


@router.get("/logout")
async def logout(response: Response):
    response.delete_cookie(COOKIE_KEY)
    return {"msg": "Logged out"}
