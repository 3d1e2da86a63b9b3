"""
Fake Stack Overflow — FastAPI application entry-point.

Run with:
    uvicorn fakeso.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from fakeso.config import settings
from fakeso.database import create_tables

# ── Import routers ──
from fakeso.routers import account, action, answer, comment, login, profile, question, socket, tag

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info(f"{settings.APP_NAME} started")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Question and answer site with live updates and moderator tools.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))


# ── Malformed bodies are client errors ──
def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_errors(exc)},
    )


# ── Register API routers ──
app.include_router(login.router)
app.include_router(account.router)
app.include_router(profile.router)
app.include_router(question.router)
app.include_router(answer.router)
app.include_router(comment.router)
app.include_router(tag.router)
app.include_router(action.router)
app.include_router(socket.router)
