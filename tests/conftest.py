import asyncio
import os
import tempfile
import uuid
from datetime import datetime, timedelta, timezone

import pytest

# Point the app at a throwaway database before anything imports fakeso.config
_DB_PATH = os.path.join(tempfile.gettempdir(), f"fakeso-test-{uuid.uuid4().hex}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"

from fakeso.database import async_session, create_tables, drop_tables  # noqa: E402
from fakeso.schemas.answer import AnswerIn  # noqa: E402
from fakeso.schemas.comment import CommentIn  # noqa: E402
from fakeso.schemas.question import QuestionIn  # noqa: E402
from fakeso.schemas.tag import TagIn  # noqa: E402

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class RecordingPublisher:
    """Keeps every published event so tests can assert on them."""

    def __init__(self):
        self.events = []

    async def publish(self, event, payload):
        self.events.append((event, payload))

    def named(self, event):
        return [payload for e, payload in self.events if e == event]


def at(minutes: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


def question_in(title="How do I sort a list?", text="Looking for a stable sort.",
                tags=("python",), asked_by="alice", minutes=0) -> QuestionIn:
    return QuestionIn(
        title=title,
        text=text,
        tags=[TagIn(name=t, description=f"{t} questions") for t in tags],
        asked_by=asked_by,
        ask_date_time=at(minutes),
    )


def answer_in(text="Use sorted().", ans_by="bob", minutes=1) -> AnswerIn:
    return AnswerIn(text=text, ans_by=ans_by, ans_date_time=at(minutes))


def comment_in(text="Nice one", comment_by="carol", minutes=2) -> CommentIn:
    return CommentIn(text=text, comment_by=comment_by, comment_date_time=at(minutes))


def run(func, *args, **kwargs):
    """Call an async service function with a fresh session on a fresh loop."""

    async def _call():
        async with async_session() as db:
            return await func(db, *args, **kwargs)

    return asyncio.run(_call())


@pytest.fixture(autouse=True)
def fresh_db():
    asyncio.run(drop_tables())
    asyncio.run(create_tables())
    yield


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def client(publisher):
    from fastapi.testclient import TestClient

    from fakeso.main import app
    from fakeso.services.events import get_publisher

    app.dependency_overrides[get_publisher] = lambda: publisher
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def pytest_sessionfinish(session, exitstatus):
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)
