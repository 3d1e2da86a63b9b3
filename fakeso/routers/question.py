"""
Question router — listing, viewing, asking, editing, voting and drafts.

Endpoints:
    GET  /question/getQuestion                 → ordered + filtered listing
    GET  /question/getQuestionById/{qid}       → view (records the viewer)
    POST /question/addQuestion
    POST /question/upvoteQuestion
    POST /question/downvoteQuestion
    POST /question/updateQuestion
    POST /question/saveDraft
    GET  /question/getDraftQuestionById/{id}
    POST /question/postFromDraft
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import get_db
from fakeso.models.question import VoteDirection
from fakeso.routers.errors import unwrap
from fakeso.schemas.draft import (
    DraftQuestionOut,
    PostQuestionDraftRequest,
    SaveQuestionDraftRequest,
)
from fakeso.schemas.question import QuestionIn, QuestionOut, VoteRequest, VoteResult
from fakeso.services import drafts, questions
from fakeso.services.events import EventPublisher, get_publisher

router = APIRouter(prefix="/question", tags=["question"])


@router.get("/getQuestion", response_model=List[QuestionOut])
async def get_questions(
    order: str = "newest",
    search: Optional[str] = None,
    asked_by: Optional[str] = Query(None, alias="askedBy"),
    db: AsyncSession = Depends(get_db),
):
    return unwrap(await questions.get_questions(db, order, search, asked_by))


@router.get("/getQuestionById/{qid}", response_model=QuestionOut)
async def get_question_by_id(
    qid: int,
    username: str = "",
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await questions.fetch_and_add_view(db, publisher, qid, username))


@router.post("/addQuestion", response_model=QuestionOut)
async def add_question(
    body: QuestionIn,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await questions.save_question(db, publisher, body))


@router.post("/upvoteQuestion", response_model=VoteResult)
async def upvote_question(
    body: VoteRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(
        await questions.add_vote_to_question(db, publisher, body.qid, body.username, VoteDirection.UP)
    )


@router.post("/downvoteQuestion", response_model=VoteResult)
async def downvote_question(
    body: VoteRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(
        await questions.add_vote_to_question(db, publisher, body.qid, body.username, VoteDirection.DOWN)
    )


@router.post("/updateQuestion", response_model=QuestionOut)
async def update_question(
    body: QuestionIn,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await questions.update_question(db, publisher, body))


# ── Drafts ──

@router.post("/saveDraft", response_model=DraftQuestionOut)
async def save_draft(body: SaveQuestionDraftRequest, db: AsyncSession = Depends(get_db)):
    return unwrap(
        await drafts.save_question_draft(db, body.username, body.draft, body.draft_id, body.real_id)
    )


@router.get("/getDraftQuestionById/{draft_id}", response_model=DraftQuestionOut)
async def get_draft_question(draft_id: int, db: AsyncSession = Depends(get_db)):
    return unwrap(await drafts.fetch_question_draft(db, draft_id))


@router.post("/postFromDraft", response_model=QuestionOut)
async def post_from_draft(
    body: PostQuestionDraftRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(
        await drafts.post_question_draft(
            db, publisher, body.username, body.draft_question, body.draft_id, body.real_id
        )
    )
