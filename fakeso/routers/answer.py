"""Answer router — posting, fetching, editing, marking correct and drafts."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.database import get_db
from fakeso.routers.errors import unwrap
from fakeso.schemas.answer import AnswerOut, AnswerRequest, UpdateAnswerRequest
from fakeso.schemas.draft import DraftAnswerOut, PostAnswerDraftRequest, SaveAnswerDraftRequest
from fakeso.services import answers, drafts
from fakeso.services.events import EventPublisher, get_publisher

router = APIRouter(prefix="/answer", tags=["answer"])


@router.post("/addAnswer", response_model=AnswerOut)
async def add_answer(
    body: AnswerRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await answers.add_answer(db, publisher, body.qid, body.ans))


@router.get("/getAnswerById/{answer_id}", response_model=AnswerOut)
async def get_answer_by_id(answer_id: int, db: AsyncSession = Depends(get_db)):
    return unwrap(await answers.fetch_answer_by_id(db, answer_id))


@router.put("/updateCorrectAnswer", response_model=AnswerOut)
async def update_correct_answer(
    body: AnswerRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    """Toggle ``isCorrect`` on ``ans.id`` within question ``qid``."""
    if body.ans.id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request or answer")
    return unwrap(await answers.toggle_answer_correct(db, publisher, body.qid, body.ans.id))


@router.post("/updateAnswer", response_model=AnswerOut)
async def update_answer(
    body: UpdateAnswerRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(await answers.update_answer_text(db, publisher, body.ans))


# ── Drafts ──

@router.post("/saveDraft", response_model=DraftAnswerOut)
async def save_draft(body: SaveAnswerDraftRequest, db: AsyncSession = Depends(get_db)):
    return unwrap(
        await drafts.save_answer_draft(
            db, body.username, body.qid, body.draft, body.draft_id, body.real_id
        )
    )


@router.get("/getDraftAnswerById/{draft_id}", response_model=DraftAnswerOut)
async def get_draft_answer(draft_id: int, db: AsyncSession = Depends(get_db)):
    return unwrap(await drafts.fetch_answer_draft(db, draft_id))


@router.post("/postFromDraft", response_model=AnswerOut)
async def post_from_draft(
    body: PostAnswerDraftRequest,
    db: AsyncSession = Depends(get_db),
    publisher: EventPublisher = Depends(get_publisher),
):
    return unwrap(
        await drafts.post_answer_draft(
            db, publisher, body.username, body.qid, body.draft_answer, body.draft_id, body.real_id
        )
    )
