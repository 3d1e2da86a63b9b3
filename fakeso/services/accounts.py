"""Account service — registration, login, roles, settings and profiles."""

import hmac
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fakeso.models.account import Account, UserTypeEnum
from fakeso.models.answer import Answer
from fakeso.models.comment import Comment
from fakeso.models.question import Question, QuestionVote, VoteDirection
from fakeso.schemas.account import (
    AccountCreate,
    AccountOut,
    AccountSettings,
    ProfilePagePayload,
)
from fakeso.schemas.action import Actor
from fakeso.schemas.comment import CommentOut
from fakeso.services.drafts import list_answer_drafts, list_question_drafts
from fakeso.services.events import Event, EventPublisher
from fakeso.services.hydrate import hydrate_questions, load_answers
from fakeso.services.results import (
    ErrorKind,
    Result,
    ServiceError,
    conflict,
    not_found,
    validation,
    wraps_storage_errors,
)

logger = logging.getLogger(__name__)

USERNAME_TAKEN = "An account with this username already exists"
EMAIL_TAKEN = "An account with this email already exists"

MODERATOR_TYPES = {UserTypeEnum.MODERATOR, UserTypeEnum.OWNER}


def account_out(account: Account) -> AccountOut:
    return AccountOut(
        id=account.id,
        username=account.username,
        email=account.email,
        user_type=account.user_type,
        score=account.score,
        date_created=account.date_created,
        settings=AccountSettings(
            theme=account.theme,
            text_size=account.text_size,
            screen_reader=account.screen_reader,
        ),
    )


async def find_account(db: AsyncSession, username: str):
    result = await db.execute(select(Account).where(Account.username == username))
    return result.scalar_one_or_none()


# ═══════════════════════════════════════════════════════════════
#  Registration & login
# ═══════════════════════════════════════════════════════════════

@wraps_storage_errors("Error creating account")
async def create_account(db: AsyncSession, data: AccountCreate) -> Result[AccountOut]:
    """Register a new ``user`` account; username is checked before email."""
    if not data.username or not data.hashed_password:
        return validation("Invalid request")

    if await find_account(db, data.username):
        return conflict(USERNAME_TAKEN)
    taken = await db.execute(select(Account.id).where(Account.email == data.email))
    if taken.scalar_one_or_none() is not None:
        return conflict(EMAIL_TAKEN)

    account = Account(
        username=data.username,
        email=data.email,
        hashed_password=data.hashed_password,
        user_type=UserTypeEnum.USER,
        score=0,
    )
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        await db.rollback()
        if await find_account(db, data.username):
            return conflict(USERNAME_TAKEN)
        return conflict(EMAIL_TAKEN)
    await db.refresh(account)

    logger.info(f"Account created for {account.username}")
    return account_out(account)


@wraps_storage_errors("Error accessing account")
async def login_to_account(db: AsyncSession, username: str, hashed_password: str) -> Result[Account]:
    account = await find_account(db, username)
    if account is None:
        return not_found("Account does not exist")
    if not hmac.compare_digest(account.hashed_password.encode(), hashed_password.encode()):
        return ServiceError(ErrorKind.UNAUTHORIZED, "Incorrect password")
    return account


async def can_perform_actions(db: AsyncSession, actor: Actor) -> bool:
    """True when the credentials belong to a moderator or owner account."""
    account = await find_account(db, actor.username)
    return (
        account is not None
        and hmac.compare_digest(account.hashed_password.encode(), actor.hashed_password.encode())
        and account.user_type in MODERATOR_TYPES
    )


# ═══════════════════════════════════════════════════════════════
#  Account management
# ═══════════════════════════════════════════════════════════════

@wraps_storage_errors("Failed to fetch accounts")
async def get_accounts(db: AsyncSession) -> Result[List[AccountOut]]:
    result = await db.execute(select(Account).order_by(Account.id))
    return [account_out(a) for a in result.scalars()]


@wraps_storage_errors("Failed to fetch account")
async def get_account(db: AsyncSession, username: str) -> Result[AccountOut]:
    account = await find_account(db, username)
    if account is None:
        return not_found("Account not found")
    return account_out(account)


@wraps_storage_errors("Failed to update user type")
async def update_user_type(
    db: AsyncSession,
    publisher: EventPublisher,
    username: str,
    user_type: UserTypeEnum,
) -> Result[AccountOut]:
    account = await find_account(db, username)
    if account is None:
        return not_found("Account not found")

    account.user_type = user_type
    await db.commit()
    logger.info(f"{username} is now {user_type.value}")

    profile = await get_profile(db, username)
    if not isinstance(profile, ServiceError):
        await publisher.publish(Event.USER_UPDATE, profile)
    return account_out(account)


@wraps_storage_errors("Failed to update account settings")
async def update_account_settings(
    db: AsyncSession,
    publisher: EventPublisher,
    username: str,
    settings: AccountSettings,
) -> Result[AccountOut]:
    account = await find_account(db, username)
    if account is None:
        return not_found("Account not found")

    account.theme = settings.theme
    account.text_size = settings.text_size
    account.screen_reader = settings.screen_reader
    await db.commit()

    profile = await get_profile(db, username)
    if not isinstance(profile, ServiceError):
        await publisher.publish(Event.USER_UPDATE, profile)
    return account_out(account)


# ═══════════════════════════════════════════════════════════════
#  Profile
# ═══════════════════════════════════════════════════════════════

async def _voted_question_ids(db: AsyncSession, username: str, direction: VoteDirection) -> List[int]:
    result = await db.execute(
        select(QuestionVote.question_id)
        .where(QuestionVote.username == username, QuestionVote.direction == direction)
        .order_by(QuestionVote.question_id)
    )
    return list(result.scalars())


@wraps_storage_errors("Failed to build profile")
async def get_profile(db: AsyncSession, username: str) -> Result[ProfilePagePayload]:
    """Everything a user authored, voted on or left in drafts."""
    account = await find_account(db, username)
    if account is None:
        return not_found("Account not found")

    questions = await db.execute(
        select(Question)
        .where(Question.asked_by == username, Question.draft.is_(False))
        .order_by(Question.ask_date_time.desc())
    )
    answer_ids = await db.execute(
        select(Answer.id)
        .where(Answer.ans_by == username, Answer.draft.is_(False))
        .order_by(Answer.ans_date_time.desc())
    )
    answer_ids = list(answer_ids.scalars())
    answers = await load_answers(db, answer_ids)
    comments = await db.execute(
        select(Comment)
        .where(Comment.comment_by == username)
        .order_by(Comment.comment_date_time.desc())
    )

    return ProfilePagePayload(
        username=account.username,
        score=account.score,
        user_type=account.user_type,
        questions=await hydrate_questions(db, list(questions.scalars())),
        answers=[answers[a] for a in answer_ids if a in answers],
        comments=[CommentOut.model_validate(c) for c in comments.scalars()],
        up_voted_questions=await _voted_question_ids(db, username, VoteDirection.UP),
        down_voted_questions=await _voted_question_ids(db, username, VoteDirection.DOWN),
        question_drafts=await list_question_drafts(db, username),
        answer_drafts=await list_answer_drafts(db, username),
    )
