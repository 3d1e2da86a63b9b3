import asyncio
from datetime import datetime, timedelta, timezone

from fakeso.database import async_session, create_tables
from fakeso.models.account import Account, UserTypeEnum
from fakeso.models.answer import Answer, AnswerComment
from fakeso.models.comment import Comment
from fakeso.models.question import Question, QuestionAnswer, QuestionComment, QuestionTag, QuestionVote, VoteDirection
from fakeso.models.tag import Tag


async def async_main():
    await create_tables()
    now = datetime.now(timezone.utc)

    async with async_session() as session:
        # Create accounts
        owner = Account(username="owner", email="owner@fakeso.io", hashed_password="owner", user_type=UserTypeEnum.OWNER)
        mod = Account(username="mod", email="mod@fakeso.io", hashed_password="mod", user_type=UserTypeEnum.MODERATOR)
        alice = Account(username="alice", email="alice@fakeso.io", hashed_password="alice")
        bob = Account(username="bob", email="bob@fakeso.io", hashed_password="bob")
        session.add_all([owner, mod, alice, bob])
        await session.flush()

        # Tags
        python = Tag(name="python", description="The Python programming language.")
        sqlalchemy = Tag(name="sqlalchemy", description="The Python SQL toolkit and ORM.")
        fastapi = Tag(name="fastapi", description="Web framework for building APIs with Python.")
        session.add_all([python, sqlalchemy, fastapi])
        await session.flush()

        # Questions
        q1 = Question(
            title="How do I run an async query with SQLAlchemy?",
            text="I have an AsyncSession and want to select rows. What is the idiomatic way?",
            asked_by="alice",
            ask_date_time=now - timedelta(days=2),
        )
        q2 = Question(
            title="FastAPI dependency that yields a session",
            text="Should the dependency commit after the request or leave it to the route?",
            asked_by="bob",
            ask_date_time=now - timedelta(days=1),
        )
        session.add_all([q1, q2])
        await session.flush()
        session.add_all([
            QuestionTag(question_id=q1.id, tag_id=python.id),
            QuestionTag(question_id=q1.id, tag_id=sqlalchemy.id),
            QuestionTag(question_id=q2.id, tag_id=python.id),
            QuestionTag(question_id=q2.id, tag_id=fastapi.id),
        ])

        # Answers
        a1 = Answer(
            text="Use `await session.execute(select(Model))` and then `.scalars()`.",
            ans_by="bob",
            ans_date_time=now - timedelta(days=1, hours=12),
        )
        session.add(a1)
        await session.flush()
        session.add(QuestionAnswer(question_id=q1.id, answer_id=a1.id))

        # Comments
        c1 = Comment(text="Works for me, thanks!", comment_by="alice", comment_date_time=now - timedelta(days=1))
        c2 = Comment(text="Which version are you on?", comment_by="mod", comment_date_time=now - timedelta(hours=20))
        session.add_all([c1, c2])
        await session.flush()
        session.add(AnswerComment(answer_id=a1.id, comment_id=c1.id))
        session.add(QuestionComment(question_id=q2.id, comment_id=c2.id))

        # Votes
        session.add(QuestionVote(question_id=q1.id, username="bob", direction=VoteDirection.UP))

        await session.commit()
        print("Successfully seeded 4 accounts, 2 questions, 1 answer and 2 comments.")


if __name__ == "__main__":
    asyncio.run(async_main())
