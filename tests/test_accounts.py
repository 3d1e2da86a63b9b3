from conftest import answer_in, comment_in, question_in, run

from fakeso.models.account import TextSizeEnum, ThemeEnum, UserTypeEnum
from fakeso.models.question import VoteDirection
from fakeso.schemas.account import AccountCreate, AccountSettings
from fakeso.services.accounts import (
    EMAIL_TAKEN,
    USERNAME_TAKEN,
    create_account,
    get_account,
    get_accounts,
    get_profile,
    login_to_account,
    update_account_settings,
    update_user_type,
)
from fakeso.services.answers import add_answer
from fakeso.services.comments import add_comment
from fakeso.services.drafts import save_question_draft
from fakeso.services.events import Event
from fakeso.services.questions import add_vote_to_question, save_question
from fakeso.services.results import ErrorKind, ServiceError


def register(username="alice", email="alice@fakeso.io", password="hash"):
    return run(create_account, AccountCreate(username=username, email=email, hashed_password=password))


def test_new_account_defaults():
    account = register()

    assert account.user_type == UserTypeEnum.USER
    assert account.score == 0
    assert account.settings.theme == ThemeEnum.LIGHT
    assert account.settings.text_size == TextSizeEnum.MEDIUM
    assert account.settings.screen_reader is False


def test_duplicate_username_is_reported_before_email():
    register(username="a", email="x@fakeso.io")

    same_both = register(username="a", email="x@fakeso.io")
    same_email = register(username="b", email="x@fakeso.io")

    assert same_both.kind == ErrorKind.CONFLICT and same_both.error == USERNAME_TAKEN
    assert same_email.kind == ErrorKind.CONFLICT and same_email.error == EMAIL_TAKEN
    assert [a.username for a in run(get_accounts)] == ["a"]


def test_login():
    register(password="right")

    assert run(login_to_account, "alice", "right").username == "alice"
    wrong = run(login_to_account, "alice", "wrong")
    missing = run(login_to_account, "nobody", "right")
    assert wrong.kind == ErrorKind.UNAUTHORIZED and wrong.error == "Incorrect password"
    assert missing.kind == ErrorKind.NOT_FOUND and missing.error == "Account does not exist"


def test_get_account():
    register()
    assert run(get_account, "alice").email == "alice@fakeso.io"
    assert run(get_account, "bob").kind == ErrorKind.NOT_FOUND


def test_update_user_type_publishes_profile(publisher):
    register()

    account = run(update_user_type, publisher, "alice", UserTypeEnum.MODERATOR)

    assert account.user_type == UserTypeEnum.MODERATOR
    [profile] = publisher.named(Event.USER_UPDATE)
    assert profile.username == "alice" and profile.user_type == UserTypeEnum.MODERATOR


def test_update_settings(publisher):
    register()
    settings = AccountSettings(theme=ThemeEnum.DARK, text_size=TextSizeEnum.LARGE, screen_reader=True)

    account = run(update_account_settings, publisher, "alice", settings)

    assert account.settings == settings
    assert len(publisher.named(Event.USER_UPDATE)) == 1
    assert isinstance(run(update_account_settings, publisher, "bob", settings), ServiceError)


def test_profile_collects_posts_votes_and_drafts(publisher):
    register()
    mine = run(save_question, publisher, question_in(asked_by="alice", minutes=0))
    theirs = run(save_question, publisher, question_in(asked_by="bob", minutes=1))
    answer = run(add_answer, publisher, theirs.id, answer_in(ans_by="alice"))
    comment = run(add_comment, publisher, theirs.id, "question", comment_in(comment_by="alice"))
    run(add_vote_to_question, publisher, theirs.id, "alice", VoteDirection.UP)
    run(add_vote_to_question, publisher, mine.id, "alice", VoteDirection.DOWN)
    draft = run(save_question_draft, "alice", question_in(title="Someday"))

    profile = run(get_profile, "alice")

    assert [q.id for q in profile.questions] == [mine.id]
    assert [a.id for a in profile.answers] == [answer.id]
    assert [c.id for c in profile.comments] == [comment.id]
    assert profile.up_voted_questions == [theirs.id]
    assert profile.down_voted_questions == [mine.id]
    assert [d.id for d in profile.question_drafts] == [draft.id]
    assert profile.answer_drafts == []
