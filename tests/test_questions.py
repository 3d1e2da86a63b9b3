from conftest import answer_in, question_in, run

from fakeso.models.question import VoteDirection
from fakeso.services.answers import add_answer
from fakeso.services.events import Event
from fakeso.services.questions import (
    add_vote_to_question,
    fetch_and_add_view,
    get_questions,
    save_question,
    update_question,
)
from fakeso.services.results import ErrorKind, ServiceError
from fakeso.services.tags import get_tag_by_name, get_tag_counts


def ask(publisher, **kwargs):
    result = run(save_question, publisher, question_in(**kwargs))
    assert not isinstance(result, ServiceError), result
    return result


def test_save_question_hydrates_tags_and_publishes(publisher):
    question = ask(publisher, tags=("python", "sorting"))

    assert [t.name for t in question.tags] == ["python", "sorting"]
    assert question.answers == [] and question.views == []
    [payload] = publisher.named(Event.QUESTION_UPDATE)
    assert payload.quest.id == question.id and payload.removed is False


def test_tags_are_deduplicated_by_name(publisher):
    first = ask(publisher, tags=("python", "python"))
    second = ask(publisher, title="Another", tags=("python",))

    assert len(first.tags) == 1
    assert first.tags[0].id == second.tags[0].id
    counts = run(get_tag_counts)
    assert [(c.name, c.qcount) for c in counts] == [("python", 2)]
    assert run(get_tag_by_name, "python").name == "python"


def test_missing_tag_is_not_found():
    result = run(get_tag_by_name, "nope")
    assert isinstance(result, ServiceError) and result.kind == ErrorKind.NOT_FOUND


def test_invalid_question_is_rejected_before_storage(publisher):
    result = run(save_question, publisher, question_in(title=""))
    assert isinstance(result, ServiceError) and result.kind == ErrorKind.VALIDATION
    result = run(save_question, publisher, question_in(tags=()))
    assert isinstance(result, ServiceError) and result.kind == ErrorKind.VALIDATION
    assert run(get_questions) == []
    assert publisher.events == []


def test_get_questions_orders_then_filters(publisher):
    ask(publisher, title="Old python", tags=("python",), asked_by="alice", minutes=0)
    ask(publisher, title="New css", tags=("css",), asked_by="bob", minutes=10)
    ask(publisher, title="Mid python", tags=("python",), asked_by="bob", minutes=5)

    assert [q.title for q in run(get_questions)] == ["New css", "Mid python", "Old python"]
    assert [q.title for q in run(get_questions, "newest", "[python]")] == ["Mid python", "Old python"]
    assert [q.title for q in run(get_questions, "newest", "[python]", "bob")] == ["Mid python"]


def test_active_order_through_storage(publisher):
    older = ask(publisher, title="P", minutes=0)
    newer = ask(publisher, title="Q", minutes=5)
    run(add_answer, publisher, newer.id, answer_in(minutes=10))
    run(add_answer, publisher, older.id, answer_in(minutes=20))

    assert [q.title for q in run(get_questions, "active")] == ["P", "Q"]


def test_view_is_recorded_once_per_user(publisher):
    question = ask(publisher)

    run(fetch_and_add_view, publisher, question.id, "dave")
    result = run(fetch_and_add_view, publisher, question.id, "dave")
    result = run(fetch_and_add_view, publisher, question.id, "erin")

    assert sorted(result.views) == ["dave", "erin"]
    assert len(publisher.named(Event.VIEWS_UPDATE)) == 3


def test_view_requires_username_and_existing_question(publisher):
    question = ask(publisher)
    missing_user = run(fetch_and_add_view, publisher, question.id, "")
    missing_question = run(fetch_and_add_view, publisher, 999, "dave")
    assert missing_user.kind == ErrorKind.VALIDATION
    assert missing_question.kind == ErrorKind.NOT_FOUND


def test_update_question_replaces_content_and_tags(publisher):
    question = ask(publisher, tags=("python",))
    edit = question_in(title="Edited", text="New body", tags=("css",))
    edit.id = question.id

    updated = run(update_question, publisher, edit)

    assert updated.title == "Edited" and updated.text == "New body"
    assert [t.name for t in updated.tags] == ["css"]


# ═══════════════════════════════════════════════════════════════
#  Voting
# ═══════════════════════════════════════════════════════════════

def vote(publisher, qid, username, direction):
    return run(add_vote_to_question, publisher, qid, username, direction)


def test_upvote_then_upvote_again_cancels(publisher):
    qid = ask(publisher).id

    first = vote(publisher, qid, "dave", VoteDirection.UP)
    second = vote(publisher, qid, "dave", VoteDirection.UP)

    assert first.msg == "Question upvoted successfully"
    assert first.up_votes == ["dave"]
    assert second.msg == "Upvote cancelled successfully"
    assert second.up_votes == [] and second.down_votes == []


def test_opposite_vote_moves_user_between_sets(publisher):
    qid = ask(publisher).id

    vote(publisher, qid, "dave", VoteDirection.UP)
    result = vote(publisher, qid, "dave", VoteDirection.DOWN)

    assert result.msg == "Question downvoted successfully"
    assert result.up_votes == [] and result.down_votes == ["dave"]


def test_downvote_cancel_and_revote(publisher):
    qid = ask(publisher).id

    vote(publisher, qid, "dave", VoteDirection.DOWN)
    cancelled = vote(publisher, qid, "dave", VoteDirection.DOWN)
    again = vote(publisher, qid, "dave", VoteDirection.UP)

    assert cancelled.msg == "Downvote cancelled successfully"
    assert again.up_votes == ["dave"] and again.down_votes == []


def test_user_never_in_both_vote_sets(publisher):
    qid = ask(publisher).id
    sequence = [VoteDirection.UP, VoteDirection.DOWN, VoteDirection.DOWN,
                VoteDirection.UP, VoteDirection.UP, VoteDirection.DOWN]
    for direction in sequence:
        result = vote(publisher, qid, "dave", direction)
        assert not ("dave" in result.up_votes and "dave" in result.down_votes)

    payloads = publisher.named(Event.VOTE_UPDATE)
    assert len(payloads) == len(sequence)
    assert payloads[-1].down_votes == ["dave"]


def test_votes_from_different_users_do_not_interfere(publisher):
    qid = ask(publisher).id
    vote(publisher, qid, "dave", VoteDirection.UP)
    vote(publisher, qid, "erin", VoteDirection.UP)
    result = vote(publisher, qid, "frank", VoteDirection.DOWN)

    assert sorted(result.up_votes) == ["dave", "erin"]
    assert result.down_votes == ["frank"]


def test_vote_on_missing_question(publisher):
    result = vote(publisher, 404, "dave", VoteDirection.UP)
    assert isinstance(result, ServiceError) and result.kind == ErrorKind.NOT_FOUND
