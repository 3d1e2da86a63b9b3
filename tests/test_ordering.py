from conftest import at

from fakeso.schemas.answer import AnswerOut
from fakeso.schemas.question import QuestionOut
from fakeso.schemas.tag import TagOut
from fakeso.services.ordering import (
    filter_by_asked_by,
    filter_by_search,
    order_questions,
    parse_keywords,
    parse_tags,
)


def q(qid, minutes, answers=(), views=(), tags=(), title="Title", text="Body", asked_by="alice"):
    return QuestionOut(
        id=qid,
        title=title,
        text=text,
        tags=[TagOut(id=i, name=t) for i, t in enumerate(tags, 1)],
        answers=[
            AnswerOut(id=qid * 100 + i, text="a", ans_by="bob", ans_date_time=at(m))
            for i, m in enumerate(answers)
        ],
        asked_by=asked_by,
        ask_date_time=at(minutes),
        views=list(views),
    )


def ids(questions):
    return [x.id for x in questions]


def test_newest_orders_by_ask_time_descending():
    questions = [q(1, 0), q(2, 10), q(3, 5)]
    assert ids(order_questions(questions, "newest")) == [2, 3, 1]


def test_unanswered_is_newest_subset_without_answers():
    questions = [q(1, 0), q(2, 10, answers=[11]), q(3, 5)]
    assert ids(order_questions(questions, "unanswered")) == [3, 1]


def test_active_puts_latest_answer_first():
    # P was asked before Q, but Q's answer is older than P's
    questions = [q(1, 0, answers=[20]), q(2, 5, answers=[10])]
    assert ids(order_questions(questions, "active")) == [1, 2]


def test_active_sends_unanswered_last_in_newest_order():
    questions = [q(1, 0), q(2, 30), q(3, 1, answers=[2]), q(4, 20)]
    assert ids(order_questions(questions, "active")) == [3, 2, 4, 1]


def test_active_uses_most_recent_of_several_answers():
    questions = [q(1, 0, answers=[5, 50]), q(2, 1, answers=[40])]
    assert ids(order_questions(questions, "active")) == [1, 2]


def test_most_viewed_breaks_ties_by_newest():
    questions = [
        q(1, 0, views=["a", "b"]),
        q(2, 10, views=["a"]),
        q(3, 20, views=["a", "b"]),
    ]
    assert ids(order_questions(questions, "mostViewed")) == [3, 1, 2]


def test_unknown_order_falls_back_to_newest():
    questions = [q(1, 0), q(2, 10)]
    assert ids(order_questions(questions, "bogus")) == [2, 1]


def test_parse_search_string():
    assert parse_tags("[react] [css] hooks state") == ["react", "css"]
    assert parse_keywords("[react] [css] hooks state") == ["hooks", "state"]


def test_search_matches_keyword_or_tag():
    questions = [
        q(1, 0, title="Sorting in Python", tags=["python"]),
        q(2, 1, title="CSS grid", tags=["css"]),
        q(3, 2, title="Nothing", text="Here", tags=["misc"]),
    ]
    assert ids(filter_by_search(questions, "Sorting [css]")) == [1, 2]


def test_keyword_search_is_case_sensitive():
    questions = [q(1, 0, title="Sorting in Python")]
    assert ids(filter_by_search(questions, "sorting")) == []
    assert ids(filter_by_search(questions, "Sorting")) == [1]


def test_empty_search_returns_input_unchanged():
    questions = [q(2, 10), q(1, 0), q(3, 5)]
    assert ids(filter_by_search(questions, "")) == [2, 1, 3]
    assert ids(filter_by_search(questions, None)) == [2, 1, 3]


def test_search_over_empty_list_is_empty():
    assert filter_by_search([], "[python]") == []
    assert filter_by_search([], "") == []


def test_filter_by_asked_by():
    questions = [q(1, 0, asked_by="alice"), q(2, 1, asked_by="bob")]
    assert ids(filter_by_asked_by(questions, "bob")) == [2]
    assert ids(filter_by_asked_by(questions, None)) == [1, 2]
