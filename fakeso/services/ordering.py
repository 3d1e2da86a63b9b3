"""
Ordering and search filtering over hydrated questions.

Everything here is pure: it takes ``QuestionOut`` lists and returns new lists,
so the same rules apply no matter how the questions were loaded.
"""

import re
from typing import Callable, Dict, List, Optional

from fakeso.schemas.question import QuestionOut

TAG_PATTERN = re.compile(r"\[([^\]]+)\]")
WORD_PATTERN = re.compile(r"\b\w+\b")


def parse_tags(search: str) -> List[str]:
    """``"[react][css] hooks"`` → ``["react", "css"]``."""
    return TAG_PATTERN.findall(search)


def parse_keywords(search: str) -> List[str]:
    """Words outside of bracketed tags."""
    return WORD_PATTERN.findall(TAG_PATTERN.sub(" ", search))


def has_tag(question: QuestionOut, tag_names: List[str]) -> bool:
    names = {t.name for t in question.tags}
    return any(name in names for name in tag_names)


def has_keyword(question: QuestionOut, keywords: List[str]) -> bool:
    return any(w in question.title or w in question.text for w in keywords)


# ═══════════════════════════════════════════════════════════════
#  Orderings
# ═══════════════════════════════════════════════════════════════

def sort_by_newest(questions: List[QuestionOut]) -> List[QuestionOut]:
    return sorted(questions, key=lambda q: q.ask_date_time, reverse=True)


def sort_by_unanswered(questions: List[QuestionOut]) -> List[QuestionOut]:
    return [q for q in sort_by_newest(questions) if not q.answers]


def _last_answer_times(questions: List[QuestionOut]) -> Dict[int, float]:
    latest = {}
    for q in questions:
        for a in q.answers:
            ts = a.ans_date_time.timestamp()
            if q.id not in latest or latest[q.id] < ts:
                latest[q.id] = ts
    return latest


def sort_by_active(questions: List[QuestionOut]) -> List[QuestionOut]:
    """
    Most recently answered first. Questions without answers go last and keep
    their newest-first order among themselves.
    """
    latest = _last_answer_times(questions)

    def key(q: QuestionOut):
        ts = latest.get(q.id)
        return (1, 0.0) if ts is None else (0, -ts)

    # sorted() is stable, so ties keep the newest-first order
    return sorted(sort_by_newest(questions), key=key)


def sort_by_most_viewed(questions: List[QuestionOut]) -> List[QuestionOut]:
    return sorted(sort_by_newest(questions), key=lambda q: len(q.views), reverse=True)


ORDERINGS: Dict[str, Callable[[List[QuestionOut]], List[QuestionOut]]] = {
    "newest": sort_by_newest,
    "unanswered": sort_by_unanswered,
    "active": sort_by_active,
    "mostViewed": sort_by_most_viewed,
}


def order_questions(questions: List[QuestionOut], order: str) -> List[QuestionOut]:
    # Unknown keys fall back to newest
    return ORDERINGS.get(order, sort_by_newest)(questions)


# ═══════════════════════════════════════════════════════════════
#  Filters
# ═══════════════════════════════════════════════════════════════

def filter_by_asked_by(questions: List[QuestionOut], asked_by: Optional[str]) -> List[QuestionOut]:
    if not asked_by:
        return list(questions)
    return [q for q in questions if q.asked_by == asked_by]


def filter_by_search(questions: List[QuestionOut], search: Optional[str]) -> List[QuestionOut]:
    """
    Keep questions matching any keyword (title or text) or any ``[tag]``.
    An empty query keeps everything in its original order.
    """
    if not questions:
        return []

    search = search or ""
    tags = parse_tags(search)
    keywords = parse_keywords(search)
    if not tags and not keywords:
        return list(questions)

    return [q for q in questions if has_keyword(q, keywords) or has_tag(q, tags)]
