"""
Fake Stack Overflow – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them
through a single ``import fakeso.models``.
"""

from fakeso.models.account import Account                     # noqa: F401
from fakeso.models.tag import Tag                             # noqa: F401
from fakeso.models.question import Question                   # noqa: F401
from fakeso.models.question import QuestionAnswer             # noqa: F401
from fakeso.models.question import QuestionComment            # noqa: F401
from fakeso.models.question import QuestionTag                # noqa: F401
from fakeso.models.question import QuestionView               # noqa: F401
from fakeso.models.question import QuestionVote               # noqa: F401
from fakeso.models.answer import Answer                       # noqa: F401
from fakeso.models.answer import AnswerComment                # noqa: F401
from fakeso.models.comment import Comment                     # noqa: F401
from fakeso.models.draft import DraftAnswer, DraftQuestion    # noqa: F401
