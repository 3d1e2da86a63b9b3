"""
Tagged results returned by the service layer.

Service functions never raise for expected failures. They return either the
success value or a ``ServiceError``, and callers must check for the error
before using the value:

    result = await add_answer(db, publisher, qid, ans)
    if isinstance(result, ServiceError):
        ...
"""

import enum
import functools
import logging
from dataclasses import dataclass
from typing import TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    NOT_IMPLEMENTED = "not_implemented"
    STORAGE = "storage"


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    error: str


Result = Union[T, ServiceError]


def validation(message: str) -> ServiceError:
    return ServiceError(ErrorKind.VALIDATION, message)


def not_found(message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> ServiceError:
    return ServiceError(ErrorKind.CONFLICT, message)


def wraps_storage_errors(message: str):
    """
    Decorate an async service function so database failures come back as a
    ``storage`` ServiceError instead of propagating the raw driver error.
    The session is rolled back; the first positional argument must be it.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(db, *args, **kwargs):
            try:
                return await func(db, *args, **kwargs)
            except SQLAlchemyError:
                logger.exception(f"{func.__name__} failed")
                await db.rollback()
                return ServiceError(ErrorKind.STORAGE, message)

        return wrapper

    return decorator
