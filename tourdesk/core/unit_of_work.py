"""Transaction boundary shared by the multi-step write operations."""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tourdesk.core.result import (
    Err,
    Result,
    conflict,
    foreign_key_violation,
    internal_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FOREIGN_KEY_SQLSTATE = "23503"


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """Return ``True`` when the database rejected a write because of a foreign key."""

    original = getattr(exc, "orig", None)
    code = getattr(original, "pgcode", None) or getattr(original, "sqlstate", None)
    if code == _FOREIGN_KEY_SQLSTATE:
        return True
    return "FOREIGN KEY constraint failed" in str(original)


class UnitOfWork:
    """Run a unit of work against a session and commit only when it succeeds.

    ``work`` returns a :data:`Result`. An ``Err`` result or any database error
    rolls the whole session back, so callers never observe partial writes.
    """

    def __init__(self, db: Session, *, resource: str = "El registro") -> None:
        self.db = db
        self.resource = resource

    def run(self, work: Callable[[], Result[T]]) -> Result[T]:
        try:
            result = work()
            if isinstance(result, Err):
                self.db.rollback()
                return result
            self.db.commit()
            return result
        except IntegrityError as exc:
            self.db.rollback()
            if is_foreign_key_violation(exc):
                logger.warning("Foreign key violation on %s: %s", self.resource, exc.orig)
                return foreign_key_violation(self.resource)
            logger.warning("Integrity error on %s: %s", self.resource, exc.orig)
            return conflict(f"{self.resource} viola una restricción de integridad")
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Database error while writing %s", self.resource)
            return internal_error()


__all__ = ["UnitOfWork", "is_foreign_key_violation"]
