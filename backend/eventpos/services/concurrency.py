# Overview: Transaction boundary shared by the write services.

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db


class PersistenceError(Exception):
    """The storage layer rejected a write. The session has been rolled back."""


def run_in_transaction(func):
    """
    Execute `func` and commit its work as one unit.

    Any exception rolls the whole unit back. Storage failures are re-raised
    as PersistenceError; domain errors propagate unchanged. There is no
    retry: sale commits are not idempotent, so re-invoking is the caller's
    decision.
    """
    try:
        result = func()
        db.session.commit()
        return result
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise PersistenceError("Storage failure") from exc
    except Exception:
        db.session.rollback()
        raise
