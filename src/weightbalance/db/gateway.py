"""Statement execution with driver-error translation.

Every write goes through :func:`execute` so that a unique-constraint
violation on the business identifier becomes :class:`DuplicateKey` and any
other driver failure becomes an opaque :class:`InternalError`.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.engine import Result
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from weightbalance.errors import DuplicateKey, InternalError

logger = logging.getLogger(__name__)

PG_UNIQUE_VIOLATION = "23505"


def _driver_code(exc: DBAPIError) -> str | None:
    """Return the SQLSTATE reported by the driver, if any."""
    orig = exc.orig
    for attr in ("sqlstate", "pgcode"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    # sqlite3 (3.11+) exposes the extended result code name
    name = getattr(orig, "sqlite_errorname", None)
    if name:
        return str(name)
    return None


def is_unique_violation(exc: DBAPIError) -> bool:
    code = _driver_code(exc)
    if code in (PG_UNIQUE_VIOLATION, "SQLITE_CONSTRAINT_UNIQUE"):
        return True
    return isinstance(exc, IntegrityError) and "UNIQUE constraint failed" in str(exc.orig)


def execute(
    session: Session,
    statement: Executable,
    *,
    action: str,
    duplicate_message: str | None = None,
) -> Result[Any]:
    """Execute one parameterised statement.

    The request-scoped session dependency owns commit and rollback.

    Args:
        session: Request-scoped session.
        statement: Insert/update/delete/select, typically with RETURNING.
        action: Short description used in log lines ("creating flight record").
        duplicate_message: When given, unique violations raise DuplicateKey with it.
    """
    try:
        return session.execute(statement)
    except DBAPIError as exc:
        if duplicate_message and is_unique_violation(exc):
            logger.info("Duplicate key while %s: %s", action, exc.orig)
            raise DuplicateKey(duplicate_message) from exc
        logger.exception("Database error while %s", action)
        raise InternalError(detail=str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        logger.exception("Database error while %s", action)
        raise InternalError(detail=str(exc)) from exc
