"""FastAPI dependencies for database sessions and auth."""

from __future__ import annotations

from collections.abc import Generator

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from weightbalance.api.auth_config import COOKIE_NAME, get_jwt_secret, is_dev_mode
from weightbalance.api.jwt_utils import decode_token
from weightbalance.api.session_gate import SessionContext
from weightbalance.db.engine import DEV_USER_ID, SessionLocal
from weightbalance.db.models import UserRow


def get_db() -> Generator[Session, None, None]:
    """Yield a SQLAlchemy session, committing on success or rolling back on error."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _decode_user_id(request: Request) -> str:
    """Extract the user ID from the JWT session cookie (no DB check).

    In dev mode, returns the hardcoded dev user (no login required).
    In production, validates the JWT and returns the ``sub`` claim.
    Raises 401 if no valid session is present.
    """
    if is_dev_mode():
        return DEV_USER_ID

    token = request.cookies.get(COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_token(token, get_jwt_secret())
        return payload["sub"]
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Session expired")
    except (jwt.InvalidTokenError, KeyError):
        raise HTTPException(status_code=401, detail="Invalid session")


def current_user_id(
    request: Request,
    db: Session = Depends(get_db),
) -> str:
    """Extract the authenticated user ID and verify the account still exists.

    Any signed-in user may use every endpoint; there are no roles.
    Raises 401 if no valid session or the user row is gone.
    """
    user_id = _decode_user_id(request)

    if is_dev_mode():
        return user_id

    if db.get(UserRow, user_id) is None:
        raise HTTPException(status_code=401, detail="User not found")

    return user_id


def current_session(request: Request) -> SessionContext:
    """Build the per-request session context used by page handlers.

    Never raises: a missing, invalid or expired cookie yields an
    unauthenticated context (expired ones are flagged so the gate can
    record the transition).
    """
    if is_dev_mode():
        return SessionContext(user_id=DEV_USER_ID, email="dev@localhost", name="Dev User")

    token = request.cookies.get(COOKIE_NAME)
    if not token:
        return SessionContext()

    try:
        payload = decode_token(token, get_jwt_secret())
    except jwt.ExpiredSignatureError:
        return SessionContext(expired=True)
    except jwt.InvalidTokenError:
        return SessionContext()

    return SessionContext(
        user_id=payload.get("sub"),
        email=payload.get("email", ""),
        name=payload.get("name", ""),
    )
