"""JWT token helpers for session management."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

JWT_ALGORITHM = "HS256"
JWT_EXPIRY_HOURS = 12


def create_token(
    user_id: str,
    email: str,
    name: str,
    secret: str,
    expires_in: timedelta | None = None,
) -> str:
    """Create a signed session JWT (12-hour expiry unless ``expires_in`` is given)."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "name": name,
        "iat": now,
        "exp": now + (expires_in or timedelta(hours=JWT_EXPIRY_HOURS)),
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, secret: str) -> dict:
    """Decode and validate a JWT. Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError."""
    return jwt.decode(token, secret, algorithms=[JWT_ALGORITHM])
