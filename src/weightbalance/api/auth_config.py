"""Session cookie, sign-in navigation and OAuth configuration."""

from __future__ import annotations

import logging
import os

from authlib.integrations.starlette_client import OAuth
from fastapi import Request
from starlette.responses import Response

from weightbalance.api.jwt_utils import JWT_EXPIRY_HOURS

logger = logging.getLogger(__name__)

COOKIE_NAME = "wb_session"
COOKIE_MAX_AGE = JWT_EXPIRY_HOURS * 3600

# Where the page gate sends anonymous visitors, and where it sends everyone else
SIGN_IN_PATH = "/login"
LANDING_PATH = "/"

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"

# Local development only; production must set JWT_SECRET
_DEV_JWT_SECRET = "weightbalance-dev-only-jwt-secret"


def is_dev_mode() -> bool:
    return os.environ.get("ENVIRONMENT", "development") != "production"


def get_jwt_secret() -> str:
    secret = os.environ.get("JWT_SECRET")
    if secret:
        return secret
    if is_dev_mode():
        return _DEV_JWT_SECRET
    raise ValueError("JWT_SECRET environment variable must be set in production")


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the signed session token; the cookie lives as long as the token."""
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=not is_dev_mode(),
        path="/",
        max_age=COOKIE_MAX_AGE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(COOKIE_NAME, path="/")


def oauth_redirect_uri(request: Request) -> str:
    """Callback URL for the provider; https in production behind the reverse proxy."""
    uri = str(request.url_for("callback_google"))
    if not is_dev_mode():
        uri = uri.replace("http://", "https://", 1)
    return uri


def create_oauth() -> OAuth:
    """Create the OAuth registry with the Google provider."""
    client_id = os.environ.get("GOOGLE_CLIENT_ID", "")
    if not client_id and not is_dev_mode():
        logger.warning("GOOGLE_CLIENT_ID is not set; Google sign-in will fail")
    oauth = OAuth()
    oauth.register(
        name="google",
        client_id=client_id,
        client_secret=os.environ.get("GOOGLE_CLIENT_SECRET", ""),
        server_metadata_url=GOOGLE_METADATA_URL,
        client_kwargs={"scope": "openid email profile"},
    )
    return oauth
