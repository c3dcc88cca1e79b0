"""Page-level session gate: who gets redirected to sign-in and who gets sent home.

The gate is a two-state machine (unauthenticated / authenticated) driven by
session events. Page handlers build one from the request's
:class:`SessionContext` and ask it where, if anywhere, to redirect. It only
decides navigation; the JSON API enforces authentication separately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from weightbalance.api.auth_config import LANDING_PATH, SIGN_IN_PATH

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({SIGN_IN_PATH})


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class SessionEvent(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    EXPIRED = "expired"


@dataclass(frozen=True)
class SessionContext:
    """The caller's session as seen by one request."""

    user_id: str | None = None
    email: str = ""
    name: str = ""
    expired: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None and not self.expired


class SessionGate:
    def __init__(self, state: SessionState = SessionState.UNAUTHENTICATED) -> None:
        self.state = state

    @classmethod
    def from_context(cls, context: SessionContext) -> SessionGate:
        gate = cls()
        if context.user_id is not None:
            gate.handle(SessionEvent.SIGNED_IN)
        if context.expired:
            gate.handle(SessionEvent.EXPIRED)
        return gate

    @property
    def authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def handle(self, event: SessionEvent) -> SessionState:
        """Apply one event from the session change feed and return the new state."""
        if event is SessionEvent.SIGNED_IN:
            new_state = SessionState.AUTHENTICATED
        elif event in (SessionEvent.SIGNED_OUT, SessionEvent.EXPIRED):
            new_state = SessionState.UNAUTHENTICATED
        else:
            raise ValueError(f"Unknown session event: {event!r}")
        if new_state is not self.state:
            logger.debug("Session %s: %s -> %s", event.value, self.state.value, new_state.value)
        self.state = new_state
        return new_state

    def redirect_for(self, path: str) -> str | None:
        """Return where navigation to ``path`` must be redirected, or None to proceed."""
        is_public = path in PUBLIC_PATHS
        if not self.authenticated and not is_public:
            return SIGN_IN_PATH
        if self.authenticated and is_public:
            return LANDING_PATH
        return None
