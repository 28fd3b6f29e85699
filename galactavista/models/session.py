"""
Client-side session value: current token, cached user and state machine state.
"""

import enum
from dataclasses import dataclass, replace
from typing import Optional

from galactavista.schemas.user import UserResponse


class SessionState(str, enum.Enum):
    """Auth session states."""
    UNAUTHENTICATED = "unauthenticated"
    INITIALIZING = "initializing"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    """
    Immutable snapshot of the auth session.

    Mutated only by the session manager, which replaces the whole snapshot.
    """

    user: Optional[UserResponse] = None
    token: Optional[str] = None
    state: SessionState = SessionState.UNAUTHENTICATED

    @property
    def authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    @property
    def is_loading(self) -> bool:
        return self.state in (SessionState.INITIALIZING, SessionState.AUTHENTICATING)

    def with_state(self, state: SessionState) -> "Session":
        return replace(self, state=state)

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    def __repr__(self) -> str:
        # never print the token
        email = self.user.email if self.user else None
        return f"<Session state={self.state.value} user={email!r} token={'set' if self.token else 'unset'}>"
