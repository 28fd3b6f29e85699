"""
Authentication utilities for bearer tokens.
Holds the request token and inspects JWT claims without verifying the signature.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt


class TokenHolder:
    """
    The single bearer token used for outgoing requests.

    One holder is owned per logical session and injected into every client
    that talks on its behalf, so several sessions can coexist in one process.
    """

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None

    def __bool__(self) -> bool:
        return self._token is not None


class TokenPayload:
    """Unverified JWT token payload structure."""

    def __init__(self, user_id: Optional[str], email: Optional[str], role: Optional[str], exp: Optional[datetime]):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from a claims dictionary."""
        exp = data.get("exp")
        user_id = data.get("sub", data.get("user_id"))
        return cls(
            user_id=str(user_id) if user_id is not None else None,
            email=data.get("email"),
            role=data.get("role"),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc) if exp is not None else None
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.exp is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.exp


def build_auth_header(token: Optional[str]) -> Dict[str, str]:
    """
    Build the Authorization header for a token.

    Returns:
        ``{"Authorization": "Bearer <token>"}`` or an empty dict without a token
    """
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def decode_token_claims(token: str) -> Optional[TokenPayload]:
    """
    Read the claims of a JWT without verifying it.

    The server owns the signing key; the client only needs the expiry to avoid
    restoring a session that is already dead.

    Returns:
        TokenPayload, or None if the token is not a JWT
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    try:
        return TokenPayload.from_dict(claims)
    except (TypeError, ValueError, OverflowError):
        return None


def is_token_expired(token: str, now: Optional[datetime] = None) -> bool:
    """Opaque tokens never count as expired."""
    payload = decode_token_claims(token)
    if payload is None:
        return False
    return payload.is_expired(now)
