"""
Session Models for Finance Dashboard

The hosted auth provider issues and validates sessions. These models are our
own narrow view of what it hands back, plus the data the session state
holder produces: auth states, auth-change events and navigation intents.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field


class AuthState(str, Enum):
    """States of the session state holder."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class AuthEventType(str, Enum):
    """
    Auth-state change notifications pushed by the auth provider.

    Values match the provider's event names.
    """
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"


class AuthUser(BaseModel):
    """The authenticated user as reported by the auth provider."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthSession(BaseModel):
    """A session token bundle. Tokens are opaque to us."""
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user: AuthUser


class SessionEvent(BaseModel):
    """One auth-state change, as consumed by the state holder."""

    event: AuthEventType
    session: Optional[AuthSession] = None
    received_at: datetime = Field(default_factory=datetime.utcnow)

    @classmethod
    def from_provider(cls, event: Any, session: Optional[AuthSession]) -> "SessionEvent":
        """Build from the provider's raw event name (str or enum)."""
        name = getattr(event, "value", event)
        return cls(event=AuthEventType(str(name)), session=session)


class NavigationIntent(BaseModel):
    """
    A request for the presentation layer to move to another path.

    The session holder never navigates itself; it returns these.
    """

    path: str
    reason: str = ""
    query: dict[str, str] = Field(default_factory=dict)

    @property
    def url(self) -> str:
        """Path with its query string encoded."""
        if not self.query:
            return self.path
        params = "&".join(f"{k}={quote(v, safe='')}" for k, v in self.query.items())
        return f"{self.path}?{params}"


class AuthResult(BaseModel):
    """Outcome of an auth service call. Never raises to the caller."""

    success: bool
    error: Optional[str] = None
    user: Optional[AuthUser] = None
    intent: Optional[NavigationIntent] = None
