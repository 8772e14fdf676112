"""
Abstract Backend Interfaces

The hosted backend gives us two APIs: authentication and a row-store. We
define an abstract interface for each so that:
1. Pages and the session holder never touch the client library directly
2. Tests can inject a hand-rolled fake
3. The one real client is built once and passed in

The interface is intentionally small: the handful of calls the pages make,
nothing more.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from finance_dashboard.models.session import AuthSession, AuthUser, SessionEvent


class RowQuery(BaseModel):
    """
    A select against one table.

    Mirrors the subset of the row-store query builder the pages use:
    projection, equality/range/not-null filters, ordering and a limit.
    """

    table: str = Field(..., min_length=1)
    columns: str = "*"
    eq: dict[str, Any] = Field(default_factory=dict)
    gte: dict[str, Any] = Field(default_factory=dict)
    lte: dict[str, Any] = Field(default_factory=dict)
    not_null: list[str] = Field(default_factory=list)
    order_by: Optional[str] = None
    ascending: bool = True
    limit: Optional[int] = Field(default=None, ge=1)

    def describe(self) -> str:
        """Human-readable description for logs."""
        parts = [f"{self.table}({self.columns})"]
        for op, filters in (("=", self.eq), (">=", self.gte), ("<=", self.lte)):
            parts.extend(f"{k}{op}{v}" for k, v in filters.items())
        parts.extend(f"{col} not null" for col in self.not_null)
        if self.order_by:
            parts.append(f"order {self.order_by} {'asc' if self.ascending else 'desc'}")
        if self.limit:
            parts.append(f"limit {self.limit}")
        return " | ".join(parts)


class AuthSubscription:
    """Handle returned by `on_auth_state_change`. Unsubscribing twice is a no-op."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._unsubscribe()


class AuthBackendInterface(ABC):
    """
    Abstract interface for the hosted authentication API.
    """

    @abstractmethod
    async def get_session(self) -> Optional[AuthSession]:
        """
        Return the current session, or None when signed out.

        Raises:
            AuthenticationError: If the provider call fails
        """
        pass

    @abstractmethod
    async def get_user(self) -> Optional[AuthUser]:
        """
        Return the current user, validated against the provider.

        Raises:
            AuthenticationError: If the provider call fails
        """
        pass

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Raises:
            AuthenticationError: On bad credentials or provider failure
        """
        pass

    @abstractmethod
    async def sign_up(
        self,
        email: str,
        password: str,
        redirect_to: Optional[str] = None,
    ) -> Optional[AuthUser]:
        """
        Register a new user. The provider may require email confirmation,
        in which case no session exists yet.

        Args:
            email: New user's email
            password: New user's password
            redirect_to: Where the confirmation link should land

        Raises:
            AuthenticationError: If registration fails
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """
        End the current session.

        Raises:
            AuthenticationError: If the provider call fails
        """
        pass

    @abstractmethod
    async def exchange_code_for_session(self, code: str) -> AuthSession:
        """
        Exchange an authorization code (from an email link or OAuth redirect)
        for a session.

        Raises:
            AuthenticationError: If the code is invalid or expired
        """
        pass

    @abstractmethod
    async def reset_password_for_email(
        self,
        email: str,
        redirect_to: Optional[str] = None,
    ) -> None:
        """
        Send a password reset email.

        Raises:
            AuthenticationError: If the provider call fails
        """
        pass

    @abstractmethod
    def on_auth_state_change(
        self,
        callback: Callable[[SessionEvent], None],
    ) -> AuthSubscription:
        """
        Subscribe to auth-state change notifications.

        Args:
            callback: Called with each SessionEvent

        Returns:
            A subscription handle; call unsubscribe() on teardown
        """
        pass


class RowStoreInterface(ABC):
    """
    Abstract interface for the hosted row-store.

    Rows come back as plain dicts; callers validate them into models.
    """

    @abstractmethod
    async def select(self, query: RowQuery) -> list[dict]:
        """
        Run a select.

        Returns:
            Matching rows (possibly empty)

        Raises:
            BackendError: If the query fails
        """
        pass

    @abstractmethod
    async def insert(self, table: str, values: dict) -> list[dict]:
        """
        Insert one row.

        Returns:
            The inserted row(s) as returned by the backend

        Raises:
            BackendError: If the insert fails
        """
        pass

    @abstractmethod
    async def update(self, table: str, values: dict, match: dict) -> list[dict]:
        """
        Update rows whose columns equal every value in `match`.

        Returns:
            The updated rows

        Raises:
            BackendError: If the update fails
        """
        pass

    @abstractmethod
    async def delete(self, table: str, match: dict) -> list[dict]:
        """
        Delete rows whose columns equal every value in `match`.

        Returns:
            The deleted rows

        Raises:
            BackendError: If the delete fails
        """
        pass


class BackendError(Exception):
    """Base exception for hosted backend operations."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.code = code
        super().__init__(message)


class NotFoundError(BackendError):
    """Row not found."""
    pass


class AuthenticationError(BackendError):
    """The auth provider rejected or failed a call."""
    pass


class ConnectionError(BackendError):
    """Could not build or reach the backend client."""
    pass


class RowShapeError(BackendError):
    """A fetched row does not match the expected record shape."""

    def __init__(self, table: str, index: int, errors: list[dict]):
        self.table = table
        self.index = index
        self.errors = errors
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ())) for e in errors)
        super().__init__(f"Row {index} from '{table}' has an invalid shape: {fields}")
