"""
Supabase Backend Implementation

Supabase provides both halves of the hosted backend: GoTrue for auth and
PostgREST for the row-store. One client object serves both, so it is
built once by SupabaseClient and shared by the two adapters below.

The client library is synchronous. The adapters expose the async interfaces
anyway so that pages await every backend call the same way.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

import structlog
from supabase import Client, ClientOptions, create_client

from finance_dashboard.config import SupabaseSettings, get_settings
from finance_dashboard.models.session import AuthSession, AuthUser, SessionEvent
from finance_dashboard.services.backend.interface import (
    AuthBackendInterface,
    AuthenticationError,
    AuthSubscription,
    BackendError,
    ConnectionError,
    RowQuery,
    RowStoreInterface,
)


logger = structlog.get_logger(__name__)


def _error_message(error: Exception) -> str:
    """PostgREST and GoTrue errors carry a `message`; fall back to str()."""
    return getattr(error, "message", None) or str(error)


def _to_json_value(value: Any) -> Any:
    """Convert a Python value to something the REST API accepts."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    return value


def _to_user(user: Any) -> Optional[AuthUser]:
    if user is None:
        return None
    return AuthUser(
        id=str(user.id),
        email=getattr(user, "email", None),
        created_at=getattr(user, "created_at", None),
        updated_at=getattr(user, "updated_at", None),
    )


def _to_session(session: Any) -> Optional[AuthSession]:
    if session is None or getattr(session, "user", None) is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_at=getattr(session, "expires_at", None),
        user=_to_user(session.user),
    )


class SupabaseClient:
    """
    Owner of the single Supabase client object.

    Construction is lazy. Two callers racing the first connect() may each
    build a client; the loser's is discarded, which is harmless because
    building one has no side effects.
    """

    def __init__(self, settings: Optional[SupabaseSettings] = None):
        self._settings = settings or get_settings().supabase
        self._client: Optional[Client] = None

    def connect(self) -> Client:
        """Build the client on first use and return it."""
        if self._client is None:
            try:
                self._client = create_client(
                    self._settings.url,
                    self._settings.anon_key,
                    options=ClientOptions(
                        headers={"x-client-info": self._settings.client_info},
                        auto_refresh_token=True,
                        persist_session=True,
                    ),
                )
            except Exception as e:
                raise ConnectionError(f"Failed to create backend client: {_error_message(e)}")
            logger.info("backend_client_created", url=self._settings.url)
        return self._client


class SupabaseAuthBackend(AuthBackendInterface):
    """Authentication through the Supabase auth (GoTrue) API."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or SupabaseClient()

    @property
    def _auth(self):
        return self._client.connect().auth

    async def get_session(self) -> Optional[AuthSession]:
        try:
            return _to_session(self._auth.get_session())
        except Exception as e:
            raise AuthenticationError(f"Failed to get session: {_error_message(e)}")

    async def get_user(self) -> Optional[AuthUser]:
        try:
            response = self._auth.get_user()
        except Exception as e:
            raise AuthenticationError(f"Failed to get user: {_error_message(e)}")
        if response is None:
            return None
        return _to_user(response.user)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        try:
            response = self._auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            raise AuthenticationError(_error_message(e), code=getattr(e, "code", None))
        session = _to_session(response.session)
        if session is None:
            raise AuthenticationError("Sign in did not return a session")
        return session

    async def sign_up(
        self,
        email: str,
        password: str,
        redirect_to: Optional[str] = None,
    ) -> Optional[AuthUser]:
        credentials: dict[str, Any] = {"email": email, "password": password}
        if redirect_to:
            credentials["options"] = {"email_redirect_to": redirect_to}
        try:
            response = self._auth.sign_up(credentials)
        except Exception as e:
            raise AuthenticationError(_error_message(e), code=getattr(e, "code", None))
        return _to_user(response.user)

    async def sign_out(self) -> None:
        try:
            self._auth.sign_out()
        except Exception as e:
            raise AuthenticationError(f"Failed to sign out: {_error_message(e)}")

    async def exchange_code_for_session(self, code: str) -> AuthSession:
        try:
            response = self._auth.exchange_code_for_session({"auth_code": code})
        except Exception as e:
            raise AuthenticationError(_error_message(e), code=getattr(e, "code", None))
        session = _to_session(response.session)
        if session is None:
            raise AuthenticationError("Code exchange did not return a session")
        return session

    async def reset_password_for_email(
        self,
        email: str,
        redirect_to: Optional[str] = None,
    ) -> None:
        options = {"redirect_to": redirect_to} if redirect_to else {}
        try:
            self._auth.reset_password_for_email(email, options)
        except Exception as e:
            raise AuthenticationError(_error_message(e), code=getattr(e, "code", None))

    def on_auth_state_change(
        self,
        callback: Callable[[SessionEvent], None],
    ) -> AuthSubscription:
        def _on_change(event: Any, session: Any) -> None:
            callback(SessionEvent.from_provider(event, _to_session(session)))

        try:
            subscription = self._auth.on_auth_state_change(_on_change)
        except Exception as e:
            raise AuthenticationError(f"Failed to subscribe to auth changes: {_error_message(e)}")
        return AuthSubscription(subscription.unsubscribe)


class SupabaseRowStore(RowStoreInterface):
    """
    Row-store access through the Supabase REST (PostgREST) API.

    Row-level security on the hosted side scopes rows to the signed-in
    user; pages still filter on user_id where the table has that column.
    """

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or SupabaseClient()

    def _table(self, table: str):
        return self._client.connect().table(table)

    async def select(self, query: RowQuery) -> list[dict]:
        try:
            builder = self._table(query.table).select(query.columns)
            for column, value in query.eq.items():
                builder = builder.eq(column, _to_json_value(value))
            for column, value in query.gte.items():
                builder = builder.gte(column, _to_json_value(value))
            for column, value in query.lte.items():
                builder = builder.lte(column, _to_json_value(value))
            for column in query.not_null:
                builder = builder.not_.is_(column, "null")
            if query.order_by:
                builder = builder.order(query.order_by, desc=not query.ascending)
            if query.limit:
                builder = builder.limit(query.limit)
            response = builder.execute()
        except Exception as e:
            raise BackendError(
                f"Failed to select from {query.table}: {_error_message(e)}",
                code=getattr(e, "code", None),
            )
        return list(response.data or [])

    async def insert(self, table: str, values: dict) -> list[dict]:
        try:
            response = self._table(table).insert(_to_json_value(values)).execute()
        except Exception as e:
            raise BackendError(
                f"Failed to insert into {table}: {_error_message(e)}",
                code=getattr(e, "code", None),
            )
        return list(response.data or [])

    async def update(self, table: str, values: dict, match: dict) -> list[dict]:
        if not match:
            raise ValueError("Refusing to update without a filter")
        try:
            builder = self._table(table).update(_to_json_value(values))
            for column, value in match.items():
                builder = builder.eq(column, _to_json_value(value))
            response = builder.execute()
        except Exception as e:
            raise BackendError(
                f"Failed to update {table}: {_error_message(e)}",
                code=getattr(e, "code", None),
            )
        return list(response.data or [])

    async def delete(self, table: str, match: dict) -> list[dict]:
        if not match:
            raise ValueError("Refusing to delete without a filter")
        try:
            builder = self._table(table).delete()
            for column, value in match.items():
                builder = builder.eq(column, _to_json_value(value))
            response = builder.execute()
        except Exception as e:
            raise BackendError(
                f"Failed to delete from {table}: {_error_message(e)}",
                code=getattr(e, "code", None),
            )
        return list(response.data or [])
