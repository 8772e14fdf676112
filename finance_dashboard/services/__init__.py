"""Services package."""

from finance_dashboard.services.backend import (
    AuthBackendInterface,
    AuthenticationError,
    AuthSubscription,
    BackendError,
    ConnectionError,
    NotFoundError,
    RowQuery,
    RowShapeError,
    RowStoreInterface,
    SupabaseAuthBackend,
    SupabaseClient,
    SupabaseRowStore,
)

__all__ = [
    "AuthBackendInterface",
    "AuthenticationError",
    "AuthSubscription",
    "BackendError",
    "ConnectionError",
    "NotFoundError",
    "RowQuery",
    "RowShapeError",
    "RowStoreInterface",
    "SupabaseAuthBackend",
    "SupabaseClient",
    "SupabaseRowStore",
]
