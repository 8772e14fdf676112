"""
Backend Services Package

Provides abstract interfaces for the hosted auth and row-store APIs and the
Supabase implementation of both.
"""

from finance_dashboard.services.backend.interface import (
    AuthBackendInterface,
    AuthenticationError,
    AuthSubscription,
    BackendError,
    ConnectionError,
    NotFoundError,
    RowQuery,
    RowShapeError,
    RowStoreInterface,
)
from finance_dashboard.services.backend.supabase_client import (
    SupabaseAuthBackend,
    SupabaseClient,
    SupabaseRowStore,
)

__all__ = [
    # Interfaces
    "AuthBackendInterface",
    "AuthSubscription",
    "RowQuery",
    "RowStoreInterface",
    # Exceptions
    "AuthenticationError",
    "BackendError",
    "ConnectionError",
    "NotFoundError",
    "RowShapeError",
    # Supabase implementation
    "SupabaseAuthBackend",
    "SupabaseClient",
    "SupabaseRowStore",
]
