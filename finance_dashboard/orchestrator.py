"""
Composition Root for Finance Dashboard

Builds every long-lived component exactly once and wires them together:

    settings -> backend client -> auth backend + row-store
             -> session holder, auth service, page loaders, form actions

DESIGN DECISION: nothing below this module constructs its own backend
client. Each component receives its collaborators here, so tests can hand
in fakes and the app holds exactly one connection.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from finance_dashboard.config import Settings, get_settings
from finance_dashboard.notifications import NotificationCenter
from finance_dashboard.queries import FormActions, PageLoaders
from finance_dashboard.services.backend import (
    AuthBackendInterface,
    RowStoreInterface,
    SupabaseAuthBackend,
    SupabaseClient,
    SupabaseRowStore,
)
from finance_dashboard.session import AuthService, SessionStateHolder


@dataclass
class AppComponents:
    """Everything the UI needs, built once per process."""

    settings: Settings
    client: Optional[SupabaseClient]
    auth_backend: AuthBackendInterface
    store: RowStoreInterface
    notifications: NotificationCenter
    session: SessionStateHolder
    auth: AuthService
    loaders: PageLoaders
    forms: FormActions


def configure_logging(level: str) -> None:
    """Route structlog through stdlib logging at the configured level."""
    logging.basicConfig(format="%(message)s", level=level.upper())


def create_app_components(
    settings: Optional[Settings] = None,
    auth_backend: Optional[AuthBackendInterface] = None,
    store: Optional[RowStoreInterface] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Defaults to the cached environment settings
        auth_backend: Override the hosted auth API (tests)
        store: Override the hosted row-store (tests)

    Returns:
        AppComponents sharing one backend client
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    client = None
    if auth_backend is None or store is None:
        client = SupabaseClient(settings.supabase)
        auth_backend = auth_backend or SupabaseAuthBackend(client)
        store = store or SupabaseRowStore(client)

    notifications = NotificationCenter(max_pending=settings.app.notice_queue_size)

    return AppComponents(
        settings=settings,
        client=client,
        auth_backend=auth_backend,
        store=store,
        notifications=notifications,
        session=SessionStateHolder(auth_backend, settings.app),
        auth=AuthService(auth_backend, settings.app, notifications),
        loaders=PageLoaders(store, settings.app, notifications),
        forms=FormActions(store, notifications),
    )
