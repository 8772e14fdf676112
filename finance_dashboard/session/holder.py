"""
Session State Holder

Holds the signed-in user in process memory and decides where the user
should be sent when the session changes.

DESIGN DECISION: the holder never navigates. Every redirect is returned
(and broadcast to listeners) as a NavigationIntent. The Streamlit layer
decides what to do with it. This keeps the transition rules testable
without a browser or a router.

State machine:
    uninitialized -> loading -> authenticated | unauthenticated
    authenticated -> unauthenticated   (sign-out or provider expiry)
"""

from typing import Callable, Optional

import structlog

from finance_dashboard.config import AppSettings
from finance_dashboard.models.session import (
    AuthEventType,
    AuthSession,
    AuthState,
    AuthUser,
    NavigationIntent,
    SessionEvent,
)
from finance_dashboard.services.backend import (
    AuthBackendInterface,
    AuthSubscription,
    BackendError,
)

logger = structlog.get_logger(__name__)

IntentListener = Callable[[NavigationIntent], None]


class SessionStateHolder:
    """
    Current session, current path and the rules that connect them.

    Typical lifecycle:
        holder = SessionStateHolder(auth_backend)
        await holder.mount()
        ...
        holder.unmount()
    """

    def __init__(
        self,
        auth: AuthBackendInterface,
        settings: Optional[AppSettings] = None,
    ):
        self._auth = auth
        self._settings = settings or AppSettings()
        self._state = AuthState.UNINITIALIZED
        self._user: Optional[AuthUser] = None
        self._session: Optional[AuthSession] = None
        self._subscription: Optional[AuthSubscription] = None
        self._listeners: list[IntentListener] = []
        self.current_path = "/"

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> Optional[AuthUser]:
        return self._user

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def is_loading(self) -> bool:
        return self._state in (AuthState.UNINITIALIZED, AuthState.LOADING)

    @property
    def is_authenticated(self) -> bool:
        return self._state == AuthState.AUTHENTICATED

    @property
    def is_mounted(self) -> bool:
        return self._subscription is not None and self._subscription.active

    # -------------------------------------------------------------------------
    # Path rules
    # -------------------------------------------------------------------------

    def is_public_path(self, path: str) -> bool:
        """'/' exactly, or anything under the sign-in and sign-up pages."""
        if path == "/":
            return True
        return path.startswith(self._settings.sign_in_path) or path.startswith(
            self._settings.sign_up_path
        )

    def is_protected_path(self, path: str) -> bool:
        return path.startswith(self._settings.dashboard_path)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def mount(self) -> AuthState:
        """
        Check for an existing session and subscribe to changes.

        A failure while checking is logged and treated as signed out.
        Mounting twice does not subscribe twice.
        """
        self._state = AuthState.LOADING
        await self.refresh_session()

        if not self.is_mounted:
            self._subscription = self._auth.on_auth_state_change(self._on_provider_event)

        logger.info("session_mounted", state=self._state.value)
        return self._state

    def unmount(self) -> None:
        """Stop listening to the provider. Safe to call more than once."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
            logger.info("session_unmounted")

    async def refresh_session(self) -> Optional[AuthSession]:
        """Re-read the session from the provider and apply it."""
        try:
            session = await self._auth.get_session()
        except BackendError as e:
            logger.warning("session_check_failed", error=str(e))
            session = None

        self._apply(session)
        return session

    async def sign_out(self) -> NavigationIntent:
        """
        Sign out and clear local state.

        Local state is cleared even if the provider call fails; the user
        asked to leave.
        """
        try:
            await self._auth.sign_out()
        except BackendError as e:
            logger.warning("sign_out_failed", error=str(e))

        user_id = self._user.id if self._user else None
        self._apply(None)
        logger.info("signed_out", user_id=user_id)

        return self._emit(NavigationIntent(
            path=self._settings.sign_in_path,
            reason="signed_out",
        ))

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def handle_event(
        self,
        event: SessionEvent,
        path: Optional[str] = None,
    ) -> Optional[NavigationIntent]:
        """
        Apply one auth-state change and return where to go, if anywhere.

        Rules:
        - a session while on a public path -> dashboard
        - no session, a SIGNED_OUT event, on a protected path -> sign-in
        - otherwise stay put
        """
        path = path if path is not None else self.current_path
        self._apply(event.session)

        if event.session is not None:
            if self.is_public_path(path):
                return NavigationIntent(
                    path=self._settings.dashboard_path,
                    reason="authenticated",
                )
            return None

        if event.event == AuthEventType.SIGNED_OUT and self.is_protected_path(path):
            return NavigationIntent(
                path=self._settings.sign_in_path,
                reason="signed_out",
            )
        return None

    def guard(self, path: Optional[str] = None) -> Optional[NavigationIntent]:
        """
        Gate a protected view.

        Returns an intent to sign-in carrying the requested path as
        returnUrl when the check has finished and nobody is signed in.
        """
        path = path if path is not None else self.current_path
        if self.is_loading or self._user is not None:
            return None
        return NavigationIntent(
            path=self._settings.sign_in_path,
            reason="authentication_required",
            query={"returnUrl": path},
        )

    def _apply(self, session: Optional[AuthSession]) -> None:
        self._session = session
        self._user = session.user if session else None
        self._state = AuthState.AUTHENTICATED if session else AuthState.UNAUTHENTICATED

    # -------------------------------------------------------------------------
    # Intent listeners
    # -------------------------------------------------------------------------

    def add_intent_listener(self, listener: IntentListener) -> Callable[[], None]:
        """Register a listener for intents; returns a function that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _on_provider_event(self, event: SessionEvent) -> None:
        logger.info(
            "auth_state_changed",
            auth_event=event.event.value,
            has_session=event.session is not None,
        )
        intent = self.handle_event(event)
        if intent is not None:
            self._emit(intent)

    def _emit(self, intent: NavigationIntent) -> NavigationIntent:
        for listener in list(self._listeners):
            try:
                listener(intent)
            except Exception as e:
                logger.error("intent_listener_failed", error=str(e), path=intent.path)
        return intent
