"""
Auth Service

Thin wrappers over the auth backend for the sign-in, sign-up,
forgot-password and callback pages. Every call returns an AuthResult
instead of raising, and reports its outcome to the notification center.
"""

from typing import Optional

import structlog

from finance_dashboard.config import AppSettings
from finance_dashboard.models.notice import NoticeBuilder
from finance_dashboard.models.session import AuthResult, NavigationIntent
from finance_dashboard.notifications import NotificationCenter
from finance_dashboard.services.backend import AuthBackendInterface, BackendError

logger = structlog.get_logger(__name__)

AUTH_CALLBACK_FAILED = "Authentication failed. Please try again."


class AuthService:
    """Sign-in, sign-up and related calls that never raise."""

    def __init__(
        self,
        auth: AuthBackendInterface,
        settings: Optional[AppSettings] = None,
        notifications: Optional[NotificationCenter] = None,
    ):
        self._auth = auth
        self._settings = settings or AppSettings()
        self._notifications = notifications

    def _failed(self, action: str, error: Exception, fallback: str) -> AuthResult:
        message = str(error) or fallback
        logger.warning("auth_call_failed", action=action, error=message)
        if self._notifications:
            self._notifications.publish(NoticeBuilder.auth_failed(action, message))
        return AuthResult(success=False, error=message)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        try:
            session = await self._auth.sign_in_with_password(email, password)
        except BackendError as e:
            return self._failed("sign in", e, "Failed to sign in")

        if self._notifications:
            self._notifications.publish(NoticeBuilder.signed_in(session.user.id))
        return AuthResult(
            success=True,
            user=session.user,
            intent=NavigationIntent(path=self._settings.dashboard_path, reason="signed_in"),
        )

    async def sign_up(
        self,
        email: str,
        password: str,
        redirect_to: Optional[str] = None,
    ) -> AuthResult:
        """
        Register. The confirmation email links back to the auth callback
        page unless `redirect_to` says otherwise.
        """
        redirect_to = redirect_to or self._settings.callback_url()
        try:
            user = await self._auth.sign_up(email, password, redirect_to=redirect_to)
        except BackendError as e:
            return self._failed("sign up", e, "Failed to sign up")

        logger.info("signed_up", user_id=user.id if user else None)
        return AuthResult(success=True, user=user)

    async def sign_out(self) -> AuthResult:
        try:
            await self._auth.sign_out()
        except BackendError as e:
            return self._failed("sign out", e, "Failed to sign out")

        if self._notifications:
            self._notifications.publish(NoticeBuilder.signed_out())
        return AuthResult(
            success=True,
            intent=NavigationIntent(path="/", reason="signed_out"),
        )

    async def check_auth(self) -> AuthResult:
        """success is True only when a session exists. Errors read as signed out."""
        try:
            session = await self._auth.get_session()
        except BackendError as e:
            logger.warning("auth_check_failed", error=str(e))
            return AuthResult(success=False)

        if session is None:
            return AuthResult(success=False)
        return AuthResult(success=True, user=session.user)

    async def get_current_user(self) -> AuthResult:
        try:
            user = await self._auth.get_user()
        except BackendError as e:
            return AuthResult(success=False, error=str(e) or "Failed to get user")

        if user is None:
            return AuthResult(success=False, error="Not signed in")
        return AuthResult(success=True, user=user)

    async def complete_auth_callback(self, code: Optional[str]) -> AuthResult:
        """
        Finish an email-link or OAuth sign-in.

        No code -> sign-in. A code that fails to exchange -> sign-in with an
        error message in the query. Success -> dashboard.
        """
        if not code:
            return AuthResult(
                success=False,
                intent=NavigationIntent(path=self._settings.sign_in_path, reason="missing_code"),
            )

        try:
            session = await self._auth.exchange_code_for_session(code)
        except BackendError as e:
            logger.warning("code_exchange_failed", error=str(e))
            return AuthResult(
                success=False,
                error=AUTH_CALLBACK_FAILED,
                intent=NavigationIntent(
                    path=self._settings.sign_in_path,
                    reason="code_exchange_failed",
                    query={"error": AUTH_CALLBACK_FAILED},
                ),
            )

        if self._notifications:
            self._notifications.publish(NoticeBuilder.signed_in(session.user.id))
        return AuthResult(
            success=True,
            user=session.user,
            intent=NavigationIntent(path=self._settings.dashboard_path, reason="signed_in"),
        )

    async def reset_password(
        self,
        email: str,
        redirect_to: Optional[str] = None,
    ) -> AuthResult:
        redirect_to = redirect_to or self._settings.callback_url()
        try:
            await self._auth.reset_password_for_email(email, redirect_to=redirect_to)
        except BackendError as e:
            return self._failed("send reset email", e, "Failed to send reset email")

        logger.info("password_reset_requested")
        return AuthResult(success=True)
