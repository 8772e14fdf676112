"""Session package: who is signed in and where they should be."""

from finance_dashboard.session.auth_service import AuthService
from finance_dashboard.session.holder import SessionStateHolder

__all__ = ["AuthService", "SessionStateHolder"]
