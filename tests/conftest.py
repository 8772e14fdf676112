"""
Shared fixtures.

The hosted backend is replaced by two in-memory fakes that implement the
same interfaces. No test makes a network call.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional
from uuid import uuid4

import pytest

from finance_dashboard.config import AppSettings
from finance_dashboard.models import AuthEventType, AuthSession, AuthUser, SessionEvent
from finance_dashboard.notifications import NotificationCenter
from finance_dashboard.queries import FormActions, PageLoaders
from finance_dashboard.services.backend import (
    AuthBackendInterface,
    AuthenticationError,
    AuthSubscription,
    BackendError,
    RowQuery,
    RowStoreInterface,
)

TODAY = date(2025, 5, 15)
USER_ID = "user-1"


def _norm(value: Any) -> Any:
    """Comparable form of a stored or queried value."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    return value


class FakeRowStore(RowStoreInterface):
    """
    In-memory row-store.

    `fail` holds (operation, table) pairs that raise BackendError,
    e.g. {("select", "budgets")}.
    """

    def __init__(self, tables: Optional[dict[str, list[dict]]] = None):
        self.tables: dict[str, list[dict]] = {k: [dict(r) for r in v] for k, v in (tables or {}).items()}
        self.fail: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def _check(self, op: str, table: str) -> None:
        self.calls.append((op, table))
        if (op, table) in self.fail:
            raise BackendError(f"{op} on {table} failed")

    @staticmethod
    def _matches(row: dict, match: dict) -> bool:
        return all(_norm(row.get(k)) == _norm(v) for k, v in match.items())

    async def select(self, query: RowQuery) -> list[dict]:
        self._check("select", query.table)
        rows = [r for r in self.tables.get(query.table, []) if self._matches(r, query.eq)]
        rows = [r for r in rows if all(_norm(r.get(k)) >= _norm(v) for k, v in query.gte.items())]
        rows = [r for r in rows if all(_norm(r.get(k)) <= _norm(v) for k, v in query.lte.items())]
        rows = [r for r in rows if all(r.get(c) is not None for c in query.not_null)]
        if query.order_by:
            rows.sort(key=lambda r: _norm(r.get(query.order_by)) or "", reverse=not query.ascending)
        if query.limit:
            rows = rows[:query.limit]
        if query.columns != "*":
            wanted = [c.strip() for c in query.columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        return [dict(r) for r in rows]

    async def insert(self, table: str, values: dict) -> list[dict]:
        self._check("insert", table)
        row = dict(values)
        row.setdefault("id", str(uuid4()))
        if row.get("created_at") is None:
            row["created_at"] = datetime.now(timezone.utc).isoformat()
        self.tables.setdefault(table, []).append(row)
        return [dict(row)]

    async def update(self, table: str, values: dict, match: dict) -> list[dict]:
        self._check("update", table)
        updated = []
        for row in self.tables.get(table, []):
            if self._matches(row, match):
                row.update(values)
                updated.append(dict(row))
        return updated

    async def delete(self, table: str, match: dict) -> list[dict]:
        self._check("delete", table)
        rows = self.tables.get(table, [])
        removed = [r for r in rows if self._matches(r, match)]
        self.tables[table] = [r for r in rows if not self._matches(r, match)]
        return removed


class FakeAuthBackend(AuthBackendInterface):
    """In-memory auth provider with one registered user."""

    def __init__(self, email: str = "ana@example.com", password: str = "secret123"):
        self.users = {email: (password, AuthUser(id=USER_ID, email=email))}
        self.current: Optional[AuthSession] = None
        self.callbacks: list[Callable[[SessionEvent], None]] = []
        self.fail_get_session = False
        self.fail_sign_out = False
        self.valid_codes: set[str] = {"good-code"}
        self.reset_requests: list[tuple[str, Optional[str]]] = []
        self.sign_up_redirects: list[Optional[str]] = []

    def session_for(self, user: AuthUser) -> AuthSession:
        return AuthSession(access_token=f"token-{user.id}", user=user)

    def fire(self, event: AuthEventType, session: Optional[AuthSession]) -> None:
        for callback in list(self.callbacks):
            callback(SessionEvent.from_provider(event, session))

    async def get_session(self) -> Optional[AuthSession]:
        if self.fail_get_session:
            raise AuthenticationError("session lookup failed")
        return self.current

    async def get_user(self) -> Optional[AuthUser]:
        return self.current.user if self.current else None

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        stored = self.users.get(email)
        if stored is None or stored[0] != password:
            raise AuthenticationError("Invalid login credentials")
        self.current = self.session_for(stored[1])
        self.fire(AuthEventType.SIGNED_IN, self.current)
        return self.current

    async def sign_up(self, email: str, password: str, redirect_to: Optional[str] = None) -> Optional[AuthUser]:
        if email in self.users:
            raise AuthenticationError("User already registered")
        user = AuthUser(id=str(uuid4()), email=email)
        self.users[email] = (password, user)
        self.sign_up_redirects.append(redirect_to)
        return user

    async def sign_out(self) -> None:
        if self.fail_sign_out:
            raise AuthenticationError("sign out failed")
        self.current = None
        self.fire(AuthEventType.SIGNED_OUT, None)

    async def exchange_code_for_session(self, code: str) -> AuthSession:
        if code not in self.valid_codes:
            raise AuthenticationError("invalid code")
        _, user = next(iter(self.users.values()))
        self.current = self.session_for(user)
        return self.current

    async def reset_password_for_email(self, email: str, redirect_to: Optional[str] = None) -> None:
        self.reset_requests.append((email, redirect_to))

    def on_auth_state_change(self, callback: Callable[[SessionEvent], None]) -> AuthSubscription:
        self.callbacks.append(callback)
        return AuthSubscription(lambda: self.callbacks.remove(callback))


def sample_tables() -> dict[str, list[dict]]:
    """A small, realistic data set for one user in May 2025."""
    return {
        "accounts": [
            {"id": "acc-1", "user_id": USER_ID, "name": "Checking", "type": "checking",
             "value": "5000", "currency": "USD"},
            {"id": "acc-2", "user_id": USER_ID, "name": "Visa", "type": "Credit",
             "value": "2000", "currency": "usd"},
            {"id": "acc-3", "user_id": "someone-else", "name": "Other", "type": "savings",
             "value": "99999"},
        ],
        "transactions": [
            {"id": "t-1", "user_id": USER_ID, "account_id": "acc-1", "date": "2025-05-02",
             "month": "2025-05", "type": "Income", "category": "Salary",
             "description": "Paycheck", "total": "4000"},
            {"id": "t-2", "user_id": USER_ID, "account_id": "acc-1", "date": "2025-05-05",
             "month": "2025-05", "type": "expense", "category": "Groceries",
             "description": "Market", "total": "-250"},
            {"id": "t-3", "user_id": USER_ID, "account_id": "acc-2", "date": "2025-05-10",
             "month": "2025-05", "type": "expense", "category": "groceries",
             "description": "Bakery", "total": "-125"},
            {"id": "t-4", "user_id": USER_ID, "account_id": "acc-1", "date": "2025-04-20",
             "month": "2025-04", "type": "expense", "category": "Dining",
             "description": "Dinner", "total": "-80"},
            {"id": "t-5", "user_id": USER_ID, "account_id": "gone", "date": "2025-03-03",
             "month": "2025-03", "type": "expense", "category": None,
             "description": "Misc", "total": "-45"},
        ],
        "budgets": [
            {"id": "b-1", "user_id": USER_ID, "category": "Groceries", "budget_amount": "500",
             "start_date": "2025-05-01", "end_date": "2025-05-31"},
            {"id": "b-2", "user_id": USER_ID, "category": "Dining", "budget_amount": "200"},
        ],
        "debts": [
            {"id": "d-1", "user_id": USER_ID, "name": "Car loan", "amount": "10000",
             "interest_rate": "5", "min_payment": "300", "strategy": "avalanche"},
            {"id": "d-2", "user_id": USER_ID, "name": "Card", "amount": "1500",
             "interest_rate": "22", "min_payment": "60", "strategy": "Snowball"},
        ],
        "emergency_fund": [
            {"id": "e-1", "user_id": USER_ID, "goal_amount": "3000", "current_amount": "1000",
             "target_months": 6, "created_at": "2025-01-01T00:00:00+00:00"},
            {"id": "e-2", "user_id": USER_ID, "goal_amount": "6000", "current_amount": "1500",
             "target_months": 6, "created_at": "2025-03-01T00:00:00+00:00"},
        ],
        "profiles": [],
    }


@pytest.fixture
def store() -> FakeRowStore:
    return FakeRowStore(sample_tables())


@pytest.fixture
def auth() -> FakeAuthBackend:
    return FakeAuthBackend()


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings()


@pytest.fixture
def loaders(store, app_settings, notifications) -> PageLoaders:
    return PageLoaders(store, app_settings, notifications)


@pytest.fixture
def forms(store, notifications) -> FormActions:
    return FormActions(store, notifications)
