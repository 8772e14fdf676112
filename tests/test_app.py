"""
Tests for the Streamlit app, driven through AppTest.

Every browser session built here gets its own FakeAuthBackend (as each
would get its own hosted client) over one shared row-store.
"""

from decimal import Decimal
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from finance_dashboard import orchestrator
from finance_dashboard.config import Settings
from tests.conftest import FakeAuthBackend, FakeRowStore, sample_tables

APP_PATH = str(Path(__file__).resolve().parent.parent / "app" / "main.py")


@pytest.fixture
def shared_store() -> FakeRowStore:
    return FakeRowStore(sample_tables())


@pytest.fixture
def auth_backends(monkeypatch, shared_store) -> list[FakeAuthBackend]:
    """Collects the auth backend of each session the app builds."""
    built: list[FakeAuthBackend] = []
    create = orchestrator.create_app_components

    def create_for_session(*args, **kwargs):
        auth = FakeAuthBackend()
        built.append(auth)
        return create(Settings(_env_file=None), auth_backend=auth, store=shared_store)

    monkeypatch.setattr(orchestrator, "create_app_components", create_for_session)
    return built


def open_app() -> AppTest:
    at = AppTest.from_file(APP_PATH, default_timeout=10)
    at.run()
    return at


def sign_in(at: AppTest, email: str = "ana@example.com", password: str = "secret123") -> None:
    at.text_input[0].input(email)
    at.text_input[1].input(password)
    next(b for b in at.button if b.label == "Sign in").click()
    at.run()


def go_to(at: AppTest, path: str, **query) -> None:
    at.session_state["path"] = path
    at.session_state["path_query"] = query
    at.run()


def titles(at: AppTest) -> list[str]:
    return [t.value for t in at.title]


class TestBrowserSessions:
    """Tests for per-session auth state."""

    def test_sign_in_opens_dashboard(self, auth_backends):
        at = open_app()
        assert "💰 Finance Dashboard" in titles(at)

        sign_in(at)

        assert not at.exception
        assert "📊 Dashboard" in titles(at)
        assert [c.value for c in at.sidebar.caption] == ["ana@example.com"]

    def test_second_visitor_is_not_signed_in(self, auth_backends):
        first = open_app()
        sign_in(first)
        second = open_app()

        assert len(auth_backends) == 2
        assert auth_backends[1].current is None
        assert "📊 Dashboard" in titles(first)
        assert "📊 Dashboard" not in titles(second)
        assert [c.value for c in second.sidebar.caption] == []

    def test_dashboard_requires_a_session(self, auth_backends):
        at = open_app()
        go_to(at, "/dashboard/debts")
        assert "📉 Debts" not in titles(at)
        assert at.session_state["path"] == "/sign-in"
        assert at.session_state["path_query"] == {"returnUrl": "/dashboard/debts"}


class TestRecordPages:
    """Tests for the account and debt pages."""

    def test_accounts_net_worth(self, auth_backends):
        at = open_app()
        sign_in(at)
        go_to(at, "/dashboard/accounts")

        metrics = {m.label: m.value for m in at.metric}
        # 5000 checking less the 2000 credit balance
        assert metrics["Net Worth"] == "$3,000.00"

    def test_debt_detail(self, auth_backends):
        at = open_app()
        sign_in(at)
        go_to(at, "/dashboard/debts/view", id="d-2")

        assert "Debt Details" in titles(at)
        metrics = {m.label: m.value for m in at.metric}
        assert metrics["Balance"] == "$1,500.00"
        assert "Time to Payoff" in metrics

    def test_missing_debt(self, auth_backends):
        at = open_app()
        sign_in(at)
        go_to(at, "/dashboard/debts/view", id="nope")
        assert at.error[0].value == "Debt not found."

    def test_edit_debt(self, auth_backends, shared_store):
        at = open_app()
        sign_in(at)
        go_to(at, "/dashboard/debts/edit", id="d-2")

        at.number_input(key="debt_d-2_amount").set_value(1200.0)
        next(b for b in at.button if b.label == "Save").click()
        at.run()

        row = next(r for r in shared_store.tables["debts"] if r["id"] == "d-2")
        assert Decimal(str(row["amount"])) == Decimal("1200")
        assert at.session_state["path"] == "/dashboard/debts/view"
