"""
Tests for Finance Dashboard models

Test strategy:
1. Unit tests for individual components (models, aggregations)
2. Page loaders and form actions against an in-memory backend
3. No real API calls in tests (use fakes)
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from pydantic import ValidationError

from finance_dashboard.models import (
    Account,
    Budget,
    BudgetProgress,
    Debt,
    DebtStrategy,
    EmergencyFund,
    NavigationIntent,
    Notice,
    NoticeBuilder,
    NoticeKind,
    NoticeLevel,
    Profile,
    SessionEvent,
    AuthEventType,
    Transaction,
    TransactionType,
)


class TestFinanceModels:
    """Tests for row models."""

    def test_account_normalizes_type_and_currency(self):
        """Type is lower-cased, currency upper-cased and defaulted."""
        account = Account(name="  Visa  ", type="Credit", value="150.25", currency=None)
        assert account.name == "Visa"
        assert account.type == "credit"
        assert account.is_credit
        assert account.currency == "USD"
        assert account.value == Decimal("150.25")

    def test_account_rejects_non_numeric_value(self):
        """Non-numeric balances never reach the aggregators."""
        with pytest.raises(ValidationError):
            Account(name="Cash", type="cash", value="lots")

    def test_transaction_accepts_any_case_type(self):
        """Type is case-insensitive on input."""
        t = Transaction(date="2025-05-12", type="EXPENSE", total="-10")
        assert t.type == TransactionType.EXPENSE
        assert t.is_expense and not t.is_income

    def test_transaction_accepts_timestamp_date(self):
        """Timestamps are cut down to the calendar date."""
        t = Transaction(date="2025-05-12T14:00:00+00:00", type="income", total="10")
        assert t.date == date(2025, 5, 12)

    def test_transaction_null_text_fields(self):
        """Null category and description become empty strings."""
        t = Transaction(date="2025-05-12", type="income", total="1", category=None, description=None)
        assert t.category == ""
        assert t.description == ""

    def test_transaction_month_accepts_both_forms(self):
        """Current rows carry YYYY-MM, older ones a month name."""
        assert Transaction(date="2025-05-12", type="income", total="1", month="2025-05").month == "2025-05"
        assert Transaction(date="2025-05-12", type="income", total="1", month="May").month == "May"

    def test_transaction_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            Transaction(date="2025-05-12", type="transfer", total="1")

    def test_budget_amount_cannot_be_negative(self):
        assert Budget(category="Dining", budget_amount=Decimal("0")).budget_amount == Decimal("0")
        with pytest.raises(ValidationError):
            Budget(category="Dining", budget_amount=Decimal("-1"))

    def test_budget_end_before_start(self):
        """End date cannot precede start date."""
        with pytest.raises(ValidationError):
            Budget(
                category="Dining",
                budget_amount=Decimal("100"),
                start_date=date(2025, 5, 31),
                end_date=date(2025, 5, 1),
            )

    def test_debt_defaults(self):
        """Null rate, payment and strategy fall back to defaults."""
        d = Debt(name="Loan", amount="100", interest_rate=None, min_payment=None, strategy=None)
        assert d.interest_rate == 0
        assert d.min_payment == 0
        assert d.strategy == DebtStrategy.AVALANCHE

    def test_debt_strategy_case_insensitive(self):
        assert Debt(name="Loan", amount="1", strategy="SNOWBALL").strategy == DebtStrategy.SNOWBALL

    def test_debt_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            Debt(name="Loan", amount="-1")

    def test_emergency_fund_target_months_bounds(self):
        with pytest.raises(ValidationError):
            EmergencyFund(goal_amount=Decimal("100"), target_months=0)

    def test_profile_preferences_alias(self):
        """Preferences are stored with camelCase keys."""
        profile = Profile(id="u1", currency="eur", preferences={"darkMode": True})
        assert profile.currency == "EUR"
        assert profile.preferences.dark_mode is True
        assert profile.preferences.notifications is True
        assert profile.model_dump(by_alias=True)["preferences"]["darkMode"] is True

    def test_profile_null_preferences(self):
        assert Profile(id="u1", preferences=None).preferences.dark_mode is False

    @pytest.mark.parametrize("percentage, status", [
        (50, "ok"),
        (76, "caution"),
        (91, "warning"),
        (101, "over"),
    ])
    def test_budget_progress_status(self, percentage, status):
        budget = Budget(category="Dining", budget_amount=Decimal("100"))
        assert BudgetProgress(budget=budget, percentage=percentage).status == status


class TestSessionModels:
    """Tests for session models."""

    def test_navigation_intent_url_encodes_query(self):
        intent = NavigationIntent(path="/sign-in", query={"returnUrl": "/dashboard/debts"})
        assert intent.url == "/sign-in?returnUrl=%2Fdashboard%2Fdebts"

    def test_navigation_intent_without_query(self):
        assert NavigationIntent(path="/dashboard").url == "/dashboard"

    def test_session_event_from_raw_name(self):
        event = SessionEvent.from_provider("SIGNED_OUT", None)
        assert event.event == AuthEventType.SIGNED_OUT
        assert event.session is None


class TestNoticeModels:
    """Tests for notice models."""

    def test_record_saved(self):
        notice = NoticeBuilder.record_saved("budgets", "Budget", entity_id="b-1")
        assert notice.kind == NoticeKind.RECORD_SAVED
        assert notice.level == NoticeLevel.SUCCESS
        assert notice.message == "Budget saved successfully!"
        assert not notice.is_error

    def test_save_failed(self):
        notice = NoticeBuilder.save_failed("debts", "Debt", "timeout")
        assert notice.is_error
        assert notice.message == "Failed to save debt. Please try again."
        assert notice.error_message == "timeout"

    def test_notice_to_log_dict(self):
        notice = NoticeBuilder.fetch_failed("transactions", "boom")
        log_dict = notice.to_log_dict()
        assert log_dict["kind"] == "fetch_failed"
        assert log_dict["level"] == "warning"
        assert log_dict["error_message"] == "boom"

    def test_notice_has_timestamp(self):
        notice = Notice(kind=NoticeKind.SIGNED_IN, level=NoticeLevel.INFO, message="Signed in.")
        assert isinstance(notice.timestamp, datetime)
