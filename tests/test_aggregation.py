"""
Tests for the aggregation functions.

All of these are pure: records in, derived values out.
"""

from datetime import date
from decimal import Decimal

import pytest

from finance_dashboard.aggregation import (
    average_monthly_expenses,
    budget_utilization,
    calculate_net_worth,
    debt_to_income_ratio,
    describe_payoff_time,
    emergency_fund_status,
    expenses_by_category,
    filter_month,
    group_accounts_by_type,
    monthly_trend,
    payoff_details,
    recent_transactions,
    signed_total,
    sort_debts,
    sort_debts_by,
    suggest_goal,
    summarize_budgets,
    summarize_debts,
    summarize_month,
    summarize_net_worth,
)
from finance_dashboard.aggregation.common import add_months
from finance_dashboard.models import (
    Account,
    Budget,
    Debt,
    DebtStrategy,
    EmergencyFund,
    Transaction,
    TransactionType,
)
from tests.conftest import TODAY, sample_tables


def account(type_, value):
    return Account(name=type_.title(), type=type_, value=Decimal(str(value)))


def tx(day, type_, total, category="Groceries"):
    return Transaction(date=day, type=type_, total=Decimal(str(total)), category=category)


def debt(name, amount, rate, min_payment, **extra):
    return Debt(
        name=name,
        amount=Decimal(str(amount)),
        interest_rate=Decimal(str(rate)),
        min_payment=Decimal(str(min_payment)),
        **extra,
    )


@pytest.fixture
def transactions():
    return [Transaction.model_validate(r) for r in sample_tables()["transactions"]]


class TestNetWorth:
    """Tests for net worth."""

    def test_mixed_accounts(self):
        accounts = [
            account("checking", 5000),
            account("savings", 10000),
            account("credit", 2000),
            account("investment", 15000),
        ]
        assert calculate_net_worth(accounts) == Decimal("28000")

    def test_negative_non_credit_is_not_clamped(self):
        accounts = [account("checking", -500), account("savings", 1000)]
        assert calculate_net_worth(accounts) == Decimal("500")

    def test_credit_counts_as_liability_whatever_the_sign(self):
        assert calculate_net_worth([account("credit", -2000)]) == Decimal("-2000")
        assert calculate_net_worth([account("Credit", 2000)]) == Decimal("-2000")

    def test_empty(self):
        assert calculate_net_worth([]) == 0

    def test_summary_splits_assets_and_liabilities(self):
        accounts = [account("checking", 5000), account("credit", 2000), account("checking", -500)]
        summary = summarize_net_worth(accounts)
        assert summary.total_assets == Decimal("5000")
        assert summary.total_liabilities == Decimal("2500")
        assert summary.net_worth == calculate_net_worth(accounts)

    def test_summary_counts_debts(self):
        accounts = [account("checking", 5000), account("credit", 2000), account("checking", -500)]
        summary = summarize_net_worth(accounts, [debt("Loan", 1000, 5, 50)])
        assert summary.total_liabilities == Decimal("3500")
        assert summary.net_worth == Decimal("1500")

    def test_group_by_type_keeps_order(self):
        a, b, c = account("savings", 1), account("checking", 2), account("savings", 3)
        groups = group_accounts_by_type([a, b, c])
        assert list(groups) == ["savings", "checking"]
        assert groups["savings"] == [a, c]


class TestTransactions:
    """Tests for transaction aggregations."""

    def test_signed_total(self):
        assert signed_total(TransactionType.EXPENSE, 50) == Decimal("-50")
        assert signed_total("expense", -50) == Decimal("-50")
        assert signed_total("Income", -50) == Decimal("50")

    def test_filter_month(self, transactions):
        assert {t.id for t in filter_month(transactions, TODAY)} == {"t-1", "t-2", "t-3"}

    def test_filter_month_stops_at_today(self):
        items = [tx(TODAY, "expense", -10), tx(date(2025, 5, 28), "expense", -90)]
        assert [t.total for t in filter_month(items, TODAY)] == [Decimal("-10")]
        assert summarize_month(items, TODAY).expenses == Decimal("10")
        assert monthly_trend(items, TODAY, months=1)[0].expenses == Decimal("10")

    def test_summarize_month(self, transactions):
        summary = summarize_month(transactions, TODAY)
        assert summary.income == Decimal("4000")
        assert summary.expenses == Decimal("375")
        assert summary.savings == Decimal("3625")
        assert summary.savings_rate == pytest.approx(90.6)

    def test_savings_rate_floors_at_zero(self):
        items = [tx(TODAY, "income", 100), tx(TODAY, "expense", -300)]
        assert summarize_month(items, TODAY).savings_rate == 0.0

    def test_savings_rate_without_income(self):
        assert summarize_month([tx(TODAY, "expense", -10)], TODAY).savings_rate == 0.0

    def test_monthly_trend(self, transactions):
        trend = monthly_trend(transactions, TODAY, months=6)
        assert [p.label for p in trend] == ["Dec", "Jan", "Feb", "Mar", "Apr", "May"]
        assert trend[0].year == 2024
        assert trend[-1].income == Decimal("4000")
        assert trend[-1].expenses == Decimal("375")
        assert trend[4].expenses == Decimal("80")
        assert trend[3].expenses == Decimal("45")

    def test_expenses_by_category(self):
        items = [
            tx(TODAY, "expense", -20, "Dining"),
            tx(TODAY, "expense", -50, "Rent"),
            tx(TODAY, "expense", -5, ""),
            tx(TODAY, "expense", -10, "Dining"),
            tx(TODAY, "income", 999, "Salary"),
            tx(date(2025, 4, 1), "expense", -500, "Rent"),
        ]
        result = expenses_by_category(items, TODAY)
        assert [(c.category, c.amount) for c in result] == [
            ("Rent", Decimal("50")),
            ("Dining", Decimal("30")),
            ("Uncategorized", Decimal("5")),
        ]

    def test_average_monthly_expenses(self, transactions):
        # Feb 1 through May 15: 250 + 125 + 80 + 45 over three months
        average = average_monthly_expenses(transactions, TODAY, months=3)
        assert average.quantize(Decimal("0.01")) == Decimal("166.67")

    def test_recent_transactions(self, transactions):
        recent = recent_transactions(transactions, limit=2)
        assert [t.id for t in recent] == ["t-3", "t-2"]


class TestBudgets:
    """Tests for budget utilization."""

    def test_percentage(self, transactions):
        budget = Budget(category="Groceries", budget_amount=Decimal("500"))
        progress = budget_utilization(budget, transactions, TODAY)
        assert progress.spent_amount == Decimal("375")
        assert progress.percentage == 75
        assert progress.remaining == Decimal("125")
        assert progress.status == "ok"

    def test_only_current_month_counts(self, transactions):
        budget = Budget(category="Dining", budget_amount=Decimal("200"))
        assert budget_utilization(budget, transactions, TODAY).percentage == 0

    def test_later_dated_expense_waits(self):
        budget = Budget(category="Fun", budget_amount=Decimal("100"))
        items = [tx(TODAY, "expense", -40, "Fun"), tx(date(2025, 5, 30), "expense", -60, "Fun")]
        assert budget_utilization(budget, items, TODAY).percentage == 40

    def test_zero_budget(self):
        budget = Budget(category="Fun", budget_amount=Decimal("0"))
        progress = budget_utilization(budget, [tx(TODAY, "expense", -40, "Fun")], TODAY)
        assert progress.spent_amount == Decimal("40")
        assert progress.percentage == 0

    def test_over_budget(self):
        budget = Budget(category="Fun", budget_amount=Decimal("100"))
        progress = budget_utilization(budget, [tx(TODAY, "expense", -150, "fun")], TODAY)
        assert progress.percentage == 150
        assert progress.status == "over"

    def test_rounds_half_up(self):
        budget = Budget(category="Fun", budget_amount=Decimal("200"))
        progress = budget_utilization(budget, [tx(TODAY, "expense", -181, "Fun")], TODAY)
        assert progress.percentage == 91
        assert progress.status == "warning"

    def test_is_pure(self, transactions):
        budget = Budget(category="Groceries", budget_amount=Decimal("500"))
        first = budget_utilization(budget, transactions, TODAY)
        second = budget_utilization(budget, transactions, TODAY)
        assert first == second

    def test_summary_sorted_by_percentage(self, transactions):
        budgets = [
            Budget(category="Dining", budget_amount=Decimal("200")),
            Budget(category="Groceries", budget_amount=Decimal("500")),
        ]
        overview = summarize_budgets(budgets, transactions, TODAY)
        assert [p.budget.category for p in overview.budgets] == ["Groceries", "Dining"]
        assert overview.total_budget == Decimal("700")
        assert overview.total_spent == Decimal("375")
        assert overview.remaining == Decimal("325")


class TestDebts:
    """Tests for debt ordering and payoff estimates."""

    @pytest.fixture
    def debts(self):
        return [
            debt("Car", 10000, 5, 300, due_date=date(2025, 6, 1)),
            debt("Card", 3000, 22, 90),
            debt("Student", 800, 4, 50, due_date=date(2025, 5, 20)),
        ]

    def test_avalanche(self, debts):
        assert [d.name for d in sort_debts(debts, DebtStrategy.AVALANCHE)] == ["Card", "Car", "Student"]

    def test_snowball(self, debts):
        assert [d.name for d in sort_debts(debts, "snowball")] == ["Student", "Card", "Car"]

    def test_sort_by_keys(self, debts):
        assert [d.name for d in sort_debts_by(debts, "balance")] == ["Car", "Card", "Student"]
        assert [d.name for d in sort_debts_by(debts, "name")] == ["Car", "Card", "Student"]
        assert [d.name for d in sort_debts_by(debts, "due_date")] == ["Student", "Car", "Card"]

    def test_sort_by_unknown_key(self, debts):
        with pytest.raises(ValueError):
            sort_debts_by(debts, "colour")

    def test_summary(self):
        debts = [debt("Car loan", 10000, 5, 300), debt("Card", 1500, 22, 60)]
        summary = summarize_debts(debts, TODAY)
        assert summary.total_debt == Decimal("11500")
        assert summary.total_min_payment == Decimal("360")
        assert summary.yearly_interest == Decimal("830.00")
        assert summary.months_to_payoff == 40
        assert summary.estimated_payoff_date == date(2028, 9, 15)

    def test_summary_zero_rate_falls_back_to_division(self):
        summary = summarize_debts([debt("Friend", 1200, 0, 100)], TODAY)
        assert summary.months_to_payoff == 12

    def test_summary_payment_below_interest_falls_back(self):
        summary = summarize_debts([debt("Bad", 10000, 24, 100)], TODAY)
        assert summary.months_to_payoff == 100

    def test_summary_without_payments(self):
        summary = summarize_debts([debt("Frozen", 500, 3, 0)], TODAY)
        assert summary.months_to_payoff is None
        assert summary.estimated_payoff_date is None

    def test_payoff_without_interest(self):
        details = payoff_details(debt("Friend", 1000, 0, 100), TODAY)
        assert details.months == 10
        assert details.total_interest == Decimal("0.00")
        assert details.payoff_date == date(2026, 3, 15)
        assert not details.capped

    def test_payoff_with_interest(self):
        details = payoff_details(debt("Short", 1000, 12, 500), TODAY)
        assert details.months == 3
        assert details.total_interest == Decimal("15.25")

    def test_payoff_is_capped(self):
        details = payoff_details(debt("Never", 1000, 24, 10), TODAY)
        assert details.months == 1200
        assert details.capped

    def test_describe_payoff_time(self):
        assert describe_payoff_time(debt("A", 1000, 0, 100)) == "10 months"
        assert describe_payoff_time(debt("B", 1200, 0, 100)) == "1 year"
        assert describe_payoff_time(debt("C", 1300, 0, 100)) == "1 year, 1 month"
        assert describe_payoff_time(debt("D", 1000, 0, 0)) == "N/A"
        assert describe_payoff_time(debt("E", 1000, 24, 10)) == "Never (payment too low)"
        assert describe_payoff_time(debt("F", 100000, 0, 10)) == "30+ years"

    def test_debt_to_income(self):
        debts = [debt("Car loan", 10000, 5, 300), debt("Card", 1500, 22, 60)]
        assert debt_to_income_ratio(debts, 4000) == Decimal("9.0")
        assert debt_to_income_ratio(debts, 0) == 0

    def test_add_months_clamps_day(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2025, 1, 15), -2) == date(2024, 11, 15)


class TestEmergencyFund:
    """Tests for emergency fund progress."""

    def test_status(self):
        fund = EmergencyFund(goal_amount=Decimal("6000"), current_amount=Decimal("1500"))
        status = emergency_fund_status(fund, Decimal("500"))
        assert status.progress_percentage == 25
        assert status.months_covered == 3.0
        assert status.remaining == Decimal("4500")
        assert not status.goal_reached

    def test_progress_is_capped(self):
        fund = EmergencyFund(goal_amount=Decimal("1000"), current_amount=Decimal("1500"), target_months=3)
        status = emergency_fund_status(fund, Decimal("500"))
        assert status.progress_percentage == 100
        assert status.remaining == 0
        assert status.goal_reached

    def test_no_expenses(self):
        fund = EmergencyFund(goal_amount=Decimal("1000"), current_amount=Decimal("100"))
        assert emergency_fund_status(fund, 0).months_covered == 0.0

    def test_months_covered_one_decimal(self):
        fund = EmergencyFund(goal_amount=Decimal("1000"), current_amount=Decimal("1000"))
        assert emergency_fund_status(fund, Decimal("300")).months_covered == 3.3

    def test_suggest_goal(self):
        assert suggest_goal(Decimal("500") / 3, 6) == Decimal("1000")
        assert suggest_goal(Decimal("1234.4"), 3) == Decimal("3703")
