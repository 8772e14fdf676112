"""Budget utilization."""

from datetime import date
from typing import Iterable, Optional, Sequence

from finance_dashboard.aggregation.common import ZERO, percentage
from finance_dashboard.aggregation.transactions import filter_month
from finance_dashboard.models.finance import (
    Budget,
    BudgetOverview,
    BudgetProgress,
    Transaction,
)


def budget_utilization(
    budget: Budget,
    transactions: Iterable[Transaction],
    today: Optional[date] = None
) -> BudgetProgress:
    """
    How much of `budget` this month's matching expenses have used.

    Matching is by category, ignoring case. Only expenses dated from the
    first of the month through `today` count. The percentage is rounded
    half-up and may exceed 100.
    """
    # Case-insensitive, unlike an exact string match: "groceries" counts toward "Groceries"
    category = budget.category.casefold()
    spent = ZERO
    for t in filter_month(transactions, today):
        if t.is_expense and t.category.casefold() == category:
            spent += abs(t.total)

    return BudgetProgress(
        budget=budget,
        spent_amount=spent,
        percentage=percentage(spent, budget.budget_amount),
    )


def summarize_budgets(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    today: Optional[date] = None
) -> BudgetOverview:
    """All budgets with progress, most consumed first."""
    progress = [budget_utilization(b, transactions, today) for b in budgets]
    progress.sort(key=lambda p: p.percentage, reverse=True)

    return BudgetOverview(
        budgets=progress,
        total_budget=sum((b.budget_amount for b in budgets), ZERO),
        total_spent=sum((p.spent_amount for p in progress), ZERO),
    )
