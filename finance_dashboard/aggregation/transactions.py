"""
Transaction aggregations for the dashboard and transaction pages.

Amounts are signed in storage; everything here works on abs(total) and
uses the transaction type to decide direction.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from finance_dashboard.aggregation.common import (
    ZERO,
    Number,
    in_month,
    month_start,
    resolve_today,
    round_half_up,
    to_decimal,
)
from finance_dashboard.aggregation.formatting import MONTH_NAMES
from finance_dashboard.models.finance import (
    CategorySpend,
    MonthlySummary,
    MonthlyTrendPoint,
    Transaction,
    TransactionType,
)

UNCATEGORIZED = "Uncategorized"


def signed_total(
    transaction_type: Union[TransactionType, str],
    amount: Number
) -> Decimal:
    """Expenses are stored negative, income positive."""
    kind = TransactionType(str(getattr(transaction_type, "value", transaction_type)).lower())
    value = abs(to_decimal(amount))
    return -value if kind == TransactionType.EXPENSE else value


def filter_month(
    transactions: Iterable[Transaction],
    today: Optional[date] = None
) -> list[Transaction]:
    """Month to date: from the first of `today`'s month through `today` itself."""
    reference = resolve_today(today)
    return [t for t in transactions if in_month(t.date, reference) and t.date <= reference]


def _totals(transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    income = ZERO
    expenses = ZERO
    for t in transactions:
        if t.is_income:
            income += abs(t.total)
        elif t.is_expense:
            expenses += abs(t.total)
    return income, expenses


def summarize_month(
    transactions: Iterable[Transaction],
    today: Optional[date] = None
) -> MonthlySummary:
    """
    Income, expenses and savings rate for the month containing `today`.

    Savings rate is (income - expenses) / income * 100, floored at 0 and
    0 when there is no income.
    """
    income, expenses = _totals(filter_month(transactions, today))

    savings_rate = 0.0
    if income > 0:
        rate = (income - expenses) / income * 100
        savings_rate = max(float(round_half_up(rate, 1)), 0.0)

    return MonthlySummary(
        income=income,
        expenses=expenses,
        savings_rate=savings_rate,
    )


def monthly_trend(
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
    months: int = 6
) -> list[MonthlyTrendPoint]:
    """Income and expenses for the last `months` calendar months, oldest first."""
    reference = resolve_today(today)
    points = []
    for offset in range(months - 1, -1, -1):
        start = month_start(reference, offset)
        income, expenses = _totals(
            t for t in transactions if in_month(t.date, start) and t.date <= reference
        )
        points.append(MonthlyTrendPoint(
            year=start.year,
            month=start.month,
            label=MONTH_NAMES[start.month - 1][:3],
            income=income,
            expenses=expenses,
        ))
    return points


def expenses_by_category(
    transactions: Iterable[Transaction],
    today: Optional[date] = None
) -> list[CategorySpend]:
    """Current-month expense totals per category, largest first."""
    totals: dict[str, Decimal] = {}
    for t in filter_month(transactions, today):
        if not t.is_expense:
            continue
        category = t.category or UNCATEGORIZED
        totals[category] = totals.get(category, ZERO) + abs(t.total)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategorySpend(category=c, amount=a) for c, a in ranked]


def average_monthly_expenses(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
    months: int = 3
) -> Decimal:
    """
    Average monthly spend from the first day `months` months back through today.

    The divisor is always `months`, so a short history reads low rather
    than high.
    """
    if months <= 0:
        return ZERO
    reference = resolve_today(today)
    start = month_start(reference, months)
    total = sum(
        (abs(t.total) for t in transactions
         if t.is_expense and start <= t.date <= reference),
        ZERO,
    )
    return total / months


def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = 5
) -> list[Transaction]:
    """Newest first; ties fall back to creation time."""
    ordered = sorted(
        transactions,
        key=lambda t: (t.date, t.created_at.timestamp() if t.created_at else 0.0),
        reverse=True,
    )
    return ordered[:max(limit, 0)]
