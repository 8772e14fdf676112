"""
Debt ordering, totals and payoff estimates.

Two estimates exist:
- summarize_debts() uses the closed-form annuity formula on the average
  monthly rate across all debts (quick, portfolio-level)
- payoff_details() simulates one debt month by month
"""

import math
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from finance_dashboard.aggregation.common import (
    ZERO,
    Number,
    add_months,
    resolve_today,
    round_half_up,
    to_decimal,
)
from finance_dashboard.models.finance import (
    Debt,
    DebtStrategy,
    DebtSummary,
    PayoffDetails,
)

MAX_SIMULATED_MONTHS = 1200
SORT_KEYS = ("interest", "balance", "name", "due_date")


def sort_debts(
    debts: Iterable[Debt],
    strategy: Union[DebtStrategy, str] = DebtStrategy.AVALANCHE
) -> list[Debt]:
    """
    Order debts for repayment.

    Avalanche: highest interest rate first.
    Snowball: lowest balance first.
    """
    strategy = DebtStrategy(str(getattr(strategy, "value", strategy)).capitalize())
    if strategy == DebtStrategy.SNOWBALL:
        return sorted(debts, key=lambda d: d.amount)
    return sorted(debts, key=lambda d: d.interest_rate, reverse=True)


def sort_debts_by(debts: Iterable[Debt], key: str) -> list[Debt]:
    """Table ordering: interest and balance descending, name and due date ascending."""
    if key == "interest":
        return sorted(debts, key=lambda d: d.interest_rate, reverse=True)
    if key == "balance":
        return sorted(debts, key=lambda d: d.amount, reverse=True)
    if key == "name":
        return sorted(debts, key=lambda d: d.name.casefold())
    if key == "due_date":
        # Undated debts last
        return sorted(debts, key=lambda d: (d.due_date is None, d.due_date or date.min))
    raise ValueError(f"Unknown sort key: {key}. Expected one of {SORT_KEYS}")


def estimate_months_to_payoff(
    total: Number,
    monthly_payment: Number,
    monthly_rate: float
) -> Optional[float]:
    """
    Months to clear `total` paying `monthly_payment` at `monthly_rate`.

    Uses n = log(1 / (1 - P*r/A)) / log(1 + r). When that is undefined
    (zero rate, payment not covering interest) falls back to P / A.
    None when nothing is being paid.
    """
    principal = float(total)
    payment = float(monthly_payment)
    if payment <= 0:
        return None

    try:
        months = math.log(1 / (1 - principal * monthly_rate / payment)) / math.log(1 + monthly_rate)
    except (ValueError, ZeroDivisionError):
        months = None

    if months is None or math.isnan(months) or math.isinf(months) or months < 0:
        return principal / payment
    return months


def summarize_debts(
    debts: Sequence[Debt],
    today: Optional[date] = None
) -> DebtSummary:
    """Totals plus a portfolio-level payoff estimate."""
    total = sum((d.amount for d in debts), ZERO)
    min_payment = sum((d.min_payment for d in debts), ZERO)
    yearly_interest = sum((d.amount * d.interest_rate / 100 for d in debts), ZERO)

    months_to_payoff = None
    payoff_date = None
    if debts and min_payment > 0:
        average_rate = float(sum((d.interest_rate for d in debts), ZERO)) / len(debts) / 100 / 12
        months = estimate_months_to_payoff(total, min_payment, average_rate)
        if months is not None:
            months_to_payoff = math.ceil(months)
            payoff_date = add_months(resolve_today(today), months_to_payoff)

    return DebtSummary(
        total_debt=total,
        total_min_payment=min_payment,
        yearly_interest=round_half_up(yearly_interest, 2),
        months_to_payoff=months_to_payoff,
        estimated_payoff_date=payoff_date,
    )


def payoff_details(debt: Debt, today: Optional[date] = None) -> PayoffDetails:
    """
    Simulate paying only the minimum each month.

    Interest accrues on the remaining balance, then the payment (never more
    than what is owed) is applied. Stops after MAX_SIMULATED_MONTHS; a
    payment that does not cover interest always hits the cap.
    """
    monthly_rate = debt.interest_rate / 100 / 12
    balance = debt.amount
    months = 0
    interest_paid = ZERO

    while balance > 0 and months < MAX_SIMULATED_MONTHS:
        interest = balance * monthly_rate
        interest_paid += interest
        payment = min(debt.min_payment, balance + interest)
        balance -= payment - interest
        months += 1

    return PayoffDetails(
        months=months,
        total_interest=round_half_up(interest_paid, 2),
        payoff_date=add_months(resolve_today(today), months),
        capped=balance > 0,
    )


def describe_payoff_time(debt: Debt, max_months: int = 360) -> str:
    """
    Human readable time to payoff for the add-debt preview.

    'N/A' without a payment, 'Never (payment too low)' when the payment
    does not cover interest, '30+ years' past max_months.
    """
    if debt.amount <= 0 or debt.min_payment <= 0:
        return "N/A"

    monthly_rate = debt.interest_rate / 100 / 12
    if debt.min_payment <= debt.amount * monthly_rate:
        return "Never (payment too low)"

    balance = debt.amount
    months = 0
    while balance > 0 and months < max_months:
        interest = balance * monthly_rate
        balance -= min(debt.min_payment - interest, balance)
        months += 1

    if months >= max_months:
        return f"{max_months // 12}+ years"

    years, remainder = divmod(months, 12)
    parts = []
    if years:
        parts.append(f"{years} year{'s' if years != 1 else ''}")
    if remainder or not years:
        parts.append(f"{remainder} month{'s' if remainder != 1 else ''}")
    return ", ".join(parts)


def debt_to_income_ratio(debts: Iterable[Debt], monthly_income: Number) -> Decimal:
    """Minimum payments as a percentage of monthly income, one decimal."""
    income = to_decimal(monthly_income)
    if income <= 0:
        return ZERO
    payments = sum((d.min_payment for d in debts), ZERO)
    return round_half_up(payments / income * 100, 1)
