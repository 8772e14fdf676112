"""Emergency fund progress."""

from decimal import Decimal

from finance_dashboard.aggregation.common import (
    Number,
    percentage,
    round_half_up,
    to_decimal,
)
from finance_dashboard.models.finance import EmergencyFund, EmergencyFundStatus


def emergency_fund_status(
    fund: EmergencyFund,
    avg_monthly_expenses: Number
) -> EmergencyFundStatus:
    """
    Progress toward the goal and how many months of spending are covered.

    Progress is rounded and capped at 100. Months covered has one decimal
    and is 0 when there are no recorded expenses.
    """
    expenses = to_decimal(avg_monthly_expenses)
    progress = min(percentage(fund.current_amount, fund.goal_amount), 100)

    months_covered = 0.0
    if expenses > 0:
        months_covered = float(round_half_up(fund.current_amount / expenses, 1))

    return EmergencyFundStatus(
        fund=fund,
        progress_percentage=progress,
        months_covered=months_covered,
        monthly_expenses=expenses,
    )


def suggest_goal(avg_monthly_expenses: Number, target_months: int) -> Decimal:
    """Monthly expenses times target months, rounded to a whole amount."""
    return round_half_up(to_decimal(avg_monthly_expenses) * target_months)
