"""Pure functions computing derived values from validated records."""

from finance_dashboard.aggregation.accounts import (
    calculate_net_worth,
    group_accounts_by_type,
    summarize_net_worth,
)
from finance_dashboard.aggregation.budgets import budget_utilization, summarize_budgets
from finance_dashboard.aggregation.common import round_half_up
from finance_dashboard.aggregation.debts import (
    debt_to_income_ratio,
    describe_payoff_time,
    payoff_details,
    sort_debts,
    sort_debts_by,
    summarize_debts,
)
from finance_dashboard.aggregation.emergency_fund import emergency_fund_status, suggest_goal
from finance_dashboard.aggregation.formatting import (
    INVALID_DATE,
    format_currency,
    format_date,
    format_long_date,
    format_percentage,
    month_name,
    parse_date,
)
from finance_dashboard.aggregation.transactions import (
    average_monthly_expenses,
    expenses_by_category,
    filter_month,
    monthly_trend,
    recent_transactions,
    signed_total,
    summarize_month,
)

__all__ = [
    "INVALID_DATE",
    "average_monthly_expenses",
    "budget_utilization",
    "calculate_net_worth",
    "debt_to_income_ratio",
    "describe_payoff_time",
    "emergency_fund_status",
    "expenses_by_category",
    "filter_month",
    "format_currency",
    "format_date",
    "format_long_date",
    "format_percentage",
    "group_accounts_by_type",
    "month_name",
    "monthly_trend",
    "parse_date",
    "payoff_details",
    "recent_transactions",
    "round_half_up",
    "signed_total",
    "sort_debts",
    "sort_debts_by",
    "suggest_goal",
    "summarize_budgets",
    "summarize_debts",
    "summarize_month",
    "summarize_net_worth",
]
