"""Page loaders and form actions."""

from finance_dashboard.queries.forms import (
    ACCOUNT_TYPES,
    CURRENCIES,
    DEFAULT_CATEGORIES,
    FormActions,
)
from finance_dashboard.queries.loaders import DashboardData, EmergencyFundData, PageLoaders
from finance_dashboard.queries.rows import parse_rows, validate_rows

__all__ = [
    "ACCOUNT_TYPES",
    "CURRENCIES",
    "DEFAULT_CATEGORIES",
    "DashboardData",
    "EmergencyFundData",
    "FormActions",
    "PageLoaders",
    "parse_rows",
    "validate_rows",
]
