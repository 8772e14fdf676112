"""
Data Models Package

This package contains all Pydantic models used in the Finance Dashboard.
Rows fetched from the hosted backend must conform to these schemas.
"""

from finance_dashboard.models.finance import (
    CREDIT_ACCOUNT_TYPE,
    Account,
    Budget,
    BudgetOverview,
    BudgetProgress,
    CategorySpend,
    Debt,
    DebtStrategy,
    DebtSummary,
    EmergencyFund,
    EmergencyFundStatus,
    MonthlySummary,
    MonthlyTrendPoint,
    NetWorthSummary,
    PayoffDetails,
    Profile,
    ProfilePreferences,
    Transaction,
    TransactionType,
)
from finance_dashboard.models.notice import (
    Notice,
    NoticeBuilder,
    NoticeKind,
    NoticeLevel,
)
from finance_dashboard.models.session import (
    AuthEventType,
    AuthResult,
    AuthSession,
    AuthState,
    AuthUser,
    NavigationIntent,
    SessionEvent,
)

__all__ = [
    # Finance models
    "CREDIT_ACCOUNT_TYPE",
    "Account",
    "Budget",
    "BudgetOverview",
    "BudgetProgress",
    "CategorySpend",
    "Debt",
    "DebtStrategy",
    "DebtSummary",
    "EmergencyFund",
    "EmergencyFundStatus",
    "MonthlySummary",
    "MonthlyTrendPoint",
    "NetWorthSummary",
    "PayoffDetails",
    "Profile",
    "ProfilePreferences",
    "Transaction",
    "TransactionType",
    # Notice models
    "Notice",
    "NoticeBuilder",
    "NoticeKind",
    "NoticeLevel",
    # Session models
    "AuthEventType",
    "AuthResult",
    "AuthSession",
    "AuthState",
    "AuthUser",
    "NavigationIntent",
    "SessionEvent",
]
