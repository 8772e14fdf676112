"""
Core Data Models for Finance Dashboard

These models define the shapes of the rows we read from the hosted row-store
and of the numbers we derive from them. They are designed to:
1. Validate incoming rows immediately after fetch
2. Normalize loosely-typed values (case, nulls, timestamps) in one place
3. Keep money as Decimal end to end

The row-store owns persistence. Nothing here is cached or written back
except through the form actions.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Transaction direction.

    Stored lower case. Input is accepted in any case ("Income", "EXPENSE").
    """
    INCOME = "income"
    EXPENSE = "expense"


class DebtStrategy(str, Enum):
    """Debt repayment strategy a user picked for a debt."""
    AVALANCHE = "Avalanche"  # highest interest first
    SNOWBALL = "Snowball"    # lowest balance first


CREDIT_ACCOUNT_TYPE = "credit"


def _to_date(value: Any) -> Any:
    """Accept timestamps where a calendar date is expected."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10 and value[4] == "-":
        return value[:10]
    return value


# =============================================================================
# ENTITIES - one model per row-store table
# =============================================================================

class Account(BaseModel):
    """
    A money account (checking, savings, credit, investment, ...).

    `value` is signed. Credit accounts are always treated as a liability of
    abs(value), whatever sign was stored.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str = Field(default="", max_length=200)
    type: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Account type, normalized to lower case"
    )
    value: Decimal = Field(
        default=Decimal("0"),
        description="Signed balance"
    )
    currency: str = Field(
        default="USD",
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code"
    )
    notes: Optional[str] = Field(default=None, max_length=1000)
    created_at: Optional[datetime] = None

    @field_validator("type")
    @classmethod
    def lower_type(cls, v: str) -> str:
        return v.lower()

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v: Any) -> Any:
        if v is None:
            return "USD"
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def is_credit(self) -> bool:
        return self.type == CREDIT_ACCOUNT_TYPE


class Transaction(BaseModel):
    """
    A single income or expense.

    The model does not enforce the sign of `total`. Form actions sign the
    amount before insert and aggregations use abs(total).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    account_id: Optional[str] = None
    date: date
    month: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Reporting bucket. Written as YYYY-MM; older rows hold a month name"
    )
    type: TransactionType
    category: str = Field(default="", max_length=100)
    description: str = Field(default="", max_length=500)
    total: Decimal = Field(..., description="Signed amount")
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    # Joined for display, not a column of the transactions table
    account_name: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        return _to_date(v)

    @field_validator("type", mode="before")
    @classmethod
    def lower_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("category", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME


class Budget(BaseModel):
    """A spending limit for one category over a date range."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    category: str = Field(..., min_length=1, max_length=100)
    budget_amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount allotted for the period"
    )
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def coerce_dates(cls, v: Any) -> Any:
        return _to_date(v)

    @model_validator(mode="after")
    def validate_dates(self) -> "Budget":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("Budget end date cannot be before start date")
        return self


class Debt(BaseModel):
    """An outstanding debt with its repayment terms."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., ge=0, description="Outstanding balance")
    interest_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Annual interest rate in percent"
    )
    min_payment: Decimal = Field(default=Decimal("0"), ge=0)
    due_date: Optional[date] = None
    strategy: DebtStrategy = DebtStrategy.AVALANCHE
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("interest_rate", "min_payment", mode="before")
    @classmethod
    def none_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("due_date", mode="before")
    @classmethod
    def coerce_due_date(cls, v: Any) -> Any:
        return _to_date(v)

    @field_validator("strategy", mode="before")
    @classmethod
    def normalize_strategy(cls, v: Any) -> Any:
        if v is None:
            return DebtStrategy.AVALANCHE
        if isinstance(v, str):
            return v.strip().capitalize()
        return v


class EmergencyFund(BaseModel):
    """Savings goal expressed as months of expenses."""

    id: Optional[str] = None
    user_id: Optional[str] = None
    goal_amount: Decimal = Field(..., ge=0)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    target_months: int = Field(default=6, ge=1, le=60)
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class ProfilePreferences(BaseModel):
    """Display preferences stored as JSON on the profile row."""
    model_config = ConfigDict(populate_by_name=True)

    dark_mode: bool = Field(default=False, alias="darkMode")
    notifications: bool = True


class Profile(BaseModel):
    """Per-user profile. `id` is the auth user's id."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str
    full_name: Optional[str] = Field(default=None, max_length=200)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    preferences: ProfilePreferences = Field(default_factory=ProfilePreferences)
    updated_at: Optional[datetime] = None

    @field_validator("preferences", mode="before")
    @classmethod
    def none_to_defaults(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper() or None
        return v


# =============================================================================
# DERIVED MODELS - computed from fetched rows, never persisted
# =============================================================================

class NetWorthSummary(BaseModel):
    """Assets, liabilities and their difference."""

    total_assets: Decimal = Decimal("0")
    total_liabilities: Decimal = Decimal("0")
    net_worth: Decimal = Decimal("0")


class BudgetProgress(BaseModel):
    """How much of a budget the current month has consumed."""

    budget: Budget
    spent_amount: Decimal = Decimal("0")
    percentage: int = Field(default=0, ge=0)

    @property
    def remaining(self) -> Decimal:
        return self.budget.budget_amount - self.spent_amount

    @property
    def status(self) -> str:
        """Traffic-light bucket used by the progress bars."""
        if self.percentage > 100:
            return "over"
        if self.percentage > 90:
            return "warning"
        if self.percentage > 75:
            return "caution"
        return "ok"


class BudgetOverview(BaseModel):
    """All budgets with progress, plus totals for the summary cards."""

    budgets: list[BudgetProgress] = Field(default_factory=list)
    total_budget: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")

    @property
    def remaining(self) -> Decimal:
        return self.total_budget - self.total_spent


class MonthlySummary(BaseModel):
    """Income and expenses for one calendar month."""

    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    savings_rate: float = Field(default=0.0, ge=0.0)

    @property
    def savings(self) -> Decimal:
        return self.income - self.expenses


class MonthlyTrendPoint(BaseModel):
    """One bar of the income/expense trend chart."""

    year: int
    month: int = Field(..., ge=1, le=12)
    label: str
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")

    @property
    def savings(self) -> Decimal:
        return self.income - self.expenses


class CategorySpend(BaseModel):
    """Total expenses in one category."""

    category: str
    amount: Decimal


class DebtSummary(BaseModel):
    """Totals and a rough payoff estimate across all debts."""

    total_debt: Decimal = Decimal("0")
    total_min_payment: Decimal = Decimal("0")
    yearly_interest: Decimal = Decimal("0")
    months_to_payoff: Optional[int] = None
    estimated_payoff_date: Optional[date] = None


class PayoffDetails(BaseModel):
    """Month-by-month payoff simulation result for one debt."""

    months: int = Field(..., ge=0)
    total_interest: Decimal = Decimal("0")
    payoff_date: date
    capped: bool = Field(
        default=False,
        description="True when the minimum payment never clears the balance"
    )


class EmergencyFundStatus(BaseModel):
    """Progress of the emergency fund against its goal."""

    fund: EmergencyFund
    progress_percentage: int = Field(default=0, ge=0, le=100)
    months_covered: float = 0.0
    monthly_expenses: Decimal = Decimal("0")

    @property
    def remaining(self) -> Decimal:
        return max(self.fund.goal_amount - self.fund.current_amount, Decimal("0"))

    @property
    def goal_reached(self) -> bool:
        return self.months_covered >= self.fund.target_months
