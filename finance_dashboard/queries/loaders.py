"""
Page Loaders

One method per page. Each one queries the rows the page needs (scoped to the
signed-in user), validates them, and runs the aggregations.

DESIGN DECISION: a failed read degrades to an empty page, logged and
reported as a warning notice, so one broken table does not take the whole
dashboard down. Rows that do not validate are dropped the same way: each
one is logged, the page gets the rest, and one notice says how many were
left out.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from finance_dashboard.aggregation import (
    average_monthly_expenses,
    emergency_fund_status,
    expenses_by_category,
    monthly_trend,
    recent_transactions,
    summarize_budgets,
    summarize_debts,
    summarize_month,
    summarize_net_worth,
)
from finance_dashboard.aggregation.common import month_start, resolve_today
from finance_dashboard.config import AppSettings
from finance_dashboard.models.finance import (
    Account,
    Budget,
    BudgetOverview,
    CategorySpend,
    Debt,
    DebtSummary,
    EmergencyFund,
    EmergencyFundStatus,
    MonthlySummary,
    MonthlyTrendPoint,
    NetWorthSummary,
    Profile,
    Transaction,
    TransactionType,
)
from finance_dashboard.models.notice import NoticeBuilder
from finance_dashboard.notifications import NotificationCenter
from finance_dashboard.queries.rows import (
    ACCOUNTS,
    BUDGETS,
    DEBTS,
    EMERGENCY_FUND,
    PROFILES,
    TRANSACTIONS,
    validate_rows,
)
from finance_dashboard.services.backend import BackendError, RowQuery, RowStoreInterface

logger = structlog.get_logger(__name__)

EXPENSE_HISTORY_MONTHS = 3


class DashboardData(BaseModel):
    """Everything the dashboard page renders."""

    accounts: list[Account] = Field(default_factory=list)
    net_worth: NetWorthSummary = Field(default_factory=NetWorthSummary)
    month: MonthlySummary = Field(default_factory=MonthlySummary)
    trend: list[MonthlyTrendPoint] = Field(default_factory=list)
    categories: list[CategorySpend] = Field(default_factory=list)
    recent: list[Transaction] = Field(default_factory=list)
    budgets: BudgetOverview = Field(default_factory=BudgetOverview)
    debts: list[Debt] = Field(default_factory=list)
    debt_summary: DebtSummary = Field(default_factory=DebtSummary)
    emergency_fund: Optional[EmergencyFundStatus] = None


class EmergencyFundData(BaseModel):
    """The active fund (if any) and the spending it is measured against."""

    fund: Optional[EmergencyFund] = None
    status: Optional[EmergencyFundStatus] = None
    monthly_expenses: Decimal = Decimal("0")


class PageLoaders:
    """
    Read side of every page.

    The row-store is injected once; every method takes the current user id.
    """

    def __init__(
        self,
        store: RowStoreInterface,
        settings: Optional[AppSettings] = None,
        notifications: Optional[NotificationCenter] = None,
    ):
        self._store = store
        self._settings = settings or AppSettings()
        self._notifications = notifications

    async def _fetch(self, query: RowQuery, model: type) -> list:
        """Select and validate. Read failures give [], invalid rows are skipped."""
        try:
            rows = await self._store.select(query)
        except BackendError as e:
            logger.warning("fetch_failed", query=query.describe(), error=str(e))
            if self._notifications:
                self._notifications.publish(NoticeBuilder.fetch_failed(query.table, str(e)))
            return []
        records, rejected = validate_rows(model, rows, query.table)
        for error in rejected:
            logger.warning("row_skipped", table=error.table, index=error.index, error=str(error))
        if rejected and self._notifications:
            self._notifications.publish(NoticeBuilder.fetch_failed(
                query.table,
                f"{len(rejected)} invalid row(s) skipped. {rejected[0]}",
            ))
        return records

    async def _fetch_one(self, query: RowQuery, model: type):
        records = await self._fetch(query.model_copy(update={"limit": 1}), model)
        return records[0] if records else None

    # -------------------------------------------------------------------------
    # Raw collections
    # -------------------------------------------------------------------------

    async def load_accounts(self, user_id: str) -> list[Account]:
        return await self._fetch(
            RowQuery(table=ACCOUNTS, eq={"user_id": user_id}, order_by="name"),
            Account,
        )

    async def load_account(self, user_id: str, account_id: str) -> Optional[Account]:
        return await self._fetch_one(
            RowQuery(table=ACCOUNTS, eq={"user_id": user_id, "id": account_id}),
            Account,
        )

    async def _load_transaction_rows(
        self,
        user_id: str,
        since: Optional[date] = None,
        until: Optional[date] = None,
        expenses_only: bool = False,
    ) -> list[Transaction]:
        eq = {"user_id": user_id}
        if expenses_only:
            eq["type"] = TransactionType.EXPENSE.value
        return await self._fetch(
            RowQuery(
                table=TRANSACTIONS,
                eq=eq,
                gte={"date": since} if since else {},
                lte={"date": until} if until else {},
                order_by="date",
                ascending=False,
            ),
            Transaction,
        )

    async def load_transactions(self, user_id: str) -> list[Transaction]:
        """All transactions, newest first, each with its account's name."""
        accounts = await self.load_accounts(user_id)
        names = {a.id: a.name for a in accounts}
        transactions = await self._load_transaction_rows(user_id)
        return [
            t.model_copy(update={"account_name": names.get(t.account_id, "Unknown account")})
            for t in transactions
        ]

    async def load_budgets(self, user_id: str, today: Optional[date] = None) -> BudgetOverview:
        """Budgets with this month's spending against each."""
        today = resolve_today(today)
        budgets = await self._fetch(
            RowQuery(table=BUDGETS, eq={"user_id": user_id}, order_by="category"),
            Budget,
        )
        expenses = await self._load_transaction_rows(
            user_id, since=month_start(today), until=today, expenses_only=True
        )
        return summarize_budgets(budgets, expenses, today)

    async def load_budget(self, user_id: str, budget_id: str) -> Optional[Budget]:
        return await self._fetch_one(
            RowQuery(table=BUDGETS, eq={"user_id": user_id, "id": budget_id}),
            Budget,
        )

    async def load_debts(self, user_id: str) -> list[Debt]:
        return await self._fetch(
            RowQuery(table=DEBTS, eq={"user_id": user_id}, order_by="interest_rate", ascending=False),
            Debt,
        )

    async def load_debt(self, user_id: str, debt_id: str) -> Optional[Debt]:
        return await self._fetch_one(
            RowQuery(table=DEBTS, eq={"user_id": user_id, "id": debt_id}),
            Debt,
        )

    async def load_emergency_fund(
        self,
        user_id: str,
        today: Optional[date] = None,
    ) -> EmergencyFundData:
        """Most recent fund record, plus average spend over the last three months."""
        today = resolve_today(today)
        fund = await self._fetch_one(
            RowQuery(
                table=EMERGENCY_FUND,
                eq={"user_id": user_id},
                order_by="created_at",
                ascending=False,
            ),
            EmergencyFund,
        )
        expenses = await self._load_transaction_rows(
            user_id,
            since=month_start(today, EXPENSE_HISTORY_MONTHS),
            until=today,
            expenses_only=True,
        )
        monthly = average_monthly_expenses(expenses, today, EXPENSE_HISTORY_MONTHS)

        return EmergencyFundData(
            fund=fund,
            status=emergency_fund_status(fund, monthly) if fund else None,
            monthly_expenses=monthly,
        )

    async def load_profile(self, user_id: str) -> Optional[Profile]:
        """The user's profile, or None when it has not been saved yet."""
        return await self._fetch_one(
            RowQuery(table=PROFILES, eq={"id": user_id}),
            Profile,
        )

    async def load_categories(self, user_id: str) -> list[str]:
        """Distinct categories seen on transactions and budgets, sorted."""
        rows = []
        for table in (TRANSACTIONS, BUDGETS):
            query = RowQuery(
                table=table,
                columns="category",
                eq={"user_id": user_id},
                not_null=["category"],
            )
            try:
                rows.extend(await self._store.select(query))
            except BackendError as e:
                logger.warning("fetch_failed", query=query.describe(), error=str(e))

        categories = {str(r["category"]).strip() for r in rows if r.get("category")}
        return sorted((c for c in categories if c), key=lambda c: (c.casefold(), c))

    # -------------------------------------------------------------------------
    # Dashboard
    # -------------------------------------------------------------------------

    async def load_dashboard(self, user_id: str, today: Optional[date] = None) -> DashboardData:
        """
        The overview page.

        Net worth here counts recorded debts as liabilities on top of the
        accounts themselves.
        """
        today = resolve_today(today)

        accounts = await self.load_accounts(user_id)
        transactions = await self._load_transaction_rows(user_id)
        budgets = await self._fetch(
            RowQuery(table=BUDGETS, eq={"user_id": user_id}),
            Budget,
        )
        debts = await self.load_debts(user_id)
        fund = await self._fetch_one(
            RowQuery(
                table=EMERGENCY_FUND,
                eq={"user_id": user_id},
                order_by="created_at",
                ascending=False,
            ),
            EmergencyFund,
        )

        monthly_expenses = average_monthly_expenses(transactions, today, EXPENSE_HISTORY_MONTHS)

        data = DashboardData(
            accounts=accounts,
            net_worth=summarize_net_worth(accounts, debts),
            month=summarize_month(transactions, today),
            trend=monthly_trend(transactions, today, self._settings.trend_months),
            categories=expenses_by_category(transactions, today),
            recent=recent_transactions(transactions, self._settings.recent_transactions_limit),
            budgets=summarize_budgets(budgets, transactions, today),
            debts=debts,
            debt_summary=summarize_debts(debts, today),
            emergency_fund=emergency_fund_status(fund, monthly_expenses) if fund else None,
        )

        logger.info(
            "dashboard_loaded",
            user_id=user_id,
            accounts=len(accounts),
            transactions=len(transactions),
            budgets=len(budgets),
            debts=len(debts),
        )
        return data
