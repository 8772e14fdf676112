"""
Form Actions

The write side of every page. Each action validates the submitted values
into a model, writes through the injected row-store, and returns a Notice.

DESIGN DECISION: form actions never raise. Bad input and backend failures
both come back as an error Notice, which is also published to the
notification center so the UI can show it as a toast. The one exception
that escapes is a programming error (anything that is not a validation or
backend error).
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ValidationError

from finance_dashboard.aggregation import signed_total
from finance_dashboard.models.finance import (
    Account,
    Budget,
    Debt,
    EmergencyFund,
    Profile,
    Transaction,
)
from finance_dashboard.models.notice import Notice, NoticeBuilder
from finance_dashboard.notifications import NotificationCenter
from finance_dashboard.queries.rows import (
    ACCOUNTS,
    BUDGETS,
    DEBTS,
    EMERGENCY_FUND,
    PROFILES,
    TRANSACTIONS,
    parse_rows,
)
from finance_dashboard.services.backend import (
    BackendError,
    NotFoundError,
    RowQuery,
    RowStoreInterface,
)

logger = structlog.get_logger(__name__)

# Form options. Only "credit" is treated as a liability.
ACCOUNT_TYPES = {
    "cash": "Cash",
    "checking": "Checking Account",
    "savings": "Savings Account",
    "credit": "Credit Card",
    "investment": "Investment",
    "other": "Other",
}

CURRENCIES = {
    "USD": "US Dollar ($)",
    "EUR": "Euro (€)",
    "GBP": "British Pound (£)",
    "JPY": "Japanese Yen (¥)",
    "CAD": "Canadian Dollar (CA$)",
    "AUD": "Australian Dollar (A$)",
}

DEFAULT_CATEGORIES = (
    "Groceries",
    "Dining",
    "Transportation",
    "Housing",
    "Utilities",
    "Entertainment",
)

# Columns the backend fills in, or that are joined for display only
_SERVER_COLUMNS = {"id", "created_at", "account_name"}


def _payload(record: BaseModel, exclude: set[str] = _SERVER_COLUMNS) -> dict:
    """Column values to write. Keeps explicit None so cleared fields clear."""
    return record.model_dump(by_alias=True, exclude=exclude)


def _validation_message(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(p) for p in first.get("loc", ()))
    return f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "")


class FormActions:
    """
    Insert, update and delete for every record type.

    Usage:
        actions = FormActions(store, notifications)
        notice = await actions.add_budget(user.id, {"category": "Dining", ...})
        if notice.is_error: ...
    """

    def __init__(
        self,
        store: RowStoreInterface,
        notifications: Optional[NotificationCenter] = None,
    ):
        self._store = store
        self._notifications = notifications or NotificationCenter()

    def _publish(self, notice: Notice) -> Notice:
        return self._notifications.publish(notice)

    def _validate(self, model: type, values: dict, user_id: str) -> Any:
        return model.model_validate({**values, "user_id": user_id})

    async def _insert(self, table: str, label: str, record: BaseModel) -> Notice:
        try:
            rows = await self._store.insert(table, _payload(record))
        except BackendError as e:
            logger.error("insert_failed", table=table, error=str(e))
            return self._publish(NoticeBuilder.save_failed(table, label, str(e)))

        entity_id = str(rows[0].get("id")) if rows and rows[0].get("id") else None
        return self._publish(NoticeBuilder.record_saved(table, label, entity_id=entity_id))

    async def _update(
        self,
        table: str,
        label: str,
        values: dict,
        match: dict,
    ) -> Notice:
        entity_id = str(match.get("id")) if match.get("id") else None
        try:
            rows = await self._store.update(table, values, match)
            if not rows:
                raise NotFoundError(f"No {label.lower()} matched {match}")
        except BackendError as e:
            logger.error("update_failed", table=table, entity_id=entity_id, error=str(e))
            return self._publish(NoticeBuilder.save_failed(table, label, str(e)))

        return self._publish(NoticeBuilder.record_saved(table, label, entity_id=entity_id))

    async def _delete(self, table: str, label: str, match: dict) -> Notice:
        entity_id = str(match.get("id"))
        try:
            rows = await self._store.delete(table, match)
            if not rows:
                raise NotFoundError(f"No {label.lower()} matched {match}")
        except BackendError as e:
            logger.error("delete_failed", table=table, entity_id=entity_id, error=str(e))
            return self._publish(
                NoticeBuilder.delete_failed(table, label, str(e), entity_id=entity_id)
            )

        return self._publish(NoticeBuilder.record_deleted(table, label, entity_id=entity_id))

    def _invalid(self, table: str, label: str, error: ValidationError) -> Notice:
        message = _validation_message(error)
        logger.info("form_rejected", table=table, error=message)
        return self._publish(NoticeBuilder.save_failed(table, label, message))

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    async def add_account(self, user_id: str, values: dict) -> Notice:
        try:
            account = self._validate(Account, values, user_id)
        except ValidationError as e:
            return self._invalid(ACCOUNTS, "Account", e)
        return await self._insert(ACCOUNTS, "Account", account)

    async def update_account(self, user_id: str, account_id: str, values: dict) -> Notice:
        try:
            account = self._validate(Account, values, user_id)
        except ValidationError as e:
            return self._invalid(ACCOUNTS, "Account", e)
        return await self._update(
            ACCOUNTS,
            "Account",
            _payload(account, _SERVER_COLUMNS | {"user_id"}),
            {"id": account_id, "user_id": user_id},
        )

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def add_transaction(self, user_id: str, values: dict) -> Notice:
        """
        Record a transaction and move the owning account's balance.

        The amount is stored signed (expenses negative) whatever sign was
        entered, and `month` is derived from the date. The transaction is
        inserted first; if the balance update then fails, the transaction
        stays and an error notice says so.
        """
        try:
            transaction = self._validate(Transaction, values, user_id)
        except ValidationError as e:
            return self._invalid(TRANSACTIONS, "Transaction", e)

        transaction = transaction.model_copy(update={
            "total": signed_total(transaction.type, transaction.total),
            "month": transaction.date.strftime("%Y-%m"),
        })

        notice = await self._insert(TRANSACTIONS, "Transaction", transaction)
        if notice.is_error or not transaction.account_id:
            return notice

        try:
            rows = await self._store.select(RowQuery(
                table=ACCOUNTS,
                eq={"id": transaction.account_id, "user_id": user_id},
                limit=1,
            ))
            accounts = parse_rows(Account, rows, ACCOUNTS)
            if not accounts:
                raise NotFoundError(f"Account {transaction.account_id} not found")
            new_value = accounts[0].value + transaction.total
            await self._store.update(
                ACCOUNTS,
                {"value": new_value},
                {"id": transaction.account_id, "user_id": user_id},
            )
        except BackendError as e:
            logger.error(
                "account_balance_update_failed",
                account_id=transaction.account_id,
                error=str(e),
            )
            return self._publish(NoticeBuilder.save_failed(ACCOUNTS, "Account balance", str(e)))

        logger.info(
            "account_balance_updated",
            account_id=transaction.account_id,
            delta=str(transaction.total),
        )
        return notice

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    async def add_budget(self, user_id: str, values: dict) -> Notice:
        try:
            budget = self._validate(Budget, values, user_id)
        except ValidationError as e:
            return self._invalid(BUDGETS, "Budget", e)
        return await self._insert(BUDGETS, "Budget", budget)

    async def update_budget(self, user_id: str, budget_id: str, values: dict) -> Notice:
        try:
            budget = self._validate(Budget, values, user_id)
        except ValidationError as e:
            return self._invalid(BUDGETS, "Budget", e)
        return await self._update(
            BUDGETS,
            "Budget",
            _payload(budget, _SERVER_COLUMNS | {"user_id"}),
            {"id": budget_id, "user_id": user_id},
        )

    async def delete_budget(self, user_id: str, budget_id: str) -> Notice:
        return await self._delete(BUDGETS, "Budget", {"id": budget_id, "user_id": user_id})

    # -------------------------------------------------------------------------
    # Debts
    # -------------------------------------------------------------------------

    async def add_debt(self, user_id: str, values: dict) -> Notice:
        try:
            debt = self._validate(Debt, values, user_id)
        except ValidationError as e:
            return self._invalid(DEBTS, "Debt", e)
        return await self._insert(DEBTS, "Debt", debt)

    async def update_debt(self, user_id: str, debt_id: str, values: dict) -> Notice:
        try:
            debt = self._validate(Debt, values, user_id)
        except ValidationError as e:
            return self._invalid(DEBTS, "Debt", e)
        return await self._update(
            DEBTS,
            "Debt",
            _payload(debt, _SERVER_COLUMNS | {"user_id"}),
            {"id": debt_id, "user_id": user_id},
        )

    async def delete_debt(self, user_id: str, debt_id: str) -> Notice:
        return await self._delete(DEBTS, "Debt", {"id": debt_id, "user_id": user_id})

    # -------------------------------------------------------------------------
    # Emergency fund and profile (one record per user)
    # -------------------------------------------------------------------------

    async def save_emergency_fund(self, user_id: str, values: dict) -> Notice:
        """Update the most recent fund record, or create the first one."""
        try:
            fund = self._validate(EmergencyFund, values, user_id)
        except ValidationError as e:
            return self._invalid(EMERGENCY_FUND, "Emergency fund", e)

        try:
            existing = await self._store.select(RowQuery(
                table=EMERGENCY_FUND,
                columns="id",
                eq={"user_id": user_id},
                order_by="created_at",
                ascending=False,
                limit=1,
            ))
        except BackendError as e:
            logger.error("fund_lookup_failed", error=str(e))
            return self._publish(NoticeBuilder.save_failed(EMERGENCY_FUND, "Emergency fund", str(e)))

        if existing:
            return await self._update(
                EMERGENCY_FUND,
                "Emergency fund",
                _payload(fund, _SERVER_COLUMNS | {"user_id"}),
                {"id": existing[0]["id"], "user_id": user_id},
            )
        return await self._insert(EMERGENCY_FUND, "Emergency fund", fund)

    async def save_profile(self, user_id: str, values: dict) -> Notice:
        """Update the profile row keyed by the user id, creating it if missing."""
        try:
            profile = Profile.model_validate({
                **values,
                "id": user_id,
                "updated_at": datetime.now(timezone.utc),
            })
        except ValidationError as e:
            return self._invalid(PROFILES, "Settings", e)

        try:
            existing = await self._store.select(RowQuery(
                table=PROFILES,
                columns="id",
                eq={"id": user_id},
                limit=1,
            ))
        except BackendError as e:
            logger.error("profile_lookup_failed", error=str(e))
            return self._publish(NoticeBuilder.save_failed(PROFILES, "Settings", str(e)))

        if existing:
            return await self._update(
                PROFILES,
                "Settings",
                _payload(profile, {"id"}),
                {"id": user_id},
            )
        try:
            await self._store.insert(PROFILES, _payload(profile, set()))
        except BackendError as e:
            logger.error("insert_failed", table=PROFILES, error=str(e))
            return self._publish(NoticeBuilder.save_failed(PROFILES, "Settings", str(e)))
        return self._publish(NoticeBuilder.record_saved(PROFILES, "Settings", entity_id=user_id))
