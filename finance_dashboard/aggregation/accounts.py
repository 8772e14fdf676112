"""Net worth and account grouping."""

from decimal import Decimal
from typing import Iterable, Sequence

from finance_dashboard.aggregation.common import ZERO
from finance_dashboard.models.finance import Account, Debt, NetWorthSummary


def calculate_net_worth(accounts: Iterable[Account]) -> Decimal:
    """
    Assets minus liabilities across accounts.

    Credit accounts always subtract abs(value), whatever sign was stored.
    Every other account adds its value as-is, so an overdrawn checking
    account already reduces the total.
    """
    total = ZERO
    for account in accounts:
        if account.is_credit:
            total -= abs(account.value)
        else:
            total += account.value
    return total


def summarize_net_worth(
    accounts: Iterable[Account],
    debts: Iterable[Debt] = ()
) -> NetWorthSummary:
    """Split net worth into assets and liabilities, counting recorded debts."""
    assets = ZERO
    liabilities = ZERO

    for account in accounts:
        if account.is_credit:
            liabilities += abs(account.value)
        elif account.value >= 0:
            assets += account.value
        else:
            liabilities += abs(account.value)

    for debt in debts:
        liabilities += debt.amount

    return NetWorthSummary(
        total_assets=assets,
        total_liabilities=liabilities,
        net_worth=assets - liabilities,
    )


def group_accounts_by_type(accounts: Sequence[Account]) -> dict[str, list[Account]]:
    groups: dict[str, list[Account]] = {}
    for account in accounts:
        groups.setdefault(account.type, []).append(account)
    return groups
