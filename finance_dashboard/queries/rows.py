"""Row validation at the backend boundary."""

from typing import Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from finance_dashboard.services.backend import RowShapeError

ACCOUNTS = "accounts"
TRANSACTIONS = "transactions"
BUDGETS = "budgets"
DEBTS = "debts"
EMERGENCY_FUND = "emergency_fund"
PROFILES = "profiles"

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_rows(
    model: type[ModelT],
    rows: Iterable[dict],
    table: str,
) -> tuple[list[ModelT], list[RowShapeError]]:
    """
    Validate fetched rows into `model`, keeping going past bad ones.

    Returns:
        (records, rejected) where rejected holds one RowShapeError per
        row that did not fit, in row order
    """
    records = []
    rejected = []
    for index, row in enumerate(rows):
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            rejected.append(RowShapeError(table, index, e.errors()))
    return records, rejected


def parse_rows(model: type[ModelT], rows: Iterable[dict], table: str) -> list[ModelT]:
    """
    Validate fetched rows into `model`, all or nothing.

    Raises:
        RowShapeError: for the first row that does not fit
    """
    records, rejected = validate_rows(model, rows, table)
    if rejected:
        raise rejected[0]
    return records
