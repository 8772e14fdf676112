"""Small numeric and calendar helpers shared by the aggregators."""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[Decimal, int, float]

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Number) -> Decimal:
    """Decimal from any number; floats go through str() to avoid binary noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_half_up(value: Number, places: int = 0) -> Decimal:
    """Round half away from zero, the way people expect money to round."""
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_UP)


def percentage(part: Number, whole: Number) -> int:
    """round(part / whole * 100); 0 when whole is not positive."""
    whole = to_decimal(whole)
    if whole <= 0:
        return 0
    return int(round_half_up(to_decimal(part) / whole * 100))


def resolve_today(today: Optional[date]) -> date:
    return today or date.today()


def in_month(value: date, reference: date) -> bool:
    """True when `value` is in the same calendar month as `reference`."""
    return value.year == reference.year and value.month == reference.month


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def month_start(value: date, months_back: int = 0) -> date:
    """First day of the month `months_back` months before `value`."""
    return add_months(value.replace(day=1), -months_back)
