"""
Display formatting for money, percentages and dates.

US-English conventions throughout: comma grouping, two fraction digits,
symbol before the amount, minus sign before the symbol.
"""

from datetime import date, datetime
from typing import Optional, Union

from finance_dashboard.aggregation.common import Number, round_half_up

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
    "CNY": "CN¥",
    "HKD": "HK$",
    "MXN": "MX$",
}

INVALID_DATE = "Invalid Date"

# Tried in order after ISO parsing fails
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%b %d, %Y",
    "%B %d, %Y",
)


def format_currency(amount: Number, currency: str = "USD") -> str:
    """
    Format an amount as money.

    >>> format_currency(-1234.56)
    '-$1,234.56'

    Codes without a known symbol are shown as the code and a no-break space.
    """
    code = (currency or "USD").upper()
    value = round_half_up(amount, 2)
    sign = "-" if value < 0 else ""
    body = f"{abs(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code}\u00a0{body}"
    return f"{sign}{symbol}{body}"


def format_percentage(value: Number) -> str:
    """12.345 -> '12.3%'"""
    return f"{round_half_up(value, 1):,.1f}%"


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """Best-effort date parsing; None when nothing matches."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def format_date(value: Union[str, date, datetime, None]) -> str:
    """
    Format as 'Mon D, YYYY'.

    Unparseable input gives 'Invalid Date' rather than an exception;
    callers that care should validate first.
    """
    parsed = parse_date(value)
    if parsed is None:
        return INVALID_DATE
    return f"{MONTH_NAMES[parsed.month - 1][:3]} {parsed.day}, {parsed.year}"


def format_long_date(value: Union[str, date, datetime, None]) -> str:
    """Format as 'Month D, YYYY' (payoff dates)."""
    parsed = parse_date(value)
    if parsed is None:
        return INVALID_DATE
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"


def month_name(index: int) -> Optional[str]:
    """Zero-based month name; None when out of range."""
    if not isinstance(index, int) or not 0 <= index < len(MONTH_NAMES):
        return None
    return MONTH_NAMES[index]
