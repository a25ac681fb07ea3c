"""
Display formatting for amounts, percentages and dates.

This is the only place where money is rounded.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal, localcontext

from finance_tracker.models.transaction import TransactionType


_CENTS = Decimal("0.01")
_TENTHS = Decimal("0.1")

_MONTH_STYLES = {
    "long": "%B %Y",
    "short": "%b %y",
}


def _round(value: Decimal, places: Decimal) -> Decimal:
    """Round half-up with enough precision for any magnitude."""
    value = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 4)
        return value.quantize(places, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal, symbol: str = "$", grouping: bool = True) -> str:
    """
    Format an amount with two decimal places.

    grouping=False drops the thousands separator.

    >>> format_currency(Decimal("1234.5"))
    '$1,234.50'
    >>> format_currency(Decimal("-50"))
    '-$50.00'
    """
    rounded = _round(amount, _CENTS)
    sign = "-" if rounded < 0 else ""
    spec = ",.2f" if grouping else ".2f"
    return f"{sign}{symbol}{rounded.copy_abs():{spec}}"


def format_signed_amount(
    amount: Decimal,
    transaction_type: TransactionType,
    symbol: str = "$",
) -> str:
    """Amount prefixed with + for income and - for expense."""
    sign = "+" if transaction_type == TransactionType.INCOME else "-"
    return f"{sign}{format_currency(abs(amount), symbol)}"


def format_percentage(value: Decimal) -> str:
    """One decimal place, e.g. '83.3%'."""
    rounded = _round(value, _TENTHS)
    return f"{rounded}%"


def format_month_label(month: str, style: str = "long") -> str:
    """
    Turn a yyyy-mm key into a label.

    style "long" gives "January 2024", style "short" gives "Jan 24".
    """
    if style not in _MONTH_STYLES:
        raise ValueError(f"Unknown month label style: {style}")
    first_day = dt.datetime.strptime(month, "%Y-%m")
    return first_day.strftime(_MONTH_STYLES[style])


def format_display_date(value: dt.date) -> str:
    """e.g. "Jan 5, 2024"."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"
