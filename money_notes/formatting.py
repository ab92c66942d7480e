"""Display helpers for amounts and date ranges."""

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

CURRENCY_SYMBOLS = {
    "CNY": "¥",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def format_money(amount: Decimal, currency: str = "CNY") -> str:
    """Format an amount as e.g. ¥1,234.50 or -$3.00."""
    value = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    prefix = "-" if value < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{prefix}{symbol}{abs(value):,.2f}"


def current_month_range(today: Optional[date] = None) -> tuple[date, date]:
    """First and last day of the month containing `today`."""
    today = today or date.today()
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)
