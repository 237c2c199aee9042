"""
Amount helpers for exact decimal money arithmetic.

Amounts arrive as JSON numbers, spreadsheet cells or CSV text and are kept
as Decimal from then on so that grouping by amount and comparing balances
never depends on binary floating point.
"""
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional, Union

from config import BALANCE_TOLERANCE, MONEY_QUANTUM, get_config


def parse_amount(value: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """
    Parse an amount value into a Decimal.

    Handles:
    - JSON numbers (int or float, converted through their shortest repr)
    - Plain numeric strings: "1000", "-30.5", "+12.00"
    - Thousands separators and surrounding spaces: "1,250.00", " 42 "

    Args:
        value: A string/number that might be an amount

    Returns:
        A finite Decimal, or None if the value is not a usable amount
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        value_str = re.sub(r'[\s,]', '', value)
        if not value_str:
            return None
        try:
            amount = Decimal(value_str)
        except InvalidOperation:
            return None
    else:
        return None

    if not amount.is_finite():
        return None
    return amount


def has_valid_amount(value: Union[str, int, float, Decimal, None]) -> bool:
    """Check if a value contains a parseable, finite amount."""
    return parse_amount(value) is not None


def round_money(amount: Decimal) -> Decimal:
    """
    Round to cents, halves away from zero.

    Precision is widened to hold every integer digit plus the cents, so
    very large balances are rounded instead of raising InvalidOperation.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def amounts_equal(first: Decimal, second: Decimal) -> bool:
    """Two amounts are equal when they differ by less than the tolerance."""
    return abs(first - second) < BALANCE_TOLERANCE


def to_number(amount: Decimal) -> Union[int, float]:
    """Convert a Decimal for JSON output, keeping whole values integral."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def format_amount(amount: Optional[Decimal], signed: bool = False) -> str:
    """
    Format an amount for human-readable messages.

    Args:
        amount: The amount to format
        signed: Whether to prefix positive amounts with '+'

    Returns:
        Formatted amount string, e.g. "1250.5" or "+100"
    """
    if amount is None:
        return ""

    text = str(to_number(amount))
    if signed and amount > 0:
        text = "+" + text

    symbol = get_config().get("currency_symbol", "")
    return f"{text}{symbol}"
