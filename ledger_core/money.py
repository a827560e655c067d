"""
Monetary Amount Module

Exact decimal handling for ledger amounts. The ledger is single-currency, so
an amount is a plain Decimal quantized to cents. NEVER uses float for
monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext
from typing import Union
import re

# Set global decimal context for financial precision
getcontext().prec = 28

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

AmountLike = Union[Decimal, int, str]

_PLAIN_AMOUNT = re.compile(r'^\d+(\.\d+)?$')
_GROUPED_AMOUNT = re.compile(r'^\d{1,3}(,\d{3})+(\.\d+)?$')


def to_decimal(value: AmountLike) -> Decimal:
    """
    Convert an int, string or Decimal to Decimal without rounding

    Args:
        value: Amount as Decimal, int or numeric string

    Returns:
        Decimal value

    Raises:
        ValueError: If value is a float, a bool, or cannot be parsed
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"Amounts must be Decimal, int or str, got {type(value).__name__}")
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        result = decimal_from_string(value)
    else:
        raise ValueError(f"Amounts must be Decimal, int or str, got {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"Amount must be a finite number, got {value!r}")
    return result


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling common formats

    Accepts a leading currency symbol and comma thousands separators
    ("$1,250.50" -> Decimal('1250.50')). Anything else that is not a plain
    decimal number (exponents, letters, misplaced commas) is rejected.
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    clean_value = value.strip()
    sign = ''
    if clean_value[:1] in ('+', '-'):
        sign, clean_value = clean_value[0], clean_value[1:]
    if clean_value.startswith('$'):
        clean_value = clean_value[1:]

    if ',' in clean_value:
        if not _GROUPED_AMOUNT.match(clean_value):
            raise ValueError(f"Cannot convert '{value}' to Decimal")
        clean_value = clean_value.replace(',', '')

    if not _PLAIN_AMOUNT.match(clean_value):
        raise ValueError(f"Cannot convert '{value}' to Decimal")

    try:
        return Decimal(sign + clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal")


def quantize_cents(value: Decimal) -> Decimal:
    """Round a Decimal to cents using ROUND_HALF_UP"""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def has_valid_precision(value: Decimal) -> bool:
    """Check that a Decimal has at most two decimal places"""
    exponent = value.normalize().as_tuple().exponent
    return isinstance(exponent, int) and exponent >= -2


def format_amount(value: Decimal) -> str:
    """Format for display, e.g. $1,250.50"""
    return f"${quantize_cents(value):,.2f}"
