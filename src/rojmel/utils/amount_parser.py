"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

ZERO = Decimal("0")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "₹123.45" or "Rs. 123.45"
    - "-123.45"
    - "1,234.56" and Indian grouping "1,00,000"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"\b(rs\.?|inr)\s*", "", amount_str, flags=re.IGNORECASE)
    amount_str = re.sub(r"[$€£¥₹]", "", amount_str)

    # Remove commas
    amount_str = amount_str.replace(",", "")

    # Remove whitespace again
    amount_str = amount_str.strip()

    try:
        amount = Decimal(amount_str)
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")

    return -amount if is_negative else amount


def is_finite_amount(value) -> bool:
    """Return True for a real (non-boolean) finite number."""
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float)):
        return False
    return Decimal(value).is_finite()


def coerce_amount(value) -> Decimal:
    """Coerce a stored amount into a Decimal for ledger arithmetic.

    Ledger arithmetic never fails on bad data: ``None``, empty strings,
    non-numeric text, NaN and infinities all become zero. Strings must be
    plain numbers; currency symbols, digit grouping and the accounting
    ``(500)`` notation are only understood by ``parse_amount``.

    Args:
        value: Decimal, int, float, str or None

    Returns:
        Decimal amount, ``0`` when the value is not a usable number
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    if isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            return ZERO
        return amount if amount.is_finite() else ZERO

    return ZERO
