"""Text formatting helpers shared by the CLI commands."""

from datetime import date
from decimal import Decimal

from rojmel.utils.amount_parser import ZERO, coerce_amount

DEFAULT_CURRENCY = "₹"

# Display patterns understood by the project date_format setting
_DATE_PATTERNS = {
    "dd-MM-yyyy": "%d-%m-%Y",
    "dd/MM/yyyy": "%d/%m/%Y",
    "MM/dd/yyyy": "%m/%d/%Y",
    "yyyy-MM-dd": "%Y-%m-%d",
    "dd MMM yyyy": "%d %b %Y",
}


def _group_indian(digits: str) -> str:
    """Group an integer string the Indian way (12,34,567)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_money(amount, currency: str = DEFAULT_CURRENCY) -> str:
    """Format an amount with two decimals and lakh/crore digit grouping.

    Examples:
        >>> format_money(Decimal("1234567.5"))
        '₹12,34,567.50'
        >>> format_money(-500)
        '-₹500.00'
    """
    value = coerce_amount(amount).quantize(Decimal("0.01"))
    sign = "-" if value < ZERO else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")
    return f"{sign}{currency}{_group_indian(whole)}.{fraction}"


def format_date(value: date, date_format: str = "dd-MM-yyyy") -> str:
    """Render a date using a project date_format setting."""
    return value.strftime(_DATE_PATTERNS.get(date_format, "%d-%m-%Y"))


def describe_balance(balance: Decimal, currency: str = DEFAULT_CURRENCY) -> str:
    """Explain a signed party balance in words."""
    if balance > ZERO:
        return f"{format_money(balance, currency)} (owes you)"
    if balance < ZERO:
        return f"{format_money(-balance, currency)} (you owe)"
    return f"{format_money(ZERO, currency)} (settled)"
