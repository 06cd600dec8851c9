"""Utility functions for rojmel."""

from rojmel.utils.date_parser import parse_date, safe_date
from rojmel.utils.amount_parser import parse_amount, coerce_amount
from rojmel.utils.voucher import generate_voucher_no

__all__ = ["parse_date", "safe_date", "parse_amount", "coerce_amount", "generate_voucher_no"]
