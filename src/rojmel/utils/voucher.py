"""Voucher number generation."""

import random
from datetime import date
from typing import Optional


def generate_voucher_no(on: Optional[date] = None) -> str:
    """Generate a human-facing voucher number like ``V-202401-042``.

    The three trailing digits are random, so numbers are not guaranteed to
    be unique; they only help people match paper slips to entries.
    """
    on = on or date.today()
    return f"V-{on.year}{on.month:02d}-{random.randint(0, 999):03d}"
