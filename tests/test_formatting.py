"""Tests for CLI formatting helpers."""

import pytest
from datetime import date
from decimal import Decimal

from rojmel.cli.formatting import describe_balance, format_date, format_money


@pytest.mark.parametrize(
    "amount, expected",
    [
        (Decimal("0"), "₹0.00"),
        (Decimal("999.5"), "₹999.50"),
        (Decimal("1000"), "₹1,000.00"),
        (Decimal("100000"), "₹1,00,000.00"),
        (Decimal("12345678.9"), "₹1,23,45,678.90"),
        (Decimal("-2500"), "-₹2,500.00"),
        ("abc", "₹0.00"),
    ],
)
def test_format_money(amount, expected):
    assert format_money(amount) == expected


def test_format_money_custom_currency():
    assert format_money(Decimal("10"), "Rs ") == "Rs 10.00"


def test_format_date_uses_project_setting():
    assert format_date(date(2024, 1, 5)) == "05-01-2024"
    assert format_date(date(2024, 1, 5), "yyyy-MM-dd") == "2024-01-05"
    assert format_date(date(2024, 1, 5), "unknown") == "05-01-2024"


def test_describe_balance():
    assert describe_balance(Decimal("500")) == "₹500.00 (owes you)"
    assert describe_balance(Decimal("-500")) == "₹500.00 (you owe)"
    assert describe_balance(Decimal("0")) == "₹0.00 (settled)"
