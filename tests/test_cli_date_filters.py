"""Tests for CLI date filter helpers."""

from datetime import date

import click
import pytest

from rojmel.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from rojmel.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_multiple_periods(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date=None,
            end_date=None,
            period_flags={"this-month": True, "last-month": True},
        )

    assert excinfo.value.exit_code == 1
    assert "Only one period option" in capsys.readouterr().err


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(),
            start_date="2024-01-01",
            end_date=None,
            period_flags={"this-month": True},
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_resolve_cli_date_range_returns_period_range():
    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={"last-year": True}
    )

    assert (start, end) == get_date_range("last-year")


def test_resolve_cli_date_range_parses_day_first_dates():
    start, end = resolve_cli_date_range(
        _ctx(), start_date="02-01-2024", end_date="2024-01-05", period_flags={}
    )

    assert start == date(2024, 1, 2)
    assert end == date(2024, 1, 5)


def test_resolve_cli_date_range_applies_default_range():
    default_range = (date(2020, 1, 1), date(2020, 1, 31))

    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={}, default_range=default_range
    )

    assert (start, end) == default_range


def test_resolve_cli_date_range_open_ended():
    start, end = resolve_cli_date_range(_ctx(), start_date="2024-01-01", end_date=None, period_flags={})

    assert start == date(2024, 1, 1)
    assert end is None


def test_resolve_cli_date_range_invalid_end_date(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date=None, end_date="someday", period_flags={})

    assert excinfo.value.exit_code == 1
    assert "Invalid end date" in capsys.readouterr().err


def test_resolve_cli_date_range_rejects_reversed_range(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(
            _ctx(), start_date="2024-02-01", end_date="2024-01-01", period_flags={}
        )

    assert "is after end date" in capsys.readouterr().err


def test_period_flags_from_pops_flags():
    params = {"this_month": True, "last_week": False, "verbose": True}

    flags = period_flags_from(params)

    assert flags["this-month"] is True
    assert flags["last-week"] is False
    assert set(flags) == {"this-month", "this-year", "this-week", "last-month", "last-year", "last-week"}
    assert params == {"verbose": True}


def test_period_options_adds_flags():
    @click.command()
    @period_options
    def command(start_date, end_date, **period_params):
        pass

    names = {param.name for param in command.params}
    assert {"start_date", "end_date", "this_month", "last_week"} <= names
