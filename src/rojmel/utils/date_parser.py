"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Sort position for entries whose date cannot be read
SENTINEL_DATE = date(1970, 1, 1)
_SENTINEL_DATETIME = datetime.combine(SENTINEL_DATE, datetime.min.time())

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def _is_iso(text: str) -> bool:
    return len(text) == 10 and text[4] == "-"


def _start_of_week(day: date) -> date:
    return day - timedelta(days=day.weekday())


def _relative_anchor(direction: str, period: str, today: date) -> date | None:
    """Resolve "last/this/next <period>" to the first day of that period."""
    if period == "month":
        first = today.replace(day=1)
        offsets = {"last": -1, "this": 0, "next": 1}
        return first + relativedelta(months=offsets[direction])
    if period == "year":
        first = today.replace(month=1, day=1)
        offsets = {"last": -1, "this": 0, "next": 1}
        return first + relativedelta(years=offsets[direction])
    if period == "week":
        offsets = {"last": -7, "this": 0, "next": 7}
        return _start_of_week(today) + timedelta(days=offsets[direction])
    if direction == "last" and period in WEEKDAYS:
        days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
        return today - timedelta(days=days_ago)
    return None


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports ISO and free-form absolute dates ("2024-01-15", "15 Jan 2024",
    "15-01-2024" read day first) as well as relative expressions such as
    "today", "yesterday", "last month", "this week" or "last friday".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    fixed = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in fixed:
        return fixed[text]

    direction, _, period = text.partition(" ")
    if direction in ("last", "this", "next") and period:
        anchor = _relative_anchor(direction, period, today)
        if anchor is not None:
            return anchor

    try:
        # ISO strings are unambiguous; everything else is read the Indian way
        if _is_iso(text):
            return date.fromisoformat(text)
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_stored_date(date_str: str) -> date:
    """Parse a stored calendar date.

    Unlike ``parse_date`` there are no relative words and missing fields
    are taken from ``SENTINEL_DATE`` rather than from today, so the result
    never depends on when it is called.

    Raises:
        ValueError: If the string is not a calendar date
    """
    text = date_str.strip()
    try:
        if _is_iso(text):
            return date.fromisoformat(text)
        return date_parser.parse(text, dayfirst=True, default=_SENTINEL_DATETIME).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def safe_date(value) -> date:
    """Return a sortable date for any stored value, never raising.

    Dates pass through, datetimes are truncated, strings are read as fixed
    calendar dates and anything else maps to ``SENTINEL_DATE``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_stored_date(value)
        except ValueError:
            return SENTINEL_DATE
    return SENTINEL_DATE


def month_key(value) -> str:
    """Return the ``YYYY-MM`` bucket for a date-like value."""
    return safe_date(value).strftime("%Y-%m")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Current periods ("this-*") end today; past periods cover the whole
    previous month, year or Monday-to-Sunday week.

    Args:
        period: One of this-month, this-year, this-week, last-month,
            last-year, last-week

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-year":
        return today.replace(month=1, day=1), today
    if period == "this-week":
        return _start_of_week(today), today
    if period == "last-month":
        this_month = today.replace(day=1)
        return this_month - relativedelta(months=1), this_month - timedelta(days=1)
    if period == "last-year":
        this_year = today.replace(month=1, day=1)
        return this_year - relativedelta(years=1), this_year - timedelta(days=1)
    if period == "last-week":
        start = _start_of_week(today) - timedelta(days=7)
        return start, start + timedelta(days=6)

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
