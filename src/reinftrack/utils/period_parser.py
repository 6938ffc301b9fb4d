"""Declaration period parsing utilities."""

import re
from datetime import date
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from reinftrack.domain.entities import DeclarationPeriod

_YEAR_FIRST = re.compile(r"^(\d{4})\s*[-/ ]?\s*[qt]([1-4])$")
_QUARTER_FIRST = re.compile(r"^(?:q([1-4])|([1-4])\s*(?:o|º)?\s*t(?:ri)?)\s*[-/ ]?\s*(\d{4})$")
_YEAR_DASH_QUARTER = re.compile(r"^(\d{4})-([1-4])$")


def parse_period(period_str: str, today: Optional[date] = None) -> DeclarationPeriod:
    """Parse a declaration quarter.

    Supports:
    - Quarter notation: "2024-Q1", "2024Q1", "Q1/2024", "Q1 2024", "1T2024",
      "1T/2024", "2024-1"
    - Relative quarters: "this quarter", "current", "last quarter", "next quarter"
    - Any date or relative date ("2024-02-15", "15/02/2024", "today",
      "last month"), resolved to the quarter containing it

    Args:
        period_str: Period string
        today: Reference date for relative values (defaults to today)

    Returns:
        DeclarationPeriod

    Raises:
        ValueError: If the string cannot be parsed
    """
    text = period_str.strip().lower()
    if not text:
        raise ValueError("Empty period string")
    today = today or date.today()

    match = _YEAR_FIRST.match(text)
    if match:
        return DeclarationPeriod(year=int(match.group(1)), quarter=int(match.group(2)))

    match = _QUARTER_FIRST.match(text)
    if match:
        quarter = int(match.group(1) or match.group(2))
        return DeclarationPeriod(year=int(match.group(3)), quarter=quarter)

    match = _YEAR_DASH_QUARTER.match(text)
    if match:
        return DeclarationPeriod(year=int(match.group(1)), quarter=int(match.group(2)))

    relative_quarters = {
        "this quarter": 0,
        "current": 0,
        "current quarter": 0,
        "last quarter": -3,
        "previous quarter": -3,
        "next quarter": 3,
    }
    if text in relative_quarters:
        return DeclarationPeriod.containing(today + relativedelta(months=relative_quarters[text]))

    return DeclarationPeriod.containing(parse_date(text, today=today))


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date, including a few relative forms.

    Numeric dates are read day-first ("05/02/2024" is 5 February), except
    ISO dates ("2024-02-05").

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - relativedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    iso = re.fullmatch(r"\d{4}-\d{1,2}-\d{1,2}", text) is not None
    try:
        return date_parser.parse(text, dayfirst=not iso, yearfirst=iso).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse period '{date_str}': {e}") from None
