"""
Date sort keys for loosely formatted date strings.

The office API stores dates however the form that created them sent
them: "30-05-2025", "2025-05-30", "2025-05-30T09:12:44.120Z". Sorting
those as strings is meaningless, so each one is reduced to
YYYY*10000 + MM*100 + DD before comparing.
"""

import re
from datetime import date, datetime
from typing import Any

MIN_DATE_KEY = float("-inf")

_DAY_FIRST = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})$")
_YEAR_FIRST = re.compile(r"^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})(?:$|[T\s])")


def _key(year: int, month: int, day: int) -> int | float:
    try:
        date(year, month, day)
    except ValueError:
        return MIN_DATE_KEY
    return year * 10000 + month * 100 + day


def date_sort_key(value: Any) -> int | float:
    """Comparable key for a date-ish value; unparsable -> MIN_DATE_KEY."""
    if isinstance(value, datetime):
        return _key(value.year, value.month, value.day)
    if isinstance(value, date):
        return _key(value.year, value.month, value.day)
    if not isinstance(value, str):
        return MIN_DATE_KEY

    text = value.strip()
    match = _DAY_FIRST.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        return _key(year, month, day)

    match = _YEAR_FIRST.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _key(year, month, day)

    return MIN_DATE_KEY
