from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union


DateLike = Union[str, date, datetime]

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S%z", "%B %d, %Y", "%b %d, %Y")


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        for fmt in _DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass

    raise ValueError(f"Unrecognized date '{value}'")


def format_date(post_date: DateLike, today: Optional[date] = None) -> str:
    """Render a post date as ``Mar 5``, adding the year only for past years.

    ``today`` defaults to the current local date.
    """
    parsed = parse_date(post_date)
    this_year = (today or date.today()).year

    text = f"{parsed:%b} {parsed.day}"
    if parsed.year < this_year:
        text = f"{text}, {parsed.year}"
    return text
