"""Long-form date helpers shared by the document and letter formatters."""

from __future__ import annotations

from datetime import date
from typing import Optional


def long_date(day: Optional[date] = None) -> str:
    """Return a long-form date such as ``October 18, 2026``.

    Doxygen:
    - @param day: Date to render; defaults to today.
    - @return: Month name, day without padding, comma, four-digit year.
    """
    day = day or date.today()
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def month_name(day: Optional[date] = None) -> str:
    day = day or date.today()
    return day.strftime("%B")
