"""Text parsing helpers for values scraped from mackolik pages."""
import math
import re
from datetime import datetime
from typing import Optional

_PARENTHESIZED = re.compile(r"\(([^)]+)\)")


def parse_decimal(text: Optional[str]) -> Optional[float]:
    """
    Parse a number written with a decimal comma (e.g. '1,85').

    Args:
        text: Raw text from the page, decimal comma or point

    Returns:
        Finite float or None if the text is not a number
    """
    if not text:
        return None

    text = text.strip().replace(",", ".")
    if not text:
        return None

    try:
        value = float(text)
    except ValueError:
        return None

    if not math.isfinite(value):
        return None
    return value


def parse_limit(header: Optional[str]) -> Optional[float]:
    """
    Extract the threshold from a market header like 'ALT/ÜST (155,5)'.

    Returns None when the header has no parenthesized number.
    """
    if not header:
        return None

    match = _PARENTHESIZED.search(header)
    if not match:
        return None
    return parse_decimal(match.group(1))


def parse_score(text: Optional[str]) -> Optional[int]:
    """Parse a final score like '85'; None for '-' or empty cells."""
    if text is None:
        return None
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_match_date(date_str: Optional[str]) -> Optional[datetime]:
    """
    Parse a fixture date label like 'Salı 30.09.2025'.

    The kickoff time is not part of the label, so the timestamp is noon
    on that day.

    Returns:
        datetime object or None
    """
    if not date_str:
        return None

    parts = date_str.split()
    if len(parts) < 2:
        return None

    try:
        day, month, year = (int(p) for p in parts[1].split("."))
        return datetime(year, month, day, 12, 0, 0)
    except ValueError:
        return None
