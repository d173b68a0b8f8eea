"""
Shop API - Shared Helpers
==========================
Pure utility functions with NO database or module dependencies.
"""

from datetime import datetime, timezone
from typing import Hashable, Iterable, List, Optional


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def safe_int(value: Optional[str]) -> Optional[int]:
    """Safely convert a string to int. Returns None on failure."""
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except (ValueError, TypeError):
        return None


def find_duplicates(values: Iterable[Hashable]) -> List:
    """Values that appear more than once, in first-repeat order."""
    seen = set()
    dupes = []
    for v in values:
        if v in seen and v not in dupes:
            dupes.append(v)
        seen.add(v)
    return dupes
