# around/utils/parsing.py
"""Lenient request-value parsing"""

from typing import Optional


def parse_or_default(value: Optional[str], default: float = 0.0) -> float:
    """Parse a float, returning ``default`` for missing or malformed input.

    Never raises: ``None``, empty strings, ``"abc"``, ``"nan"``, ``"inf"``,
    surrounding whitespace (``" 1.5"``) and digit separators (``"1_000"``)
    all map to ``default``.
    """
    if value is None or "_" in value or value != value.strip():
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if result != result or result in (float("inf"), float("-inf")):
        return default
    return result


def radius_from_range(range_km: Optional[str], default: str = "200km") -> str:
    """Build the search radius string from the optional ``range`` parameter"""
    if range_km:
        return f"{range_km}km"
    return default
