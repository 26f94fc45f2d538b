"""
services.validation - Coercion helpers shared by the write paths.
"""

from __future__ import annotations

from services.errors import InvalidInput


def as_int(value, field: str) -> int | None:
    """int(value), None for a blank value, InvalidInput otherwise."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInput(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{field} must be an integer") from None


def as_text(value) -> str | None:
    """Trimmed text, or None when nothing is left."""
    text = "" if value is None else str(value).strip()
    return text or None
