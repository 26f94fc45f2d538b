"""
import_engine.row_processor - Validate and coerce one CSV row.

Single-responsibility: given a dict-row, return the keyword arguments
for the matching model, or raise RowError.  Nothing here touches the
database.
"""

from __future__ import annotations

import json
import re

from import_engine.field_map import (
    LEVEL_COLUMN,
    MONSTER_ABILITY_FIELDS,
    MONSTER_JSON_FIELDS,
    MONSTER_TEXT_FIELDS,
    SLOT_FIELDS,
    SPELL_FLAG_FIELDS,
    SPELL_INT_FIELDS,
    SPELL_NAME_COLUMN,
    SPELL_PROSE_FIELDS,
    SPELL_TEXT_FIELDS,
    SPELL_YES,
)
from import_engine.text_cleaner import clean_description


class RowError(Exception):
    """Raised when a row cannot be imported."""
    pass


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


# ── Scalar coercion ───────────────────────────────────────────────────

def parse_optional_int(value: str | None) -> int | None:
    """
    Leading integer of *value* ("12", " 7 ft" → 7), else None.
    """
    if not value:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def parse_int(value: str | None, default: int) -> int:
    parsed = parse_optional_int(value)
    return default if parsed is None else parsed


def text_or_none(value: str | None) -> str | None:
    """Trimmed text, or None when nothing is left."""
    value = str(value or "").strip()
    return value or None


def normalize_json(value: str | None, fallback: type) -> str:
    """
    Re-serialise a JSON cell.  Blank, malformed, or wrongly-shaped input
    (e.g. an object where a list is expected) becomes ``fallback()``.
    """
    raw = str(value or "").strip()
    if not raw:
        return json.dumps(fallback())
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        return json.dumps(fallback())
    if not isinstance(parsed, fallback):
        return json.dumps(fallback())
    return json.dumps(parsed, ensure_ascii=False)


# ── Shape-specific rows ───────────────────────────────────────────────

def is_header_echo(value: str | None, header: str) -> bool:
    """True for a data cell that just repeats its column label."""
    return str(value or "").strip().lower() == header.lower()


def spell_values(row: dict) -> dict:
    """Column values for a Spell built from a spell-shaped row."""
    name = str(row.get(SPELL_NAME_COLUMN) or "").strip()
    if not name:
        raise RowError("Nom manquant")

    values: dict = {
        "name": name,
        "level": parse_int(row.get("Niveau"), 0),
        "school": str(row.get("Ecole") or "").strip(),
    }
    for col, attr in SPELL_FLAG_FIELDS.items():
        values[attr] = row.get(col) == SPELL_YES
    for col, attr in SPELL_INT_FIELDS.items():
        values[attr] = parse_optional_int(row.get(col))
    for col, attr in SPELL_TEXT_FIELDS.items():
        values[attr] = row.get(col) or None
    for col, attr in SPELL_PROSE_FIELDS.items():
        values[attr] = clean_description(row.get(col)) or None
    return values


def slot_values(row: dict) -> dict:
    """Progression columns of a class/spell-slot row (ids added by caller)."""
    values = {"character_level": parse_int(row.get(LEVEL_COLUMN), 1) or 1}
    for col, attr in SLOT_FIELDS.items():
        values[attr] = parse_int(row.get(col), 0)
    return values


def monster_values(row: dict) -> dict:
    """Column values for a Monster.  Name and type are required."""
    name = str(row.get("name") or "").strip()
    if not name:
        raise RowError("Nom manquant")
    monster_type = str(row.get("type") or "").strip()
    if not monster_type:
        raise RowError("Type manquant")

    values: dict = {"name": name, "type": monster_type}
    for col, attr in MONSTER_TEXT_FIELDS.items():
        values[attr] = text_or_none(row.get(col))
    for col, attr in MONSTER_ABILITY_FIELDS.items():
        values[attr] = parse_optional_int(row.get(col))
    for col, (attr, empty) in MONSTER_JSON_FIELDS.items():
        values[attr] = normalize_json(row.get(col), empty)
    return values
