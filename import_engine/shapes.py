"""
import_engine.shapes - Recognise which of the three file layouts was uploaded.

Files carry no version marker; the header names alone decide.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable

from import_engine.field_map import CLASS_SHAPE_KEYS, MONSTER_SHAPE_KEYS


class CsvShape(str, enum.Enum):
    SPELLS = "spells"
    CLASSES = "classes"
    MONSTERS = "monsters"


def detect_shape(field_names: Iterable[str]) -> CsvShape:
    """First match wins: monsters, then class/spell-slot rows, else spells."""
    names = set(field_names)
    if MONSTER_SHAPE_KEYS <= names:
        return CsvShape.MONSTERS
    if CLASS_SHAPE_KEYS <= names:
        return CsvShape.CLASSES
    return CsvShape.SPELLS
