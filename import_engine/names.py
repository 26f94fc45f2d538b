"""
import_engine.names - Class and subclass name normalisation.

Spreadsheets spell class names inconsistently ("Rôdeur", "RODEUR",
"Sorcier (Occultiste)" …).  Everything is folded to an accent-free,
lower-case slug, then mapped through a fixed alias table.
"""

from __future__ import annotations

import re
import unicodedata
from types import MappingProxyType

# folded spelling → canonical slug
CLASS_ALIASES = MappingProxyType({
    "artificier": "artificier",
    "barde": "barde",
    "clerc": "clerc",
    "druide": "druide",
    "ensorceleur": "ensorceleur",
    "guerrier": "guerrier",
    "magicien": "magicien",
    "paladin": "paladin",
    "roublard": "roublard",
    "rodeur": "rodeur",
    "r\u03bfdeur": "rodeur",     # Greek omicron typo found in exports
    "sorcier (occultiste)": "occultiste",
    "occultiste": "occultiste",
})

# canonical slug → label shown to users
CLASS_DISPLAY_NAMES = MappingProxyType({
    "artificier": "Artificier",
    "barde": "Barde",
    "clerc": "Clerc",
    "druide": "Druide",
    "ensorceleur": "Ensorceleur",
    "guerrier": "Guerrier",
    "magicien": "Magicien",
    "paladin": "Paladin",
    "roublard": "Roublard",
    "rodeur": "Rôdeur",
    "occultiste": "Occultiste",
})

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def fold(text: str) -> str:
    """Lower-case, trim and strip diacritics."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower().strip())
    return _COMBINING_MARKS.sub("", decomposed)


def normalize_class_name(name: str) -> str:
    folded = fold(name)
    return CLASS_ALIASES.get(folded, folded)


def class_display_name(slug: str) -> str:
    return CLASS_DISPLAY_NAMES.get(slug, slug)


def resolve_class(name: str) -> str | None:
    """Canonical slug for *name*, or None when it is not a known class."""
    slug = normalize_class_name(name)
    return slug if slug in CLASS_DISPLAY_NAMES else None


def split_class_list(value: str) -> list[str]:
    """Split a comma-separated "Classes" cell, dropping blanks."""
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def normalize_subclass_name(name: str) -> str:
    return _NON_SLUG.sub("_", fold(name)).strip("_")


def subclass_key(class_slug: str, subclass_name: str) -> str:
    """Composite key identifying a subclass across classes."""
    return f"{class_slug}:{normalize_subclass_name(subclass_name)}"
