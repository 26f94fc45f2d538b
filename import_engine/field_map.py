"""
import_engine.field_map - Column-name ↔ model-attribute mapping.

One block per file shape.  Headers are the French labels used by the
source spreadsheets (spells, class progressions) or the snake_case
names emitted by the bestiary exporter (monsters).
"""

# Header sets that identify a shape (see import_engine.shapes)
MONSTER_SHAPE_KEYS = frozenset({"name", "type", "details_json", "sections_json"})
CLASS_SHAPE_KEYS   = frozenset({"Classe", "Sous_Classe"})

# ── Spells ─────────────────────────────────────────────────────────────

SPELL_NAME_COLUMN    = "Nom"
SPELL_CLASSES_COLUMN = "Classes"
SPELL_YES            = "Oui"

# Plain text columns, "" → None
SPELL_TEXT_FIELDS: dict[str, str] = {
    "Temps_Unite":     "casting_time_unit",
    "Temps_Condition": "casting_time_condition",
    "Portee_Type":     "range_type",
    "Portee_Unite":    "range_unit",
    "Portee_Forme":    "range_shape",
    "Duree_Type":      "duration_type",
    "Duree_Unite":     "duration_unit",
    "Composantes":     "components",
    "Materiaux":       "materials",
    "Source":          "source",
    **{f"Niv_{n}": f"scaling_{n}" for n in range(1, 10)},
}

# Optional integers, unparsable → None
SPELL_INT_FIELDS: dict[str, str] = {
    "Temps_Valeur":  "casting_time_value",
    "Portee_Valeur": "range_value",
    "Duree_Valeur":  "duration_value",
}

# Yes/no flags ("Oui" is the only truthy spelling)
SPELL_FLAG_FIELDS: dict[str, str] = {
    "Rituel":        "ritual",
    "Concentration": "concentration",
}

# Long-form text run through the description cleaner
SPELL_PROSE_FIELDS: dict[str, str] = {
    "Description":     "description",
    "Niveaux_Sup_Txt": "higher_levels",
}

# ── Class / spell-slot progression ─────────────────────────────────────

CLASS_COLUMN    = "Classe"
SUBCLASS_COLUMN = "Sous_Classe"
LEVEL_COLUMN    = "Niveau"
SLOT_FIELDS: dict[str, str] = {
    f"Niv_{n}": f"slot_level_{n}" for n in range(1, 10)
}

# ── Monsters ───────────────────────────────────────────────────────────

MONSTER_TEXT_FIELDS: dict[str, str] = {
    "trad_raw":         "trad_raw",
    "ac":               "ac",
    "hp":               "hp",
    "speed":            "speed",
    "str_mod":          "str_mod",
    "dex_mod":          "dex_mod",
    "con_mod":          "con_mod",
    "int_mod":          "int_mod",
    "wis_mod":          "wis_mod",
    "cha_mod":          "cha_mod",
    "description_text": "description_text",
    "image_url":        "image_url",
}

MONSTER_ABILITY_FIELDS: dict[str, str] = {
    "str": "str",
    "dex": "dex",
    "con": "con",
    "int": "int_",
    "wis": "wis",
    "cha": "cha",
}

# JSON columns and the empty value each one falls back to
MONSTER_JSON_FIELDS: dict[str, tuple[str, type]] = {
    "trad_json":     ("trad_json", list),
    "details_json":  ("details_json", dict),
    "sections_json": ("sections_json", list),
    "links_json":    ("links_json", list),
}
