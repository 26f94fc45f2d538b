"""
services.monster_service - Bestiary listing, lookup, and payload shaping.

Stored JSON columns are trusted only as far as json.loads goes; the
shaping helpers coerce whatever comes back into the structures the
client expects and silently drop entries that do not fit.

Writes take the same keys as the bestiary CSV columns (name, type, hp,
int, details_json, …); JSON columns accept either encoded text or the
decoded list/object and go through the same normalisation as an import.
"""

from __future__ import annotations

import json

from sqlalchemy import or_
from sqlalchemy.orm import Session

from db.models import Monster
from import_engine.field_map import (
    MONSTER_ABILITY_FIELDS, MONSTER_JSON_FIELDS, MONSTER_TEXT_FIELDS,
)
from import_engine.row_processor import normalize_json
from services.errors import InvalidInput, NotFound
from services.validation import as_int, as_text


def _string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item)]


def _string_map(value) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


def _links(value) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [
        {"href": str(item.get("href") or ""), "text": str(item.get("text") or "")}
        for item in value if isinstance(item, dict)
    ]


def _sections(value) -> list[dict]:
    if not isinstance(value, list):
        return []
    sections = []
    for section in value:
        if not isinstance(section, dict):
            continue
        entries = section.get("entries")
        sections.append({
            "title": str(section.get("title") or "Section"),
            "entries": [
                {
                    "kind": str(e.get("kind") or "paragraph"),
                    "name": str(e.get("name") or ""),
                    "text": str(e.get("text") or ""),
                }
                for e in (entries if isinstance(entries, list) else [])
                if isinstance(e, dict)
            ],
        })
    return sections


class MonsterService:

    @staticmethod
    def serialize(monster: Monster) -> dict:
        """to_dict() with the JSON columns coerced to their client shapes."""
        d = monster.to_dict()
        d["trad"] = _string_list(d["trad"])
        d["details"] = _string_map(d["details"])
        d["sections"] = _sections(d["sections"])
        d["links"] = _links(d["links"])
        return d

    @staticmethod
    def search(
        session: Session,
        *,
        q: str = "",
        types: list[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Monster], int]:
        """Search monsters by name/type/description.  Returns (list, total)."""
        query = session.query(Monster)

        if types:
            query = query.filter(Monster.type.in_(types))

        q = (q or "").strip()
        if q:
            term = f"%{q}%"
            query = query.filter(or_(
                Monster.name.ilike(term),
                Monster.type.ilike(term),
                Monster.description_text.ilike(term),
            ))

        total = query.count()
        query = query.order_by(Monster.name).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all(), total

    @staticmethod
    def get(session: Session, monster_id: int) -> Monster | None:
        return session.get(Monster, monster_id)

    @staticmethod
    def types(session: Session) -> list[str]:
        rows = session.query(Monster.type).distinct().order_by(Monster.type)
        return [t for (t,) in rows]

    # ── Create / Update / Delete ───────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> Monster:
        """Required keys: name, type."""
        values = MonsterService._validate(session, data, partial=False)
        for attr, empty in MONSTER_JSON_FIELDS.values():
            values.setdefault(attr, json.dumps(empty()))
        monster = Monster(**values)
        session.add(monster)
        session.flush()
        return monster

    @staticmethod
    def update(session: Session, monster_id: int, data: dict) -> Monster:
        monster = session.get(Monster, monster_id)
        if monster is None:
            raise NotFound(f"monster {monster_id} not found")
        values = MonsterService._validate(session, data, partial=True, current=monster)
        for attr, value in values.items():
            setattr(monster, attr, value)
        session.flush()
        return monster

    @staticmethod
    def delete(session: Session, monster_id: int) -> None:
        """Favorites of the monster go with it (FK cascade)."""
        monster = session.get(Monster, monster_id)
        if monster is None:
            raise NotFound(f"monster {monster_id} not found")
        session.delete(monster)
        session.flush()

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _validate(
        session: Session,
        data: dict,
        *,
        partial: bool,
        current: Monster | None = None,
    ) -> dict:
        values: dict = {}

        for key in ("name", "type"):
            if key in data or not partial:
                value = as_text(data.get(key))
                if value is None:
                    raise InvalidInput(f"{key} is required")
                values[key] = value

        if "name" in values:
            clash = session.query(Monster.id).filter(Monster.name == values["name"])
            if current is not None:
                clash = clash.filter(Monster.id != current.id)
            if clash.first() is not None:
                raise InvalidInput(f"a monster named {values['name']!r} already exists")

        for col, attr in MONSTER_TEXT_FIELDS.items():
            if col in data:
                values[attr] = as_text(data[col])
        for col, attr in MONSTER_ABILITY_FIELDS.items():
            if col in data:
                values[attr] = as_int(data[col], col)
        for col, (attr, empty) in MONSTER_JSON_FIELDS.items():
            if col in data:
                raw = data[col]
                if isinstance(raw, (list, dict)):
                    raw = json.dumps(raw, ensure_ascii=False)
                values[attr] = normalize_json(raw, empty)

        return values
