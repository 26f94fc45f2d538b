"""
services.spell_service - Spell catalogue listing and lookup.

Filters mirror the browse page: free text over name and description,
a set of class slugs, and a set of spell levels.

Writes take the model attribute names (name, level, school, ritual, …)
plus ``classes``, a list of class names resolved like an import does.
"""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.orm import Session

from db.models import CharacterClass, Spell, SpellClass, Subclass
from import_engine.field_map import (
    SPELL_FLAG_FIELDS, SPELL_INT_FIELDS, SPELL_PROSE_FIELDS, SPELL_TEXT_FIELDS,
)
from import_engine.names import class_display_name, resolve_class, split_class_list
from import_engine.text_cleaner import clean_description
from services.errors import InvalidInput, NotFound
from services.validation import as_int, as_text

SPELL_LEVELS = list(range(10))


class SpellService:

    @staticmethod
    def search(
        session: Session,
        *,
        q: str = "",
        classes: list[str] | None = None,
        levels: list[int] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Spell], int]:
        """
        Search spells.  Returns (spells_list, total_count), ordered by
        level then name.
        """
        query = session.query(Spell)

        if levels:
            query = query.filter(Spell.level.in_(levels))

        q = (q or "").strip()
        if q:
            term = f"%{q}%"
            query = query.filter(or_(Spell.name.ilike(term),
                                     Spell.description.ilike(term)))

        if classes:
            with_class = (
                session.query(SpellClass.spell_id)
                .join(CharacterClass, CharacterClass.id == SpellClass.class_id)
                .filter(CharacterClass.slug.in_(classes))
            )
            query = query.filter(Spell.id.in_(with_class))

        total = query.count()
        query = query.order_by(Spell.level, Spell.name).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all(), total

    @staticmethod
    def get(session: Session, spell_id: int) -> Spell | None:
        return session.get(Spell, spell_id)

    @staticmethod
    def list_classes(session: Session) -> list[CharacterClass]:
        return session.query(CharacterClass).order_by(CharacterClass.display_name).all()

    @staticmethod
    def list_subclasses(session: Session, class_id: int) -> list[Subclass]:
        return (
            session.query(Subclass)
            .filter(Subclass.class_id == class_id)
            .order_by(Subclass.display_name)
            .all()
        )

    @staticmethod
    def levels_for_classes(session: Session, classes: list[str] | None) -> list[int]:
        """
        Spell levels that have at least one spell for the given class slugs.
        Every level when no class is given or none of them exists.
        """
        if not classes:
            return list(SPELL_LEVELS)
        class_ids = [
            cid for (cid,) in
            session.query(CharacterClass.id).filter(CharacterClass.slug.in_(classes))
        ]
        if not class_ids:
            return list(SPELL_LEVELS)
        rows = (
            session.query(Spell.level)
            .join(SpellClass, SpellClass.spell_id == Spell.id)
            .filter(SpellClass.class_id.in_(class_ids))
            .distinct()
            .order_by(Spell.level)
        )
        return [level for (level,) in rows]

    # ── Create / Update / Delete ───────────────────────────────────────

    @staticmethod
    def create(session: Session, data: dict) -> Spell:
        """Required key: name.  ``classes`` links the spell to those classes."""
        values = SpellService._validate(data, partial=False)
        spell = Spell(**values)
        session.add(spell)
        session.flush()
        SpellService._link_classes(session, spell, data.get("classes"))
        return spell

    @staticmethod
    def update(session: Session, spell_id: int, data: dict) -> Spell:
        """Partial update; ``classes``, when present, replaces every link."""
        spell = session.get(Spell, spell_id)
        if spell is None:
            raise NotFound(f"spell {spell_id} not found")
        values = SpellService._validate(data, partial=True)
        for attr, value in values.items():
            setattr(spell, attr, value)
        session.flush()
        if "classes" in data:
            SpellService._link_classes(session, spell, data["classes"])
        return spell

    @staticmethod
    def delete(session: Session, spell_id: int) -> None:
        """Class links and prepared entries go with the spell (FK cascade)."""
        spell = session.get(Spell, spell_id)
        if spell is None:
            raise NotFound(f"spell {spell_id} not found")
        session.delete(spell)
        session.flush()

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _validate(data: dict, *, partial: bool) -> dict:
        values: dict = {}

        if "name" in data or not partial:
            name = as_text(data.get("name"))
            if name is None:
                raise InvalidInput("name is required")
            values["name"] = name

        if "level" in data or not partial:
            level = as_int(data.get("level", 0), "level")
            if level is None or level not in SPELL_LEVELS:
                raise InvalidInput("level must be between 0 and 9")
            values["level"] = level

        if "school" in data or not partial:
            values["school"] = as_text(data.get("school")) or ""

        for attr in SPELL_FLAG_FIELDS.values():
            if attr in data:
                if not isinstance(data[attr], bool):
                    raise InvalidInput(f"{attr} must be true or false")
                values[attr] = data[attr]
        for attr in SPELL_INT_FIELDS.values():
            if attr in data:
                values[attr] = as_int(data[attr], attr)
        for attr in SPELL_TEXT_FIELDS.values():
            if attr in data:
                values[attr] = as_text(data[attr])
        for attr in SPELL_PROSE_FIELDS.values():
            if attr in data:
                values[attr] = clean_description(as_text(data[attr]))

        return values

    @staticmethod
    def _link_classes(session: Session, spell: Spell, names) -> None:
        """Replace the spell's classes; unknown class names are dropped."""
        if isinstance(names, str):
            names = split_class_list(names)
        elif names is None:
            names = []
        elif not isinstance(names, list):
            raise InvalidInput("classes must be a list of class names")

        slugs = dict.fromkeys(s for s in (resolve_class(str(n)) for n in names) if s)
        existing = {
            c.slug: c for c in
            session.query(CharacterClass).filter(CharacterClass.slug.in_(list(slugs)))
        }

        session.query(SpellClass).filter(SpellClass.spell_id == spell.id).delete()
        for slug in slugs:
            cls = existing.get(slug)
            if cls is None:
                cls = CharacterClass(slug=slug, display_name=class_display_name(slug))
                session.add(cls)
                session.flush()
            session.add(SpellClass(spell_id=spell.id, class_id=cls.id))
        session.flush()
        session.expire(spell, ["classes"])
