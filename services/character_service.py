"""
services.character_service - Per-user characters and their spell slots.

Every lookup is scoped by user id: a character that belongs to someone
else is reported as missing, never as forbidden.

All session management is the caller's responsibility (open before,
close/commit after).
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import Character, CharacterClass, ClassSpellSlots, Subclass, User
from services.errors import InvalidInput, NotFound
from services.validation import as_int

MIN_LEVEL = 1
MAX_LEVEL = 20


def available_spell_levels(slots: ClassSpellSlots | None) -> list[int]:
    """Cantrips (0) plus every spell level with at least one slot."""
    levels = [0]
    if slots is None:
        return levels
    levels.extend(n for n, count in enumerate(slots.slots(), start=1) if count > 0)
    return levels


class CharacterService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def list_for_user(session: Session, user_id: int) -> list[Character]:
        return (
            session.query(Character)
            .filter(Character.user_id == user_id)
            .order_by(Character.updated_at.desc(), Character.id.desc())
            .all()
        )

    @staticmethod
    def get(session: Session, user_id: int, character_id: int) -> Character:
        character = (
            session.query(Character)
            .filter(Character.id == character_id, Character.user_id == user_id)
            .one_or_none()
        )
        if character is None:
            raise NotFound(f"character {character_id} not found")
        return character

    # ── Create / Update ────────────────────────────────────────────────

    @staticmethod
    def create(session: Session, user_id: int, data: dict) -> Character:
        """Required keys: name, class_id.  Optional: subclass_id, level."""
        if session.get(User, user_id) is None:
            raise NotFound(f"user {user_id} not found")
        values = CharacterService._validate(session, data, partial=False)
        character = Character(user_id=user_id, **values)
        session.add(character)
        session.flush()
        return character

    @staticmethod
    def update(session: Session, user_id: int, character_id: int, data: dict) -> Character:
        character = CharacterService.get(session, user_id, character_id)
        if "class_id" in data and "subclass_id" not in data:
            data = {**data, "subclass_id": None}
        elif "subclass_id" in data and "class_id" not in data:
            data = {**data, "class_id": character.class_id}
        values = CharacterService._validate(session, data, partial=True)
        for attr, value in values.items():
            setattr(character, attr, value)
        session.flush()
        # reload the joined class/subclass for the new ids
        session.refresh(character)
        return character

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, user_id: int, character_id: int) -> None:
        character = CharacterService.get(session, user_id, character_id)
        session.delete(character)
        session.flush()

    # ── Spell slots ────────────────────────────────────────────────────

    @staticmethod
    def spell_slots(session: Session, character: Character) -> ClassSpellSlots | None:
        """
        Progression row for the character's class, subclass and level.
        Falls back to any subclass of the same class at that level, since
        subclasses of a class usually share a progression.
        """
        base = session.query(ClassSpellSlots).filter(
            ClassSpellSlots.class_id == character.class_id,
            ClassSpellSlots.character_level == character.level,
        )
        if character.subclass_id:
            exact = base.filter(ClassSpellSlots.subclass_id == character.subclass_id).first()
            if exact is not None:
                return exact
        return base.order_by(ClassSpellSlots.id).first()

    # ── Private helpers ────────────────────────────────────────────────

    @staticmethod
    def _validate(session: Session, data: dict, *, partial: bool) -> dict:
        values: dict = {}

        if "name" in data or not partial:
            name = str(data.get("name") or "").strip()
            if not name:
                raise InvalidInput("name is required")
            if len(name) > 100:
                raise InvalidInput("name is longer than 100 characters")
            values["name"] = name

        if "class_id" in data or not partial:
            class_id = as_int(data.get("class_id"), "class_id")
            if class_id is None or session.get(CharacterClass, class_id) is None:
                raise InvalidInput("unknown class_id")
            values["class_id"] = class_id

        if "subclass_id" in data:
            subclass_id = as_int(data.get("subclass_id"), "subclass_id")
            if subclass_id is not None:
                sub = session.get(Subclass, subclass_id)
                if sub is None or sub.class_id != values.get("class_id"):
                    raise InvalidInput("subclass does not belong to the class")
            values["subclass_id"] = subclass_id

        if "level" in data or not partial:
            level = as_int(data.get("level", MIN_LEVEL), "level")
            if level is None or not MIN_LEVEL <= level <= MAX_LEVEL:
                raise InvalidInput(f"level must be between {MIN_LEVEL} and {MAX_LEVEL}")
            values["level"] = level

        return values

