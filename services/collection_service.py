"""
services.collection_service - "Prepared" spells and favorite monsters.

Both are plain join rows; toggling adds the row when absent and removes
it when present, returning the new state.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models import (
    Character, CharacterPreparedSpell, Monster, Spell, User, UserFavoriteMonster,
)
from services.character_service import CharacterService
from services.errors import NotFound


class PreparedSpellService:

    @staticmethod
    def spell_ids(session: Session, character: Character) -> list[int]:
        rows = session.query(CharacterPreparedSpell.spell_id).filter(
            CharacterPreparedSpell.character_id == character.id,
        )
        return [spell_id for (spell_id,) in rows]

    @staticmethod
    def spells(session: Session, character: Character) -> list[Spell]:
        return (
            session.query(Spell)
            .join(CharacterPreparedSpell, CharacterPreparedSpell.spell_id == Spell.id)
            .filter(CharacterPreparedSpell.character_id == character.id)
            .order_by(Spell.level, Spell.name)
            .all()
        )

    @staticmethod
    def toggle(session: Session, user_id: int, character_id: int, spell_id: int) -> bool:
        """Flip the prepared flag.  Returns True when the spell is now prepared."""
        character = CharacterService.get(session, user_id, character_id)
        if session.get(Spell, spell_id) is None:
            raise NotFound(f"spell {spell_id} not found")

        row = session.get(CharacterPreparedSpell, (character.id, spell_id))
        if row is not None:
            session.delete(row)
            session.flush()
            return False
        session.add(CharacterPreparedSpell(character_id=character.id, spell_id=spell_id))
        session.flush()
        return True


class FavoriteMonsterService:

    @staticmethod
    def monsters(session: Session, user_id: int) -> list[Monster]:
        return (
            session.query(Monster)
            .join(UserFavoriteMonster, UserFavoriteMonster.monster_id == Monster.id)
            .filter(UserFavoriteMonster.user_id == user_id)
            .order_by(Monster.name)
            .all()
        )

    @staticmethod
    def toggle(session: Session, user_id: int, monster_id: int) -> bool:
        """Flip the favorite flag.  Returns True when the monster is now a favorite."""
        if session.get(User, user_id) is None:
            raise NotFound(f"user {user_id} not found")
        if session.get(Monster, monster_id) is None:
            raise NotFound(f"monster {monster_id} not found")

        row = (
            session.query(UserFavoriteMonster)
            .filter_by(user_id=user_id, monster_id=monster_id)
            .one_or_none()
        )
        if row is not None:
            session.delete(row)
            session.flush()
            return False
        session.add(UserFavoriteMonster(user_id=user_id, monster_id=monster_id))
        session.flush()
        return True
