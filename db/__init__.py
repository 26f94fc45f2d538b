"""
db - Database layer.

Public API:
    init_db()          → create engine + tables
    get_session()      → new Session
    get_engine()       → the bound Engine (DDL helpers)
    recreate_tables()  → drop + create with FK checks off
    Spell, CharacterClass, Monster, … → ORM models
"""

from db.engine import init_db, get_session, get_engine, recreate_tables   # noqa: F401
from db.models import (                                                    # noqa: F401
    Base,
    Spell,
    CharacterClass,
    SpellClass,
    Subclass,
    ClassSpellSlots,
    Monster,
    User,
    UserSession,
    Character,
    CharacterPreparedSpell,
    UserFavoriteMonster,
)
