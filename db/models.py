"""
db.models - SQLAlchemy ORM declarations.

Tables
------
spells                     - one row per spell, scalar columns only.
classes / spell_classes    - playable classes and the spell ↔ class join.
subclasses                 - subclasses, slug unique within their class.
class_spell_slots          - slot progression per class/subclass/level.
monsters                   - bestiary, name is the natural (upsert) key.
                             Free-form parts are stored as JSON text.
users / user_sessions      - accounts; authentication itself lives elsewhere.
characters                 - per-user characters.
character_prepared_spells  - spells a character has prepared.
user_favorite_monsters     - monsters a user has starred.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


# ── Spells ─────────────────────────────────────────────────────────────

class Spell(Base):
    __tablename__ = "spells"

    id            = Column(Integer, primary_key=True, autoincrement=True)
    name          = Column(String(255), nullable=False)
    level         = Column(Integer, nullable=False, default=0, index=True)
    school        = Column(String(50), nullable=False, default="", index=True)
    ritual        = Column(Boolean, nullable=False, default=False)
    concentration = Column(Boolean, nullable=False, default=False)

    # ── Casting time / range / duration ────────────────────────────────
    casting_time_value     = Column(Integer)
    casting_time_unit      = Column(String(50))
    casting_time_condition = Column(Text)
    range_type     = Column(String(50))
    range_value    = Column(Integer)
    range_unit     = Column(String(50))
    range_shape    = Column(String(50))
    duration_type  = Column(String(50))
    duration_value = Column(Integer)
    duration_unit  = Column(String(50))

    components = Column(String(20))
    materials  = Column(Text)

    # ── Per-slot-level scaling ("Niv_1" … "Niv_9") ─────────────────────
    scaling_1 = Column(String(50))
    scaling_2 = Column(String(50))
    scaling_3 = Column(String(50))
    scaling_4 = Column(String(50))
    scaling_5 = Column(String(50))
    scaling_6 = Column(String(50))
    scaling_7 = Column(String(50))
    scaling_8 = Column(String(50))
    scaling_9 = Column(String(50))

    source        = Column(String(100))
    description   = Column(Text)
    higher_levels = Column(Text)

    classes = relationship(
        "CharacterClass", secondary="spell_classes",
        lazy="selectin", order_by="CharacterClass.display_name",
        viewonly=True,
    )

    __table_args__ = (
        Index("ix_spells_level_school", "level", "school"),
    )

    def to_dict(self) -> dict:
        d = {
            c.name: getattr(self, c.name)
            for c in self.__table__.columns
        }
        d["classes"] = [c.display_name for c in self.classes]
        return d


class CharacterClass(Base):
    __tablename__ = "classes"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    slug         = Column(String(50), nullable=False, unique=True)
    display_name = Column(String(50), nullable=False)

    subclasses = relationship(
        "Subclass", back_populates="character_class",
        passive_deletes=True, order_by="Subclass.display_name",
    )

    def to_dict(self) -> dict:
        return {"id": self.id, "slug": self.slug, "display_name": self.display_name}


class SpellClass(Base):
    __tablename__ = "spell_classes"

    spell_id = Column(Integer, ForeignKey("spells.id", ondelete="CASCADE"),
                      primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"),
                      primary_key=True, index=True)


class Subclass(Base):
    __tablename__ = "subclasses"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    class_id     = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"),
                          nullable=False, index=True)
    slug         = Column(String(100), nullable=False, index=True)
    display_name = Column(String(100), nullable=False)

    character_class = relationship("CharacterClass", back_populates="subclasses")

    __table_args__ = (
        UniqueConstraint("class_id", "slug", name="uq_subclass_class_slug"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "class_id": self.class_id,
            "slug": self.slug,
            "display_name": self.display_name,
        }


class ClassSpellSlots(Base):
    __tablename__ = "class_spell_slots"

    id              = Column(Integer, primary_key=True, autoincrement=True)
    class_id        = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"),
                             nullable=False, index=True)
    subclass_id     = Column(Integer, ForeignKey("subclasses.id", ondelete="CASCADE"),
                             index=True)
    character_level = Column(Integer, nullable=False, index=True)

    slot_level_1 = Column(Integer, nullable=False, default=0)
    slot_level_2 = Column(Integer, nullable=False, default=0)
    slot_level_3 = Column(Integer, nullable=False, default=0)
    slot_level_4 = Column(Integer, nullable=False, default=0)
    slot_level_5 = Column(Integer, nullable=False, default=0)
    slot_level_6 = Column(Integer, nullable=False, default=0)
    slot_level_7 = Column(Integer, nullable=False, default=0)
    slot_level_8 = Column(Integer, nullable=False, default=0)
    slot_level_9 = Column(Integer, nullable=False, default=0)

    def slots(self) -> list[int]:
        """Slot counts for spell levels 1 … 9."""
        return [getattr(self, f"slot_level_{n}") or 0 for n in range(1, 10)]

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "subclass_id": self.subclass_id,
            "character_level": self.character_level,
            "slots": self.slots(),
        }


# ── Bestiary ───────────────────────────────────────────────────────────

class Monster(Base):
    __tablename__ = "monsters"

    id       = Column(Integer, primary_key=True, autoincrement=True)
    name     = Column(String(255), nullable=False, unique=True, index=True)
    type     = Column(String(255), nullable=False, index=True)
    trad_raw  = Column(Text)
    trad_json = Column(Text)
    ac    = Column(String(255))
    hp    = Column(String(255))
    speed = Column(String(255))

    # ── Ability scores (int_ maps the reserved word "int") ─────────────
    str  = Column(Integer)
    dex  = Column(Integer)
    con  = Column(Integer)
    int_ = Column("int", Integer)
    wis  = Column(Integer)
    cha  = Column(Integer)
    str_mod = Column(String(16))
    dex_mod = Column(String(16))
    con_mod = Column(String(16))
    int_mod = Column(String(16))
    wis_mod = Column(String(16))
    cha_mod = Column(String(16))

    # ── JSON text columns ──────────────────────────────────────────────
    details_json  = Column(Text, nullable=False, default="{}")
    sections_json = Column(Text, nullable=False, default="[]")
    links_json    = Column(Text, default="[]")

    description_text = Column(Text)
    image_url        = Column(String(512))

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    favorites = relationship(
        "UserFavoriteMonster", back_populates="monster",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "trad_raw": self.trad_raw,
            "ac": self.ac,
            "hp": self.hp,
            "speed": self.speed,
            "abilities": {
                "str": self.str, "dex": self.dex, "con": self.con,
                "int": self.int_, "wis": self.wis, "cha": self.cha,
            },
            "modifiers": {
                "str": self.str_mod, "dex": self.dex_mod, "con": self.con_mod,
                "int": self.int_mod, "wis": self.wis_mod, "cha": self.cha_mod,
            },
            "description_text": self.description_text,
            "image_url": self.image_url,
            "updated_at": self.updated_at.isoformat() if self.updated_at else "",
        }
        d["trad"] = _loads(self.trad_json, [])
        d["details"] = _loads(self.details_json, {})
        d["sections"] = _loads(self.sections_json, [])
        d["links"] = _loads(self.links_json, [])
        return d


def _loads(value: str | None, fallback):
    if not value:
        return fallback
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return fallback


# ── Users and their data ───────────────────────────────────────────────

class User(Base):
    __tablename__ = "users"

    id            = Column(Integer, primary_key=True, autoincrement=True)
    email         = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name  = Column(String(100))
    created_at    = Column(DateTime, default=_utcnow)
    updated_at    = Column(DateTime, default=_utcnow, onupdate=_utcnow)


class UserSession(Base):
    __tablename__ = "user_sessions"

    id         = Column(String(255), primary_key=True)
    user_id    = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=_utcnow)


class Character(Base):
    __tablename__ = "characters"

    id          = Column(Integer, primary_key=True, autoincrement=True)
    user_id     = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    name        = Column(String(100), nullable=False)
    class_id    = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    subclass_id = Column(Integer, ForeignKey("subclasses.id", ondelete="SET NULL"))
    level       = Column(Integer, nullable=False, default=1)
    created_at  = Column(DateTime, default=_utcnow)
    updated_at  = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    character_class = relationship("CharacterClass", lazy="joined")
    subclass        = relationship("Subclass", lazy="joined")
    prepared = relationship(
        "CharacterPreparedSpell", cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "level": self.level,
            "class": self.character_class.to_dict() if self.character_class else None,
            "subclass": self.subclass.to_dict() if self.subclass else None,
            "created_at": self.created_at.isoformat() if self.created_at else "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else "",
        }


class CharacterPreparedSpell(Base):
    __tablename__ = "character_prepared_spells"

    character_id = Column(Integer, ForeignKey("characters.id", ondelete="CASCADE"),
                          primary_key=True)
    spell_id     = Column(Integer, ForeignKey("spells.id", ondelete="CASCADE"),
                          primary_key=True, index=True)
    created_at   = Column(DateTime, default=_utcnow)


class UserFavoriteMonster(Base):
    __tablename__ = "user_favorite_monsters"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    user_id    = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    monster_id = Column(Integer, ForeignKey("monsters.id", ondelete="CASCADE"),
                        nullable=False, index=True)
    created_at = Column(DateTime, default=_utcnow)

    monster = relationship("Monster", back_populates="favorites")

    __table_args__ = (
        UniqueConstraint("user_id", "monster_id", name="uq_favorite_user_monster"),
    )
