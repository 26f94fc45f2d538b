"""
api.routes_characters - Characters, prepared spells and favorite monsters.

Scoped under /users/<user_id>.  Who may act as which user is decided
upstream of this blueprint; here the id is taken as given.
"""

from flask import request, jsonify

from api import api_bp
from db import get_session
from services.character_service import CharacterService, available_spell_levels
from services.collection_service import FavoriteMonsterService, PreparedSpellService
from services.monster_service import MonsterService


# ── Characters ─────────────────────────────────────────────────────────

@api_bp.route("/users/<int:user_id>/characters")
def list_characters(user_id: int):
    session = get_session()
    try:
        characters = CharacterService.list_for_user(session, user_id)
        return jsonify([c.to_dict() for c in characters])
    finally:
        session.close()


@api_bp.route("/users/<int:user_id>/characters", methods=["POST"])
def create_character(user_id: int):
    """
    POST /api/v1/users/{user}/characters

    JSON body: {name, class_id, subclass_id?, level?}
    """
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        character = CharacterService.create(session, user_id, data)
        session.commit()
        return jsonify(character.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/users/<int:user_id>/characters/<int:character_id>")
def get_character(user_id: int, character_id: int):
    session = get_session()
    try:
        character = CharacterService.get(session, user_id, character_id)
        d = character.to_dict()
        d["prepared_spell_ids"] = PreparedSpellService.spell_ids(session, character)
        return jsonify(d)
    finally:
        session.close()


@api_bp.route("/users/<int:user_id>/characters/<int:character_id>", methods=["PUT"])
def update_character(user_id: int, character_id: int):
    """PUT (JSON body with any of name, class_id, subclass_id, level)"""
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        character = CharacterService.update(session, user_id, character_id, data)
        session.commit()
        return jsonify(character.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/users/<int:user_id>/characters/<int:character_id>", methods=["DELETE"])
def delete_character(user_id: int, character_id: int):
    session = get_session()
    try:
        CharacterService.delete(session, user_id, character_id)
        session.commit()
        return jsonify({"deleted": character_id})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/users/<int:user_id>/characters/<int:character_id>/slots")
def character_slots(user_id: int, character_id: int):
    """Spell slots for the character's class/subclass/level."""
    session = get_session()
    try:
        character = CharacterService.get(session, user_id, character_id)
        slots = CharacterService.spell_slots(session, character)
        return jsonify({
            "slots": slots.slots() if slots else None,
            "available_levels": available_spell_levels(slots),
        })
    finally:
        session.close()


# ── Prepared spells ────────────────────────────────────────────────────

@api_bp.route("/users/<int:user_id>/characters/<int:character_id>/prepared")
def list_prepared(user_id: int, character_id: int):
    session = get_session()
    try:
        character = CharacterService.get(session, user_id, character_id)
        spells = PreparedSpellService.spells(session, character)
        return jsonify([s.to_dict() for s in spells])
    finally:
        session.close()


@api_bp.route("/users/<int:user_id>/characters/<int:character_id>/prepared/<int:spell_id>",
              methods=["POST"])
def toggle_prepared(user_id: int, character_id: int, spell_id: int):
    session = get_session()
    try:
        prepared = PreparedSpellService.toggle(session, user_id, character_id, spell_id)
        session.commit()
        return jsonify({"spell_id": spell_id, "prepared": prepared})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── Favorite monsters ──────────────────────────────────────────────────

@api_bp.route("/users/<int:user_id>/favorites")
def list_favorites(user_id: int):
    session = get_session()
    try:
        monsters = FavoriteMonsterService.monsters(session, user_id)
        return jsonify([MonsterService.serialize(m) for m in monsters])
    finally:
        session.close()


@api_bp.route("/users/<int:user_id>/favorites/<int:monster_id>", methods=["POST"])
def toggle_favorite(user_id: int, monster_id: int):
    session = get_session()
    try:
        favorite = FavoriteMonsterService.toggle(session, user_id, monster_id)
        session.commit()
        return jsonify({"monster_id": monster_id, "favorite": favorite})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
