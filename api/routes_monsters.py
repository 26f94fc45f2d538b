"""
api.routes_monsters - /api/v1/monsters endpoints (browse and edit).
"""

from flask import request, jsonify

from api import api_bp
from api.params import csv_arg, page_args
from db import get_session
from services.monster_service import MonsterService


@api_bp.route("/monsters")
def list_monsters():
    """
    GET /api/v1/monsters?q=&types=Dragon,Mort-vivant&limit=&offset=
    """
    q = request.args.get("q", "").strip()
    types = csv_arg("types")
    limit, offset = page_args()

    session = get_session()
    try:
        monsters, total = MonsterService.search(
            session, q=q, types=types, limit=limit, offset=offset,
        )
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "monsters": [MonsterService.serialize(m) for m in monsters],
        })
    finally:
        session.close()


@api_bp.route("/monsters/types")
def list_monster_types():
    session = get_session()
    try:
        return jsonify(MonsterService.types(session))
    finally:
        session.close()


@api_bp.route("/monsters/<int:monster_id>")
def get_monster(monster_id: int):
    """GET /api/v1/monsters/{id}"""
    session = get_session()
    try:
        monster = MonsterService.get(session, monster_id)
        if not monster:
            return jsonify({"error": "not found"}), 404
        return jsonify(MonsterService.serialize(monster))
    finally:
        session.close()


@api_bp.route("/monsters", methods=["POST"])
def create_monster():
    """
    POST /api/v1/monsters

    JSON body keyed like the bestiary CSV: {name, type, hp?, int?, details_json?, …}
    """
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        monster = MonsterService.create(session, data)
        session.commit()
        return jsonify(MonsterService.serialize(monster)), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/monsters/<int:monster_id>", methods=["PUT"])
def update_monster(monster_id: int):
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        monster = MonsterService.update(session, monster_id, data)
        session.commit()
        return jsonify(MonsterService.serialize(monster))
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/monsters/<int:monster_id>", methods=["DELETE"])
def delete_monster(monster_id: int):
    session = get_session()
    try:
        MonsterService.delete(session, monster_id)
        session.commit()
        return jsonify({"deleted": monster_id})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
