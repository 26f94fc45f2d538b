"""
api.routes_spells - /api/v1/spells (browse and edit), /classes and /subclasses.
"""

from flask import request, jsonify

from api import api_bp
from api.params import csv_arg, int_list_arg, page_args
from db import get_session
from services.spell_service import SpellService


@api_bp.route("/spells")
def list_spells():
    """
    GET /api/v1/spells?q=&classes=barde,clerc&levels=0,1&limit=&offset=

    Ordered by level then name.  ``classes`` takes class slugs.
    """
    q = request.args.get("q", "").strip()
    classes = csv_arg("classes")
    levels = int_list_arg("levels")
    limit, offset = page_args()

    session = get_session()
    try:
        spells, total = SpellService.search(
            session, q=q, classes=classes, levels=levels,
            limit=limit, offset=offset,
        )
        return jsonify({
            "total": total,
            "offset": offset,
            "limit": limit,
            "spells": [s.to_dict() for s in spells],
        })
    finally:
        session.close()


@api_bp.route("/spells/<int:spell_id>")
def get_spell(spell_id: int):
    """GET /api/v1/spells/{id}"""
    session = get_session()
    try:
        spell = SpellService.get(session, spell_id)
        if not spell:
            return jsonify({"error": "not found"}), 404
        return jsonify(spell.to_dict())
    finally:
        session.close()


@api_bp.route("/spells/levels")
def list_spell_levels():
    """
    GET /api/v1/spells/levels?classes=barde,clerc

    Level filter options: levels holding a spell of those classes.
    """
    session = get_session()
    try:
        return jsonify(SpellService.levels_for_classes(session, csv_arg("classes")))
    finally:
        session.close()


@api_bp.route("/spells", methods=["POST"])
def create_spell():
    """
    POST /api/v1/spells

    JSON body: {name, level?, school?, ritual?, …, classes?: [names]}
    """
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        spell = SpellService.create(session, data)
        session.commit()
        return jsonify(spell.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/spells/<int:spell_id>", methods=["PUT"])
def update_spell(spell_id: int):
    """PUT (JSON body with any spell field; ``classes`` replaces the links)"""
    data = request.get_json(force=True, silent=True) or {}
    session = get_session()
    try:
        spell = SpellService.update(session, spell_id, data)
        session.commit()
        return jsonify(spell.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/spells/<int:spell_id>", methods=["DELETE"])
def delete_spell(spell_id: int):
    session = get_session()
    try:
        SpellService.delete(session, spell_id)
        session.commit()
        return jsonify({"deleted": spell_id})
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/classes")
def list_classes():
    session = get_session()
    try:
        return jsonify([c.to_dict() for c in SpellService.list_classes(session)])
    finally:
        session.close()


@api_bp.route("/subclasses")
def list_subclasses():
    """GET /api/v1/subclasses?classId=  (empty list without a class)"""
    class_id = request.args.get("classId", type=int)
    if not class_id:
        return jsonify({"subclasses": []})

    session = get_session()
    try:
        subclasses = SpellService.list_subclasses(session, class_id)
        return jsonify({"subclasses": [s.to_dict() for s in subclasses]})
    finally:
        session.close()
