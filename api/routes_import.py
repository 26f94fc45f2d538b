"""
api.routes_import - /api/v1/import endpoint.

Accepts one CSV via multipart upload (field 'csvFile').  The file shape
(spells, class spell slots, monsters) is detected from its header.
"""

from flask import request, jsonify

import config
from api import api_bp
from import_engine import run_import, ImportFailure


def handle_upload():
    """Shared by /api/v1/import and the /update-db form action."""
    f = request.files.get(config.UPLOAD_FIELD)
    content = f.read() if f else b""
    if not content:
        return jsonify({"error": "Veuillez sélectionner un fichier CSV"}), 400

    if not (f.filename or "").lower().endswith(".csv"):
        return jsonify({"error": "Le fichier doit être au format CSV"}), 400

    try:
        report = run_import(content)
    except ImportFailure as exc:
        return jsonify(exc.to_dict()), exc.status
    return jsonify(report.to_dict())


@api_bp.route("/import", methods=["POST"])
def api_import_csv():
    """
    POST /api/v1/import

    Multipart: field name 'csvFile'.
    """
    return handle_upload()
