#!/usr/bin/env python3
"""
Grimoire - Spell & bestiary reference web application
=====================================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

import logging

from flask import Flask, jsonify

import config
from db import init_db, get_session, Spell
from api import api_bp
from api.routes_import import handle_upload


def create_app(db_url: str | None = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.secret_key = config.SECRET

    # ── Initialise database ─────────────────────────────────────────
    init_db(db_url or config.DB_URL)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── Admin upload form action ────────────────────────────────────
    @app.route("/update-db", methods=["POST"])
    def update_db():
        """Same contract as POST /api/v1/import."""
        return handle_upload()

    # ── Error handlers ──────────────────────────────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _seed_if_empty():
    """Auto-import the seed CSVs when the spell table is empty."""
    session = get_session()
    count = session.query(Spell).count()
    session.close()

    if count > 0:
        print(f"\n  Database has {count} spells.")
        return

    from seed import import_file

    for path in config.SEED_CSV_PATHS:
        if not path.exists():
            print(f"\n  No seed CSV at {path} - skipped.")
            continue
        print(f"\n  Database empty → auto-importing {path.name} …")
        import_file(path)


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    print("=" * 56)
    print("  Grimoire - Spells & Bestiary")
    print("=" * 56)

    app = create_app()
    print(f"  Database: {config.DB_URL}")
    _seed_if_empty()

    print(f"\n  http://{config.HOST}:{config.PORT}")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
