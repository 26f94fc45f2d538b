"""
import_engine.spells - Spell-shaped files.

Destructive: the spell, class and spell ↔ class tables are dropped and
rebuilt on every run, so the file is the whole catalogue.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.engine import recreate_tables
from db.models import CharacterClass, Spell, SpellClass
from import_engine.field_map import SPELL_CLASSES_COLUMN, SPELL_NAME_COLUMN
from import_engine.lookups import ensure_classes, fail_row
from import_engine.names import resolve_class, split_class_list
from import_engine.report import ImportReport
from import_engine.row_processor import is_header_echo, spell_values

logger = logging.getLogger(__name__)


def import_spells(session: Session, rows: list[dict], report: ImportReport) -> None:
    recreate_tables(CharacterClass.__table__, Spell.__table__, SpellClass.__table__)
    logger.info("Spell tables recreated")

    class_ids = ensure_classes(
        session,
        (slug for row in rows for slug in _row_classes(row)),
    )

    for row in rows:
        name = str(row.get(SPELL_NAME_COLUMN) or "").strip()
        if not name or is_header_echo(name, SPELL_NAME_COLUMN):
            report.skipped += 1
            continue

        try:
            spell = Spell(**spell_values(row))
            session.add(spell)
            session.flush()

            for slug in _row_classes(row):
                session.add(SpellClass(spell_id=spell.id, class_id=class_ids[slug]))

            session.commit()
            report.processed += 1
        except Exception as exc:
            fail_row(session, report, f'"{name}"', exc)

    logger.info(f"Spells: {report.processed} imported, {report.error_count} errors")


def _row_classes(row: dict) -> list[str]:
    """Known class slugs listed in the row, without duplicates."""
    slugs = (resolve_class(name) for name in split_class_list(row.get(SPELL_CLASSES_COLUMN)))
    return list(dict.fromkeys(s for s in slugs if s))
