"""
import_engine.lookups - Shared per-import helpers.

  • ensure_classes: slug → id map, inserting missing classes
  • fail_row:       roll back one row and record it on the report
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from db.models import CharacterClass
from import_engine.names import CLASS_DISPLAY_NAMES, class_display_name
from import_engine.report import ImportReport

logger = logging.getLogger(__name__)


def ensure_classes(
    session: Session,
    slugs: Iterable[str],
    labels: Mapping[str, str] | None = None,
) -> dict[str, int]:
    """
    Return {slug: class id} for every class in the table, after adding
    any of *slugs* that were missing.  Existing rows are left untouched.

    New rows are labelled from the display table, else from *labels*
    (the name as written in the file), else with the slug itself.
    """
    labels = labels or {}
    class_ids = {c.slug: c.id for c in session.query(CharacterClass)}
    added = 0
    for slug in dict.fromkeys(slugs):
        if slug in class_ids:
            continue
        if slug in CLASS_DISPLAY_NAMES:
            display_name = class_display_name(slug)
        else:
            display_name = labels.get(slug) or slug
        cls = CharacterClass(slug=slug, display_name=display_name)
        session.add(cls)
        session.flush()
        class_ids[slug] = cls.id
        added += 1
    session.commit()
    if added:
        logger.info(f"Added {added} classes")
    return class_ids


def fail_row(session: Session, report: ImportReport, label: str, exc: Exception) -> None:
    """Undo the current row and keep a short, readable summary of why."""
    session.rollback()
    message = str(exc.orig) if isinstance(exc, DBAPIError) else str(exc)
    report.record_error(f"{label}: {message or type(exc).__name__}")
    logger.warning(f"Row failed ({label}): {message}")
