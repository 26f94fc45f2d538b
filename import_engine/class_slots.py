"""
import_engine.class_slots - Class / subclass / spell-slot progression files.

Subclasses and slot rows are cleared and rebuilt; classes are only ever
added, so characters keep pointing at the same class rows.  Any class
named in the file is added, including ones outside the alias table
("Moine"); only a blank class cell fails its row.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.models import ClassSpellSlots, Subclass
from import_engine.field_map import CLASS_COLUMN, LEVEL_COLUMN, SUBCLASS_COLUMN
from import_engine.lookups import ensure_classes, fail_row
from import_engine.names import normalize_class_name, normalize_subclass_name, subclass_key
from import_engine.report import ImportReport
from import_engine.row_processor import RowError, is_header_echo, slot_values

logger = logging.getLogger(__name__)


def import_class_slots(session: Session, rows: list[dict], report: ImportReport) -> None:
    session.query(ClassSpellSlots).delete(synchronize_session=False)
    session.query(Subclass).delete(synchronize_session=False)
    session.commit()

    # key → (class slug, subclass slug, label as written)
    pairs: dict[str, tuple[str, str, str]] = {}
    # class slug → name as first written, for classes not yet in the table
    class_labels: dict[str, str] = {}
    for row in rows:
        class_slug = _row_class(row)
        if not class_slug:
            continue
        class_labels.setdefault(class_slug, str(row[CLASS_COLUMN]).strip())
        label = str(row.get(SUBCLASS_COLUMN) or "").strip()
        if not normalize_subclass_name(label):
            continue
        key = subclass_key(class_slug, label)
        pairs.setdefault(key, (class_slug, normalize_subclass_name(label), label))

    class_ids = ensure_classes(session, class_labels, labels=class_labels)

    subclass_ids: dict[str, int] = {}
    for key, (class_slug, slug, label) in pairs.items():
        sub = Subclass(class_id=class_ids[class_slug], slug=slug, display_name=label)
        session.add(sub)
        session.flush()
        subclass_ids[key] = sub.id
    session.commit()
    report.subclasses = len(subclass_ids)

    for row in rows:
        class_name = str(row.get(CLASS_COLUMN) or "").strip()
        if is_header_echo(class_name, CLASS_COLUMN):
            report.skipped += 1
            continue
        subclass_name = str(row.get(SUBCLASS_COLUMN) or "").strip()
        label = f"{class_name} {subclass_name} niv.{row.get(LEVEL_COLUMN, '')}"

        try:
            class_slug = _row_class(row)
            if not class_slug or class_slug not in class_ids:
                raise RowError(f"Classe non trouvée: {class_name}")

            subclass_id = None
            if normalize_subclass_name(subclass_name):
                subclass_id = subclass_ids.get(subclass_key(class_slug, subclass_name))
                if subclass_id is None:
                    raise RowError(f"Sous-classe non trouvée: {subclass_name}")

            session.add(ClassSpellSlots(
                class_id=class_ids[class_slug],
                subclass_id=subclass_id,
                **slot_values(row),
            ))
            session.commit()
            report.processed += 1
        except RowError as exc:
            session.rollback()
            report.record_error(str(exc))
        except Exception as exc:
            fail_row(session, report, label, exc)

    logger.info(f"Spell slots: {report.subclasses} subclasses, "
                f"{report.processed} progression rows, {report.error_count} errors")


def _row_class(row: dict) -> str | None:
    """Class slug for the row; any non-blank name counts, known or not."""
    name = str(row.get(CLASS_COLUMN) or "").strip()
    if not name or is_header_echo(name, CLASS_COLUMN):
        return None
    return normalize_class_name(name) or None
