"""
import_engine.importer - Top-level orchestrator.

Coordinates csv_parser → shapes → shape importer and produces a
structured ImportReport.  Anything that stops the whole run is raised
as ImportFailure; row problems only end up in the report.
"""

from __future__ import annotations

import logging

from db.engine import get_session
from import_engine.class_slots import import_class_slots
from import_engine.csv_parser import CsvParseError, parse_rows
from import_engine.monsters import import_monsters
from import_engine.report import ImportReport
from import_engine.shapes import CsvShape, detect_shape
from import_engine.spells import import_spells

logger = logging.getLogger(__name__)

SERVER_ERROR = "Erreur serveur"
EMPTY_FILE = "Le fichier CSV est vide"

_IMPORTERS = {
    CsvShape.SPELLS: import_spells,
    CsvShape.CLASSES: import_class_slots,
    CsvShape.MONSTERS: import_monsters,
}


class ImportFailure(Exception):
    """The import as a whole could not run."""

    def __init__(self, message: str, details: str | None = None, status: int = 400):
        super().__init__(message)
        self.message = message
        self.details = details
        self.status = status

    def to_dict(self) -> dict:
        d = {"error": self.message}
        if self.details:
            d["details"] = self.details
        return d


def run_import(file_content: str | bytes) -> ImportReport:
    """
    Import a CSV blob of any supported shape.

    Parameters
    ----------
    file_content : raw CSV (bytes or str); delimiter is sniffed

    Returns
    -------
    ImportReport with counts and the first few row errors

    Raises
    ------
    ImportFailure when the file is empty, unreadable, or the database
    fails outside of a single row
    """
    try:
        rows = parse_rows(file_content)
    except CsvParseError as exc:
        logger.error(f"CSV parse failed: {exc}")
        raise ImportFailure(SERVER_ERROR, str(exc), status=500) from exc

    if not rows:
        raise ImportFailure(EMPTY_FILE)

    shape = detect_shape(rows[0].keys())
    logger.info(f"Importing {len(rows)} rows as {shape.value}")
    report = ImportReport(shape=shape, total_rows=len(rows))

    session = get_session()
    try:
        _IMPORTERS[shape](session, rows, report)
    except Exception as exc:
        session.rollback()
        logger.exception(f"Fatal import error ({shape.value})")
        raise ImportFailure(SERVER_ERROR, str(exc), status=500) from exc
    finally:
        session.close()

    return report
