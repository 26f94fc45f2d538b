"""
import_engine - CSV import pipeline.

Public API:
    run_import(file_content) → ImportReport   (raises ImportFailure)
"""

from import_engine.importer import run_import, ImportFailure   # noqa: F401
from import_engine.report import ImportReport                  # noqa: F401
from import_engine.shapes import CsvShape                      # noqa: F401
