"""
import_engine.report - Structured result of a CSV import run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import config

from import_engine.shapes import CsvShape


@dataclass
class ImportReport:
    shape: CsvShape
    total_rows: int = 0
    processed: int = 0
    skipped: int = 0
    error_count: int = 0
    subclasses: int = 0
    pruned: int = 0
    error_samples: list[str] = field(default_factory=list)

    def record_error(self, summary: str):
        """Count a failed row; keep only the first few summaries."""
        self.error_count += 1
        if len(self.error_samples) < config.MAX_ERROR_SAMPLES:
            self.error_samples.append(summary)

    def details(self) -> str | None:
        if not self.error_count:
            return None
        more = " | ..." if self.error_count > len(self.error_samples) else ""
        return f"Exemples d'erreurs: {' | '.join(self.error_samples)}{more}"

    def message(self) -> str:
        suffix = f" ({self.error_count} erreurs d'import)" if self.error_count else ""
        if self.shape is CsvShape.CLASSES:
            return (f"Emplacements de sorts importes avec succes ! "
                    f"{self.subclasses} sous-classes et {self.processed} entrees "
                    f"d'emplacements de sorts importees{suffix}.")
        if self.shape is CsvShape.MONSTERS:
            return f"Bestiaire importé avec succès ! {self.processed} monstres traités{suffix}."
        return (f"Base de donnees mise a jour avec succes ! "
                f"{self.processed} sorts importes{suffix}.")

    def to_dict(self) -> dict:
        d = {
            "success": True,
            "message": self.message(),
            "shape": self.shape.value,
            "total_rows": self.total_rows,
            "processed": self.processed,
            "skipped": self.skipped,
            "errors": self.error_count,
            "pruned": self.pruned,
        }
        details = self.details()
        if details:
            d["details"] = details
        return d
