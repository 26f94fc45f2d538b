"""
Grimoire - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path


# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent

# Seed CSVs imported on first start, separated by os.pathsep
SEED_CSV_PATHS = [
    Path(p) for p in os.environ.get(
        "GRIMOIRE_SEED_CSV",
        os.pathsep.join([
            str(BASE_DIR / "data" / "sorts.csv"),
            str(BASE_DIR / "data" / "classes.csv"),
            str(BASE_DIR / "data" / "monstres.csv"),
        ]),
    ).split(os.pathsep) if p
]

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("GRIMOIRE_DB", f"sqlite:///{BASE_DIR / 'grimoire.sqlite'}")

# ── Server ─────────────────────────────────────────────────────────────
HOST   = os.environ.get("GRIMOIRE_HOST", "0.0.0.0")
PORT   = int(os.environ.get("GRIMOIRE_PORT", "5000"))
DEBUG  = os.environ.get("GRIMOIRE_DEBUG", "0") == "1"
SECRET = os.environ.get("GRIMOIRE_SECRET", "grimoire-dev-key-change-in-prod")

# ── Logging ────────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("GRIMOIRE_LOG_LEVEL", "INFO").upper()

# ── Import ─────────────────────────────────────────────────────────────
MAX_ERROR_SAMPLES = 5
UPLOAD_FIELD      = "csvFile"
PRUNE_BATCH_SIZE  = 500      # ids per DELETE, below SQLite's 999-variable limit

# ── Pagination ─────────────────────────────────────────────────────────
API_MAX_LIMIT     = 1000
API_DEFAULT_LIMIT = 500
