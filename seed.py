#!/usr/bin/env python3
"""
Import one or more CSV files from disk without starting the server.

    python seed.py sorts.csv classes.csv monstres.csv

Order matters: a spell file rebuilds the class table, so import it
before the class/spell-slot file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import config
from db import init_db
from import_engine import ImportFailure, run_import


def import_file(path: Path) -> bool:
    """Run one file through the import pipeline and print the outcome."""
    with open(path, "rb") as fh:
        content = fh.read()

    try:
        report = run_import(content)
    except ImportFailure as exc:
        print(f"  {path.name}: {exc.message}")
        if exc.details:
            print(f"    {exc.details}")
        return False

    print(f"  {path.name} [{report.shape.value}]: {report.message()}")
    details = report.details()
    if details:
        print(f"    {details}")
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import Grimoire CSV files")
    parser.add_argument("files", nargs="+", type=Path, help="CSV files to import")
    parser.add_argument("--db", default=config.DB_URL,
                        help=f"SQLAlchemy database URL (default: {config.DB_URL})")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log each row error")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.ERROR,
                        format="%(levelname)-7s %(name)s: %(message)s")

    init_db(args.db)

    ok = True
    for path in args.files:
        if not path.exists():
            print(f"  {path}: file not found")
            ok = False
            continue
        ok = import_file(path) and ok
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
