"""
import_engine.csv_parser - Low-level CSV reading and cleaning.

Responsibilities:
  • BOM removal (UTF-8 / UTF-8-SIG)
  • Delimiter sniffing from the header line
  • Header whitespace stripping
  • Tolerant row materialisation (short rows padded, surplus cells dropped)
"""

from __future__ import annotations

import csv
import io
import re

# Order matters only for readability; ties always fall back to a comma.
DELIMITER_CANDIDATES = ("|", ",", ";", "\t")
DEFAULT_DELIMITER = ","

_LINE_BREAK = re.compile(r"\r?\n")


class CsvParseError(Exception):
    """Raised when the tokenizer cannot make sense of the file."""
    pass


def detect_delimiter(first_line: str) -> str:
    """
    Return the candidate that occurs strictly more often than every other
    one in *first_line*.  A tie for first place, or no candidate at all,
    yields a comma.
    """
    counts = {c: first_line.count(c) for c in DELIMITER_CANDIDATES}
    best = max(counts.values())
    if best == 0:
        return DEFAULT_DELIMITER
    winners = [c for c, n in counts.items() if n == best]
    if len(winners) > 1:
        return DEFAULT_DELIMITER
    return winners[0]


def first_line(text: str) -> str:
    return _LINE_BREAK.split(text, maxsplit=1)[0] if text else ""


def parse_rows(raw: str | bytes, delimiter: str | None = None) -> list[dict[str, str]]:
    """
    Decode *raw* and return every data row as a header → value dict.

    The delimiter is sniffed from the first line when not given.  Blank
    lines are skipped; missing cells read as "".  Raises CsvParseError
    when the csv module gives up on the input.
    """
    text = decode(raw)
    if not text or not text.strip():
        return []

    if delimiter is None:
        delimiter = detect_delimiter(first_line(text))

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter,
                        quotechar='"', strict=False)
    header: list[str] | None = None
    rows: list[dict[str, str]] = []
    try:
        for cells in reader:
            if not cells or all(not c.strip() for c in cells):
                continue
            if header is None:
                header = [h.strip() for h in cells]
                continue
            rows.append(_to_dict(header, cells))
    except csv.Error as exc:
        raise CsvParseError(f"line {reader.line_num}: {exc}") from exc

    return rows


def decode(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        # Strip UTF-8 BOM
        if raw.startswith(b"\xef\xbb\xbf"):
            raw = raw[3:]
        return raw.decode("utf-8", errors="replace")
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


def _to_dict(header: list[str], cells: list[str]) -> dict[str, str]:
    row: dict[str, str] = {}
    for idx, name in enumerate(header):
        if not name or name in row:
            continue
        row[name] = cells[idx] if idx < len(cells) else ""
    return row
