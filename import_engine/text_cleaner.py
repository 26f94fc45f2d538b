"""
import_engine.text_cleaner - Tidy long-form spell text.

The spreadsheets are pasted from a web page, so bold titles end up on
their own line and bullets arrive as "•".  Rewrites run in order; each
one assumes the previous has already been applied.
"""

from __future__ import annotations

import re

_LOWER = "a-zàâäéèêëïîôùûüÿç"

_REWRITES: tuple[tuple[re.Pattern, str], ...] = (
    # "**Title**\n." → "**Title**."
    (re.compile(r"\*\*([^*]+)\*\*\s*\n\s*\."), r"**\1**."),
    # "**Title**\ntext" → "**Title**. text"
    (re.compile(rf"\*\*([^*]+)\*\*\s*\n\s*([{_LOWER}])"), r"**\1**. \2"),
    # bullets → markdown list items
    (re.compile(r"\n•\s*"), "\n- "),
    (re.compile(r"^•\s*", re.MULTILINE), "- "),
    (re.compile(r"([.:])\s*\n?•\s*"), "\\1\n- "),
    # paragraph breaks
    (re.compile(r"\n{3,}"), "\n\n"),
)


def clean_description(text: str | None) -> str | None:
    if not text:
        return text
    for pattern, replacement in _REWRITES:
        text = pattern.sub(replacement, text)
    return text.strip()
