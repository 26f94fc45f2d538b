"""
api.params - Query-string helpers shared by the listing endpoints.
"""

from __future__ import annotations

from flask import request

import config


def csv_arg(name: str) -> list[str]:
    """?name=a,b&name=c → ["a", "b", "c"]"""
    values: list[str] = []
    for raw in request.args.getlist(name):
        values.extend(v.strip() for v in raw.split(",") if v.strip())
    return values


def int_list_arg(name: str) -> list[int]:
    """Like csv_arg, silently dropping anything that is not an integer."""
    return [int(v) for v in csv_arg(name) if v.lstrip("-").isdigit()]


def page_args() -> tuple[int, int]:
    limit = request.args.get("limit", config.API_DEFAULT_LIMIT, type=int)
    offset = request.args.get("offset", 0, type=int)
    return min(max(limit, 1), config.API_MAX_LIMIT), max(offset, 0)
