"""
import_engine.monsters - Bestiary files.

Upsert keyed on the monster name, then prune.  Row ids survive a
re-import, which keeps users' favorites attached to the same monsters;
favorites of pruned monsters go with them through the FK cascade.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

import config
from db.models import Base, Monster, User, UserFavoriteMonster
from import_engine.lookups import fail_row
from import_engine.report import ImportReport
from import_engine.row_processor import is_header_echo, monster_values

logger = logging.getLogger(__name__)


def import_monsters(session: Session, rows: list[dict], report: ImportReport) -> None:
    Base.metadata.create_all(
        session.get_bind(),
        tables=[User.__table__, Monster.__table__, UserFavoriteMonster.__table__],
    )

    imported: set[str] = set()
    for row in rows:
        name = str(row.get("name") or "").strip()
        if not name or is_header_echo(name, "name"):
            report.skipped += 1
            continue

        try:
            upsert_monster(session, monster_values(row))
            session.commit()
            imported.add(name)
            report.processed += 1
        except Exception as exc:
            fail_row(session, report, name, exc)

    if imported:
        report.pruned = prune_monsters(session, imported)

    logger.info(f"Monsters: {report.processed} upserted, {report.pruned} pruned, "
                f"{report.error_count} errors")


def upsert_monster(session: Session, values: dict) -> Monster:
    """Insert, or overwrite every column of the monster with the same name."""
    monster = session.query(Monster).filter_by(name=values["name"]).one_or_none()
    if monster is None:
        monster = Monster(**values)
        session.add(monster)
    else:
        for attr, value in values.items():
            setattr(monster, attr, value)
        monster.updated_at = datetime.now(timezone.utc)
    session.flush()
    return monster


def prune_monsters(session: Session, keep: set[str]) -> int:
    """
    Delete every monster whose name is not in *keep*.  Returns the count.

    Stale ids are deleted in batches of config.PRUNE_BATCH_SIZE.
    """
    stale = [
        monster_id
        for monster_id, name in session.query(Monster.id, Monster.name)
        if name not in keep
    ]
    batch_size = config.PRUNE_BATCH_SIZE
    for start in range(0, len(stale), batch_size):
        batch = stale[start:start + batch_size]
        session.query(Monster).filter(Monster.id.in_(batch)).delete(
            synchronize_session=False,
        )
    session.commit()
    return len(stale)
