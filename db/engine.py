"""
db.engine - Engine bootstrap and session factory.

Designed so the connection string can be swapped to MySQL or Postgres
by changing config.DB_URL; no other code needs to change.
"""

from __future__ import annotations

from sqlalchemy import Engine, Table, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def init_db(db_url: str) -> None:
    """Create the engine, apply SQLite pragmas, and emit CREATE TABLE."""
    global _engine, _SessionLocal

    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(db_url, echo=False, future=True)

    if "sqlite" in db_url:
        @event.listens_for(_engine, "connect")
        def _sqlite_pragmas(dbapi_conn, _rec):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA journal_mode=WAL")
            cur.execute("PRAGMA foreign_keys=ON")
            cur.execute("PRAGMA synchronous=NORMAL")
            cur.close()

    Base.metadata.create_all(_engine)
    _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Database not initialised - call init_db() first")
    return _engine


def get_session() -> Session:
    """Return a new session.  Caller is responsible for .close()."""
    if _SessionLocal is None:
        raise RuntimeError("Database not initialised - call init_db() first")
    return _SessionLocal()


def recreate_tables(*tables: Table) -> None:
    """
    Drop then re-create the given tables (listed parents first) with
    foreign-key enforcement switched off, so rows in other tables that
    still point at them do not block the drop.
    """
    engine = get_engine()
    with engine.connect() as conn:
        _set_foreign_key_checks(conn, False)
        try:
            for table in reversed(tables):
                table.drop(conn, checkfirst=True)
            for table in tables:
                table.create(conn)
            conn.commit()
        finally:
            _set_foreign_key_checks(conn, True)
            conn.commit()


def _set_foreign_key_checks(conn, enabled: bool) -> None:
    dialect = conn.dialect.name
    if dialect == "sqlite":
        conn.execute(text(f"PRAGMA foreign_keys={'ON' if enabled else 'OFF'}"))
    elif dialect in ("mysql", "mariadb"):
        conn.execute(text(f"SET FOREIGN_KEY_CHECKS = {1 if enabled else 0}"))
