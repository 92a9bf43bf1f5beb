import logging
import sqlite3

from ..constants import TABLE_SCHEMA_VERSION

_log = logging.getLogger(__name__)


def _ensure_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION}("
        "id INTEGER PRIMARY KEY CHECK (id=1), version TEXT NOT NULL)"
    )


def get_current_version(conn: sqlite3.Connection) -> str | None:
    _ensure_table(conn)
    row = conn.execute(f"SELECT version FROM {TABLE_SCHEMA_VERSION} WHERE id=1").fetchone()
    return row[0] if row else None


def set_current_version(conn: sqlite3.Connection, version: str) -> None:
    """Upsert the single version row and commit."""
    _ensure_table(conn)
    conn.execute(
        f"INSERT INTO {TABLE_SCHEMA_VERSION}(id, version) VALUES (1, ?) "
        "ON CONFLICT(id) DO UPDATE SET version=excluded.version",
        (version,),
    )
    conn.commit()


def ensure_version(conn: sqlite3.Connection, expected: str) -> str:
    """
    Stamp a fresh store with `expected`; on an existing store return what is
    recorded. A mismatch is only logged: the schema script is additive.
    """
    current = get_current_version(conn)
    if current is None:
        set_current_version(conn, expected)
        return expected
    if current != expected:
        _log.warning("store schema version %s differs from %s", current, expected)
    return current
