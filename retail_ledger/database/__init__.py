# database/__init__.py
from __future__ import annotations

from pathlib import Path
import sqlite3

from ..config import DB_PATH, DB_TIMEOUT_SECONDS
from ..constants import SCHEMA_VERSION
from . import schema as schema_module
from .versioning import ensure_version


def get_connection(
    db_path: Path | str | None = None,
    *,
    timeout: float | None = None,
) -> sqlite3.Connection:
    """
    Returns a sqlite3.Connection with:
      - WAL mode (file databases only)
      - foreign_keys ON
      - row_factory = sqlite3.Row (so rows behave like dicts and tuples)
      - a bounded busy timeout, so a locked store fails instead of hanging
    Ensures the schema is applied idempotently and the version row exists.
    """
    target = DB_PATH if db_path is None else db_path
    in_memory = str(target) == ":memory:"
    if not in_memory:
        Path(target).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(
        str(target),
        timeout=DB_TIMEOUT_SECONDS if timeout is None else timeout,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    if not in_memory:
        conn.execute("PRAGMA journal_mode = WAL;")

    schema_module.init_schema(conn)
    ensure_version(conn, SCHEMA_VERSION)

    conn.commit()
    return conn


__all__ = [
    "get_connection",
]
