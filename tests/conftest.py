# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - Every test gets its own throwaway SQLite file under tmp_path
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON (get_connection)
# - Object builders live in tests/builders.py
# ---------------------------------------------------------------------

from __future__ import annotations

import pytest

from retail_ledger.database import get_connection
from retail_ledger.modules.billing import BillingController


@pytest.fixture
def conn(tmp_path):
    c = get_connection(tmp_path / "test.db")
    yield c
    c.close()


@pytest.fixture
def controller(conn):
    return BillingController(conn)
