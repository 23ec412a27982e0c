"""
Tests for engine and session setup
"""

import pytest
from sqlalchemy import text

from database import build_engine


@pytest.mark.database
class TestBuildEngine:
    """Tests for the engine factory"""

    def test_sqlite_enforces_foreign_keys(self, test_engine):
        with test_engine.connect() as conn:
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_in_memory_database_survives_across_connections(self):
        engine = build_engine("sqlite:///:memory:")
        try:
            with engine.begin() as conn:
                conn.execute(text("CREATE TABLE scratch_rows (id INTEGER PRIMARY KEY)"))
                conn.execute(text("INSERT INTO scratch_rows (id) VALUES (1)"))
            with engine.connect() as conn:
                assert conn.execute(text("SELECT COUNT(*) FROM scratch_rows")).scalar() == 1
        finally:
            engine.dispose()
