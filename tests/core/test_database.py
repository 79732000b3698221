# File: tests/core/test_database.py

from sqlalchemy import text, inspect
from scribe.core.database.connection import get_db, engine, init_db


def test_database_connection():
    """
    Simple smoke test to ensure DB is reachable and configured.
    """
    db_gen = get_db()
    db = next(db_gen)
    try:
        result = db.execute(text("SELECT 1"))
        assert result.scalar() == 1
    finally:
        db.close()


def test_init_db_creates_feature_tables():
    init_db()
    tables = set(inspect(engine).get_table_names())
    assert {"stt_engines", "transcripts", "transcript_segments", "transcript_dictionary"} <= tables
