"""Tests for database initialization and connection management."""
from review_tracker.db import get_connection, init_db, read_snapshot, write_snapshot


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    tables = {row[0] for row in cursor.fetchall()}
    assert "snapshots" in tables
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise


def test_init_db_creates_parent_dir(tmp_path):
    db_path = str(tmp_path / "nested" / "dir" / "tracker.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "dir" / "tracker.db").exists()


def test_read_missing_snapshot_is_none(tmp_db):
    init_db(tmp_db)
    assert read_snapshot(tmp_db, "state") is None


def test_write_snapshot_overwrites(tmp_db):
    init_db(tmp_db)
    write_snapshot(tmp_db, "state", '{"v": 1}', "2024-01-01T00:00:00")
    write_snapshot(tmp_db, "state", '{"v": 2}', "2024-01-02T00:00:00")
    assert read_snapshot(tmp_db, "state") == '{"v": 2}'
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM snapshots").fetchone()[0] == 1
    conn.close()
