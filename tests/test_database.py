from jee_timer.database_manager import SCHEMA_VERSION, DBConfig, DatabaseManager
from jee_timer.repositories import get_value, remove_values, set_value


def test_init_idempotent(db: DatabaseManager):
    # Second call is a no-op and keeps existing rows
    set_value(db, "k", "kept")
    db.init_db()
    assert db.schema_version == SCHEMA_VERSION
    assert get_value(db, "k") == "kept"


def test_fresh_file_is_upgraded(tmp_path):
    manager = DatabaseManager(DBConfig(path=tmp_path / "nested" / "fresh.sqlite"))
    assert manager.schema_version == 0
    manager.init_db()
    assert manager.schema_version == SCHEMA_VERSION
    tables = {r["name"] for r in manager.query_all("SELECT name FROM sqlite_master WHERE type='table'")}
    assert "kv_store" in tables
    manager.close()


def test_kv_upsert_and_remove(db: DatabaseManager):
    assert get_value(db, "k") is None
    set_value(db, "k", "one")
    set_value(db, "k", "two")
    assert get_value(db, "k") == "two"
    set_value(db, "other", "x")
    remove_values(db, ["k", "missing"])
    assert get_value(db, "k") is None
    assert get_value(db, "other") == "x"
