from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_health_db():
    r = client.get("/health/db")
    assert r.status_code == 200
    b = r.json()
    assert b["ok"] is True
    assert b["sessions_table"] is True


def test_health_migrations_basic():
    r = client.get("/health/migrations")
    assert r.status_code == 200
    b = r.json()
    assert "code_heads" in b and isinstance(b["code_heads"], list)
    assert "db_version" in b


def test_single_migration_head():
    b = client.get("/health/migrations").json()
    assert b["code_heads"] == ["0001_test_sessions"]
