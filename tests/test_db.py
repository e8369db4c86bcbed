from db import engine_options, normalize_database_url


def test_postgres_urls_use_psycopg():
    assert (
        normalize_database_url("postgres://u:p@host:5432/db")
        == "postgresql+psycopg://u:p@host:5432/db"
    )
    assert (
        normalize_database_url("postgresql://u:p@host/db") == "postgresql+psycopg://u:p@host/db"
    )
    assert normalize_database_url("postgresql+psycopg://host/db") == "postgresql+psycopg://host/db"
    assert normalize_database_url("sqlite:///./arithmetic.db") == "sqlite:///./arithmetic.db"


def test_engine_options_per_backend():
    sqlite = engine_options("sqlite:///./arithmetic.db")
    assert sqlite == {"connect_args": {"check_same_thread": False}}
    postgres = engine_options("postgresql+psycopg://host/db")
    assert postgres["pool_pre_ping"] is True
    assert "connect_args" not in postgres
