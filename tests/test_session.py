"""Tests for studify.db.session."""
from studify.db import normalize_database_url


def test_database_url_normalisation() -> None:
    assert normalize_database_url("postgres://u:p@host/db") == "postgresql+asyncpg://u:p@host/db"
    assert normalize_database_url("postgresql://host/db") == "postgresql+asyncpg://host/db"
    assert normalize_database_url("postgresql+asyncpg://host/db") == "postgresql+asyncpg://host/db"
    assert normalize_database_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"
