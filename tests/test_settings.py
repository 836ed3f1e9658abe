# tests/test_settings.py
"""Configuration parsing: DSN assembly, CSV origins, bounded knobs."""

import pytest
from pydantic import ValidationError

from moviereview.core.config import Settings


def _settings(**overrides) -> Settings:
    values = {"JWT_SECRET_KEY": "k", "SQLALCHEMY_DATABASE_URI": None}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_async_url_is_built_from_postgres_parts():
    s = _settings(
        POSTGRES_USER="movies",
        POSTGRES_PASSWORD="pw",
        POSTGRES_SERVER="db",
        POSTGRES_PORT=6543,
        POSTGRES_DB="reviews",
    )
    assert s.DATABASE_URL == "postgresql://movies:pw@db:6543/reviews"
    assert s.ASYNC_DATABASE_URL == "postgresql+asyncpg://movies:pw@db:6543/reviews"


def test_explicit_dsn_wins():
    s = _settings(SQLALCHEMY_DATABASE_URI="sqlite+aiosqlite:///./local.db")
    assert s.ASYNC_DATABASE_URL == "sqlite+aiosqlite:///./local.db"


def test_blank_dsn_counts_as_unset():
    s = _settings(SQLALCHEMY_DATABASE_URI="   ")
    assert s.ASYNC_DATABASE_URL.startswith("postgresql+asyncpg://")


def test_frontend_origins_csv_is_normalized():
    s = _settings(FRONTEND_ORIGINS=" https://a.example , ,https://b.example ")
    assert s.FRONTEND_ORIGINS == "https://a.example,https://b.example"
    assert s.frontend_origins_list == ["https://a.example", "https://b.example"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"ACCESS_TOKEN_EXPIRE_MINUTES": 1},
        {"ACCESS_TOKEN_EXPIRE_MINUTES": 60 * 24 + 1},
        {"BCRYPT_ROUNDS": 3},
        {"JWT_ALGORITHM": "none"},
    ],
)
def test_out_of_bounds_values_are_rejected(overrides):
    with pytest.raises(ValidationError):
        _settings(**overrides)


def test_bootstrap_admin_requires_all_fields():
    assert not _settings().bootstrap_admin_configured
    assert not _settings(BOOTSTRAP_ADMIN_USERNAME="root", BOOTSTRAP_ADMIN_EMAIL="r@example.com").bootstrap_admin_configured
    assert _settings(
        BOOTSTRAP_ADMIN_USERNAME="root",
        BOOTSTRAP_ADMIN_PASSWORD="changeme",
        BOOTSTRAP_ADMIN_EMAIL="r@example.com",
    ).bootstrap_admin_configured


def test_ratelimit_storage_defaults_to_memory():
    assert _settings().ratelimit_storage == "memory://"
    assert _settings(RATELIMIT_STORAGE_URI="redis://cache:6379/0").ratelimit_storage == "redis://cache:6379/0"
