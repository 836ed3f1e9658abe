# tests/conftest.py
"""
Shared pytest setup.

The environment is pinned *before* anything from `moviereview` is imported:
settings, the engine and the limiter are all built at import time.
"""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production-use")
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite+aiosqlite://")
os.environ.setdefault("ENV", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("LOG_TO_FILE", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_TEST_BYPASS", "1")
os.environ.setdefault("RATE_LIMIT_NAMESPACE", f"pytest-{os.getpid()}")

from tests.fixtures.db import *  # noqa: E402,F401,F403
from tests.fixtures.app import *  # noqa: E402,F401,F403
from tests.fixtures.users import *  # noqa: E402,F401,F403
from tests.fixtures.movies import *  # noqa: E402,F401,F403
