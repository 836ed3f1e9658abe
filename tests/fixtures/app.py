# tests/fixtures/app.py

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from moviereview.db.session import get_async_db
from moviereview.main import create_app
from tests.fixtures.db import get_override_get_db

__all__ = ["app", "async_client"]


@pytest.fixture()
async def app(db_session) -> FastAPI:
    """Fresh application wired to the test session."""
    application = create_app()
    application.dependency_overrides[get_async_db] = get_override_get_db(db_session)
    return application


@pytest.fixture()
async def async_client(app: FastAPI):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
