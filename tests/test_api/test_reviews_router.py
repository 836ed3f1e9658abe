# tests/test_api/test_reviews_router.py
"""
Router-level checks with the service layer faked out.

The routes are mounted on a bare app with the real exception handlers, and
`review_service` is swapped for a fake, so these tests never touch a database.
"""

import importlib
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from moviereview.core.dependencies import get_current_principal, get_current_user
from moviereview.core.exception_handlers import (
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from moviereview.core.exceptions import ConflictException
from moviereview.core.limiter import install_rate_limiter
from moviereview.db.session import get_async_db
from moviereview.schemas.auth import TokenPayload
from moviereview.schemas.enums import Role


def _review(**overrides):
    data = dict(
        id=11,
        movie_id=3,
        movie_title="Heat",
        user_id=7,
        username="neil",
        rating=4,
        comment=None,
        review_date=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )
    data.update(overrides)
    return SimpleNamespace(**data)


class FakeReviewService:
    def __init__(self):
        self.calls = []

    async def get_recent_reviews(self, db, limit=None):
        self.calls.append(("recent", limit))
        return [_review()]

    async def submit_review(self, db, movie_id, author_id, rating, comment=None):
        self.calls.append(("submit", movie_id, author_id, rating))
        raise ConflictException("User has already reviewed this movie")

    async def delete_review(self, db, review_id, caller_id, caller_is_admin=False):
        self.calls.append(("delete", review_id, caller_id, caller_is_admin))

    async def get_review(self, db, review_id):
        raise RuntimeError("boom")


def _build_app(monkeypatch, role=Role.USER):
    mod = importlib.import_module("moviereview.api.v1.routers.reviews")
    fake = FakeReviewService()
    monkeypatch.setattr(mod, "review_service", fake)

    app = FastAPI()
    install_rate_limiter(app)
    app.include_router(mod.router, prefix="/api/v1")
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    async def _no_db():
        yield None

    app.dependency_overrides[get_async_db] = _no_db
    app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=7, username="neil")
    app.dependency_overrides[get_current_principal] = lambda: TokenPayload(
        sub="neil", role=role, uid=7, exp=4102444800, jti="test-jti"
    )
    return app, fake


def test_recent_passes_limit_through(monkeypatch):
    app, fake = _build_app(monkeypatch)
    client = TestClient(app)

    resp = client.get("/api/v1/reviews/recent", params={"limit": 500})

    assert resp.status_code == 200
    assert resp.json()[0]["movie_title"] == "Heat"
    assert fake.calls == [("recent", 500)]


def test_conflict_is_rendered_as_problem_json(monkeypatch):
    app, fake = _build_app(monkeypatch)
    client = TestClient(app)

    resp = client.post("/api/v1/reviews/movie/3", json={"rating": 4})

    assert resp.status_code == 409
    assert resp.headers["content-type"].startswith("application/problem+json")
    body = resp.json()
    assert body["title"] == "Conflict"
    assert body["instance"].endswith("/api/v1/reviews/movie/3")
    assert fake.calls == [("submit", 3, 7, 4)]


def test_invalid_body_never_reaches_service(monkeypatch):
    app, fake = _build_app(monkeypatch)
    client = TestClient(app)

    resp = client.post("/api/v1/reviews/movie/3", json={"rating": "five"})

    assert resp.status_code == 400
    assert fake.calls == []


def test_admin_flag_comes_from_token_role(monkeypatch):
    app, fake = _build_app(monkeypatch, role=Role.ADMIN)
    client = TestClient(app)

    resp = client.delete("/api/v1/reviews/11")

    assert resp.status_code == 204
    assert fake.calls == [("delete", 11, 7, True)]


def test_unexpected_error_becomes_500(monkeypatch):
    app, _ = _build_app(monkeypatch)
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/api/v1/reviews/11")

    assert resp.status_code == 500
    assert resp.json()["detail"] == "An unexpected error occurred."
    assert "request_id" in resp.json()
