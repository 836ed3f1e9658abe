# tests/test_obs/test_healthz.py

import uuid

import pytest
from httpx import AsyncClient


@pytest.mark.anyio
async def test_healthz(async_client: AsyncClient):
    resp = await async_client.get("/healthz")

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


@pytest.mark.anyio
async def test_readyz_reports_database(async_client: AsyncClient):
    resp = await async_client.get("/readyz")

    assert resp.status_code == 200
    assert resp.json() == {"ready": True, "checks": {"db": True}}


@pytest.mark.anyio
async def test_readyz_when_database_is_down(async_client: AsyncClient, monkeypatch):
    import moviereview.main as main_module

    async def _down() -> bool:
        return False

    monkeypatch.setattr(main_module, "db_healthcheck", _down)

    resp = await async_client.get("/readyz")
    assert resp.status_code == 503
    assert resp.json()["ready"] is False


@pytest.mark.anyio
async def test_root_info(async_client: AsyncClient):
    body = (await async_client.get("/")).json()
    assert body["name"] == "Movie Review API"


@pytest.mark.anyio
async def test_every_response_has_request_id(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/movies/424242")

    assert resp.status_code == 404
    assert uuid.UUID(resp.headers["x-request-id"]).version == 4


@pytest.mark.anyio
async def test_client_request_id_is_echoed(async_client: AsyncClient):
    rid = str(uuid.uuid4())
    resp = await async_client.get("/healthz", headers={"X-Request-ID": rid})
    assert resp.headers["x-request-id"] == rid


@pytest.mark.anyio
async def test_non_uuid_request_id_is_replaced(async_client: AsyncClient):
    resp = await async_client.get("/healthz", headers={"X-Request-ID": "<script>"})
    assert resp.headers["x-request-id"] != "<script>"
    uuid.UUID(resp.headers["x-request-id"])


@pytest.mark.anyio
async def test_security_headers_present(async_client: AsyncClient):
    resp = await async_client.get("/healthz")

    assert resp.headers["x-content-type-options"] == "nosniff"
    assert resp.headers["x-frame-options"] == "DENY"
    assert "server" not in resp.headers
