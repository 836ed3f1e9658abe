# tests/test_api/test_movies_api.py

import pytest
from httpx import AsyncClient

from moviereview.services import review_service

MOVIES = "/api/v1/movies"

pytestmark = pytest.mark.anyio


async def test_list_movies_includes_average_rating(async_client: AsyncClient, db_session, movie, create_test_movie, user, other_user):
    await create_test_movie(title="Unrated")
    await review_service.submit_review(db_session, movie.id, user.id, 5)
    await review_service.submit_review(db_session, movie.id, other_user.id, 2)

    resp = await async_client.get(MOVIES)

    assert resp.status_code == 200
    ratings = {m["title"]: m["average_rating"] for m in resp.json()}
    assert ratings == {"Inception": 3.5, "Unrated": 0.0}


async def test_get_movie_and_missing_movie(async_client: AsyncClient, movie):
    resp = await async_client.get(f"{MOVIES}/{movie.id}")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Inception"
    assert resp.json()["average_rating"] == 0.0

    missing = await async_client.get(f"{MOVIES}/999999")
    assert missing.status_code == 404
    assert missing.headers["content-type"].startswith("application/problem+json")
    assert missing.json()["title"] == "NotFound"


async def test_search_endpoint(async_client: AsyncClient, create_test_movie):
    await create_test_movie(title="Blade Runner", genre="Sci-Fi")
    await create_test_movie(title="Amelie", genre="Romance")

    resp = await async_client.get(f"{MOVIES}/search", params={"query": "blade"})
    assert [m["title"] for m in resp.json()] == ["Blade Runner"]

    everything = await async_client.get(f"{MOVIES}/search")
    assert len(everything.json()) == 2


async def test_rating_endpoint(async_client: AsyncClient, db_session, movie, user):
    await review_service.submit_review(db_session, movie.id, user.id, 4)

    resp = await async_client.get(f"{MOVIES}/{movie.id}/rating")

    assert resp.status_code == 200
    assert resp.json() == {"movie_id": movie.id, "average_rating": 4.0, "review_count": 1}
    assert (await async_client.get(f"{MOVIES}/999999/rating")).status_code == 404


# ─────────────────────────────────────────────────────────────
# 🛠️ Admin management
# ─────────────────────────────────────────────────────────────
async def test_create_requires_admin(async_client: AsyncClient, user, auth_headers):
    payload = {"title": "Dune"}

    anonymous = await async_client.post(MOVIES, json=payload)
    assert anonymous.status_code == 401

    regular = await async_client.post(MOVIES, json=payload, headers=auth_headers(user))
    assert regular.status_code == 403
    assert regular.json()["detail"] == "Insufficient permissions"


async def test_admin_creates_movie(async_client: AsyncClient, admin_user, auth_headers):
    resp = await async_client.post(
        MOVIES,
        json={"title": "Dune", "genre": "Sci-Fi", "release_date": "2021-10-22", "duration": 155, "average_rating": 5},
        headers=auth_headers(admin_user),
    )

    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["title"] == "Dune"
    assert body["average_rating"] == 0.0
    assert body["release_date"] == "2021-10-22"
    assert resp.headers["location"].endswith(f"{MOVIES}/{body['id']}")


async def test_create_rejects_invalid_body(async_client: AsyncClient, admin_user, auth_headers):
    resp = await async_client.post(MOVIES, json={"title": "", "duration": -3}, headers=auth_headers(admin_user))
    assert resp.status_code == 400


async def test_admin_updates_movie_partially(async_client: AsyncClient, movie, admin_user, auth_headers):
    resp = await async_client.put(
        f"{MOVIES}/{movie.id}", json={"director": "Christopher Nolan"}, headers=auth_headers(admin_user)
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["director"] == "Christopher Nolan"
    assert body["title"] == "Inception"
    assert body["genre"] == "Sci-Fi"


async def test_update_missing_movie(async_client: AsyncClient, admin_user, auth_headers):
    resp = await async_client.put(f"{MOVIES}/999999", json={"title": "x"}, headers=auth_headers(admin_user))
    assert resp.status_code == 404


async def test_admin_deletes_movie_with_reviews(async_client: AsyncClient, db_session, movie, user, admin_user, auth_headers):
    await review_service.submit_review(db_session, movie.id, user.id, 3)

    resp = await async_client.delete(f"{MOVIES}/{movie.id}", headers=auth_headers(admin_user))

    assert resp.status_code == 204
    assert (await async_client.get(f"{MOVIES}/{movie.id}")).status_code == 404
    assert (await async_client.get(f"/api/v1/reviews/movie/{movie.id}")).json() == []


async def test_regular_user_cannot_delete_movie(async_client: AsyncClient, movie, user, auth_headers):
    resp = await async_client.delete(f"{MOVIES}/{movie.id}", headers=auth_headers(user))
    assert resp.status_code == 403
