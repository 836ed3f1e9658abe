# tests/fixtures/movies.py

import pytest

from moviereview.services import movie_service
from tests.utils.factory import movie_payload

__all__ = ["create_test_movie", "movie"]


@pytest.fixture
def create_test_movie(db_session):
    async def _create(**overrides):
        return await movie_service.create_movie(db_session, movie_payload(**overrides))

    return _create


@pytest.fixture
async def movie(create_test_movie):
    return await create_test_movie(title="Inception", genre="Sci-Fi")
