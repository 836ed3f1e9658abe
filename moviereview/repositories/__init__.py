"""Data-access layer: one repository per aggregate, each bound to an `AsyncSession`."""

from moviereview.repositories.movies import MovieRepository
from moviereview.repositories.reviews import ReviewRepository
from moviereview.repositories.users import UserRepository

__all__ = ["MovieRepository", "ReviewRepository", "UserRepository"]
