"""Movie Review API: movies, reviews and users over FastAPI + async SQLAlchemy."""

__version__ = "1.0.0"
