"""
API v1 Router Aggregator
========================

Exports the combined `router` and a `build_v1_router()` factory.

Quick usage
-----------
    from moviereview.api.v1 import router as v1_router
    app.include_router(v1_router, prefix="/api/v1")

Auth and rate limits live in the child routers; this layer only composes them.
"""

from fastapi import APIRouter

from moviereview.api.v1.routers import auth_router, movies_router, reviews_router, users_router


def build_v1_router() -> APIRouter:
    """Compose `/auth`, `/movies`, `/reviews` and `/users` into one router."""
    v1 = APIRouter()
    v1.include_router(auth_router)
    v1.include_router(movies_router)
    v1.include_router(reviews_router)
    v1.include_router(users_router)
    return v1


router = build_v1_router()

__all__ = ["router", "build_v1_router"]
