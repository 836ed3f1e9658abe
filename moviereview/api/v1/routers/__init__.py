from moviereview.api.v1.routers.auth import router as auth_router
from moviereview.api.v1.routers.movies import router as movies_router
from moviereview.api.v1.routers.reviews import router as reviews_router
from moviereview.api.v1.routers.users import router as users_router

__all__ = ["auth_router", "movies_router", "reviews_router", "users_router"]
