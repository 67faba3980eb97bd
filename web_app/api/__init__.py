"""JSON API routers."""

from .routes import router as api_router, users_router

__all__ = ["api_router", "users_router"]
