"""Short link routers."""

from .routes import router as links_router

__all__ = ["links_router"]
