"""API layer module.

Contains FastAPI routers, response schemas and middleware.
"""

from explorer.api.explore import router as explore_router
from explorer.api.health import router as health_router

__all__ = [
    "explore_router",
    "health_router",
]
