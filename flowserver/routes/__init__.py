"""API routes package."""

from flowserver.routes.client_routes import router as client_router
from flowserver.routes.file_routes import router as file_router
from flowserver.routes.persona_routes import router as persona_router
from flowserver.routes.store_routes import router as store_router

__all__ = ["client_router", "file_router", "persona_router", "store_router"]
