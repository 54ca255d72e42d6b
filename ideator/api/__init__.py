"""API module initialization."""
from .health import router as health_router
from .settings import router as settings_router
from .discovery import router as discovery_router
from .workspaces import router as workspaces_router
from .productions import router as productions_router

__all__ = [
    "health_router", "settings_router", "discovery_router",
    "workspaces_router", "productions_router"
]
