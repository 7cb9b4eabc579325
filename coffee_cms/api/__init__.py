"""API routes."""

from .content import router as content_router
from .maintenance import router as maintenance_router

__all__ = [
    "content_router",
    "maintenance_router",
]
