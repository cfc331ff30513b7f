"""API routers for the host API."""

from .controls import router as controls_router

__all__ = ["controls_router"]
