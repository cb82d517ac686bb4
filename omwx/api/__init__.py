# omwx/api/__init__.py
"""API routes package."""

from .routes_evaluate import router as evaluate_router
from .routes_runways import router as runways_router

__all__ = [
    "evaluate_router",
    "runways_router",
]
