"""
API Routers package.

Each module contains a FastAPI router for a specific domain.
"""

from .projects import router as projects_router
from .quotes import router as quotes_router
from .vendors import router as vendors_router

__all__ = [
    "projects_router",
    "quotes_router",
    "vendors_router",
]
