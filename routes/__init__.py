"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.mappings import router as mappings_router

__all__ = [
    "mappings_router",
]
