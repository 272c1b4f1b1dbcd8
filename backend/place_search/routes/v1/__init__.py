# backend/place_search/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import places

__all__ = ["places"]
