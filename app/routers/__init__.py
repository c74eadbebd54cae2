"""Routers package for API endpoints.

This package contains the FastAPI routers for the Exit Interview
Documentation service.
"""

from app.routers import interviews

__all__ = ["interviews"]
