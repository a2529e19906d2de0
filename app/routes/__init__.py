"""API route modules for FastAPI endpoints."""

from app.routes.issues import router as issues_router
from app.routes.session import router as session_router

__all__ = ["issues_router", "session_router"]
