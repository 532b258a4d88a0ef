"""FastAPI dependencies for the fantasy-league API."""

from app.dependencies.auth import verify_api_key
from app.dependencies.context import get_context

__all__ = ["get_context", "verify_api_key"]
