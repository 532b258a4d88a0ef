"""Application context dependency."""

from __future__ import annotations

from fastapi import Request

from app.context import AppContext


def get_context(request: Request) -> AppContext:
    """Return the context built at startup (overridden in tests)."""
    return request.app.state.context
