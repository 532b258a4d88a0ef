"""Error taxonomy shared by services and HTTP handlers.

Every error carries the HTTP status the handler boundary maps it to and a
message that is safe to show to clients. Server-side causes are chained with
``raise ... from`` and logged where they are caught, never returned.
"""

from __future__ import annotations

from fastapi import status


class FantasyApiError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.public_message
        super().__init__(self.message)


class InvalidArgument(FantasyApiError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "Invalid argument"


class NotFound(FantasyApiError):
    """A directly addressed entity (league, team) does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Not found"


class DataUnavailable(FantasyApiError):
    """League/team/matchup data could not be read."""

    public_message = "League data is temporarily unavailable"


class StoreUnavailable(DataUnavailable):
    """The notification store could not be read or written."""

    public_message = "Notification store is temporarily unavailable"


def require_identifier(value: object, name: str) -> str:
    """Return ``value`` stripped, or raise InvalidArgument when it is not a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{name} is required")
    return value.strip()
