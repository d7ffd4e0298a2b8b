"""Session state management for authenticated API calls."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

#: Default bearer token time-to-live in seconds (24 hours), matching the
#: expiry the server stamps into its tokens.
DEFAULT_SESSION_TTL: float = 24 * 3600


class Session(BaseModel):
    """Session state after a successful login.

    Parameters
    ----------
    username : str
        The authenticated user name.
    token : str
        Bearer token sent with every authenticated request.
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the session
        was created. Defaults to *now* if not provided.
    ttl : float
        Time-to-live in seconds. After this period the session is
        considered expired and is refreshed by a new login.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    username: str
    token: str
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = DEFAULT_SESSION_TTL

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    @property
    def is_expired(self) -> bool:
        """Whether the session has exceeded its TTL."""
        return (time.monotonic() - self.created_at) >= self.ttl

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.created_at
