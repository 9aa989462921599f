from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


class GatewayError(Exception):
    """Base error for the gateway."""


class ValidationError(GatewayError):
    """Raised when user input is invalid."""


class NotFoundError(GatewayError):
    """Raised when a requested resource is not found."""


class ExternalServiceError(GatewayError):
    """Raised when an external service (GitHub/Twilio) fails."""


class RateLimitedError(GatewayError):
    """Raised when GitHub reports that the rate limit is exhausted.

    `reset_at` is the epoch second at which the limit resets, if GitHub told us.
    """

    def __init__(self, message: str, *, reset_at: Optional[int] = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at

    @property
    def reset_at_iso(self) -> str:
        if self.reset_at is None:
            return "unknown"
        try:
            stamp = datetime.fromtimestamp(self.reset_at, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return "unknown"
        return stamp.isoformat().replace("+00:00", "Z")
