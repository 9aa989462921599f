"""Response envelope shared by all tools.

Success: {"status": 200, "data": ...}
Failure: {"status": <code>, "error": "..."} plus "reset_at" when rate limited.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from core.errors import (
    ExternalServiceError,
    GatewayError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (RateLimitedError, 429),
    (ExternalServiceError, 502),
)


def ok(data: Any) -> Dict[str, Any]:
    return {"status": 200, "data": data}


def status_for(err: GatewayError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(err, cls):
            return status
    return 500


def error_response(err: GatewayError, *, context: str) -> Dict[str, Any]:
    status = status_for(err)
    if status >= 500:
        logger.error("%s failed: %s", context, err)
    else:
        logger.info("%s rejected (%d): %s", context, status, err)

    if isinstance(err, RateLimitedError):
        return {
            "status": status,
            "error": "GitHub API rate limit exceeded. Please try again later.",
            "reset_at": err.reset_at_iso,
        }
    return {"status": status, "error": str(err)}
