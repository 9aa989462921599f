"""Interpret GitHub throttling signals on a response.

GitHub signals an exhausted limit in two ways:
- 403 with a body message mentioning the rate limit, plus X-RateLimit-Reset.
- 429 (secondary limits), optionally with Retry-After.
Anything else is not a rate-limit condition.
"""

from __future__ import annotations

import time
from typing import Mapping, Optional

import httpx

from core.errors import RateLimitedError

_RATE_LIMIT_MARKER = "rate limit"


def rate_limit_error(response: httpx.Response) -> Optional[RateLimitedError]:
    # Returns the error to raise, or None if the response is not throttled.
    if response.status_code == 429:
        return RateLimitedError(_message(response), reset_at=_reset_at(response.headers))

    if response.status_code == 403:
        remaining = response.headers.get("X-RateLimit-Remaining")
        if remaining == "0" or _RATE_LIMIT_MARKER in _message(response).lower():
            return RateLimitedError(_message(response), reset_at=_reset_at(response.headers))

    return None


def _message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "GitHub API rate limit exceeded"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "GitHub API rate limit exceeded"


def _reset_at(headers: Mapping[str, str]) -> Optional[int]:
    reset = _parse_int_header(headers, "X-RateLimit-Reset")
    if reset is not None:
        return reset

    retry_after = _parse_int_header(headers, "Retry-After")
    if retry_after is not None:
        return int(time.time()) + retry_after

    return None


def _parse_int_header(headers: Mapping[str, str], name: str) -> Optional[int]:
    value = headers.get(name)
    if not value:
        return None
    value = value.strip()
    if not value.isdigit():
        return None
    try:
        return int(value)
    except ValueError:
        return None
