"""Configuration and environment helpers for the project.

Provides small helpers to read typed environment variables and exposes
project-level configuration constants used by the server bootstrap (GitHub
endpoint and timeouts, cache TTLs, retry policy, Twilio credentials,
transport and logging).
"""

from __future__ import annotations

import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _env_str(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


# Network / HTTP
HTTP_VERIFY = _env_bool("HTTP_VERIFY", True)

# GitHub
GITHUB_API_URL = _env_str("GITHUB_API_URL", "https://api.github.com")
GITHUB_TIMEOUT = _env_float("GITHUB_TIMEOUT", 20.0)
GITHUB_TOKEN = _env_str("GITHUB_TOKEN") or None
GITHUB_MAX_CONCURRENCY = _env_int("GITHUB_MAX_CONCURRENCY", 10)

# Cache TTLs (seconds)
PROFILE_CACHE_TTL = _env_float("PROFILE_CACHE_TTL", 2 * 60 * 60)
SEARCH_CACHE_TTL = _env_float("SEARCH_CACHE_TTL", 10 * 60)

# Rate-limit retries during favorites hydration
RATE_LIMIT_MAX_ATTEMPTS = _env_int("RATE_LIMIT_MAX_ATTEMPTS", 3)
RATE_LIMIT_BASE_DELAY = _env_float("RATE_LIMIT_BASE_DELAY", 2.0)
RATE_LIMIT_MAX_DELAY = _env_float("RATE_LIMIT_MAX_DELAY", 10.0)

# Twilio (SMS is mocked unless all three are set)
TWILIO_ACCOUNT_SID = _env_str("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = _env_str("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = _env_str("TWILIO_PHONE_NUMBER")
TWILIO_TIMEOUT = _env_float("TWILIO_TIMEOUT", 20.0)

# Server
MCP_TRANSPORT = _env_str("MCP_TRANSPORT", "streamable-http")
HOST = _env_str("HOST", "127.0.0.1")
PORT = _env_int("PORT", 3000)
LOG_LEVEL = _env_str("LOG_LEVEL", "INFO")
