from __future__ import annotations

from typing import Any, Optional

from core.errors import ValidationError

MAX_PER_PAGE = 100  # GitHub search caps per_page at 100
DEFAULT_PER_PAGE = 30


def normalize_user_id(user_id: Any) -> str:
    # Numeric id or login; path segments would change the endpoint
    raw = "" if user_id is None else str(user_id).strip()
    if not raw:
        raise ValidationError("GitHub user ID is required")
    if "/" in raw:
        raise ValidationError(f"Invalid GitHub user ID: {raw}")
    return raw


def normalize_query(query: Optional[str]) -> str:
    q = (query or "").strip()
    if not q:
        raise ValidationError("Search term is required")
    return q


def _to_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be an integer") from e


def normalize_page(page: Any) -> int:
    n = 1 if page is None else _to_int(page, "page")
    if n < 1:
        raise ValidationError("page must be >= 1")
    return n


def normalize_per_page(per_page: Any) -> int:
    n = DEFAULT_PER_PAGE if per_page is None else _to_int(per_page, "per_page")
    if n < 1 or n > MAX_PER_PAGE:
        raise ValidationError(f"per_page must be between 1 and {MAX_PER_PAGE}")
    return n


def search_cache_key(query: str, page: int, per_page: int) -> str:
    return f"{query}_{page}_{per_page}"
