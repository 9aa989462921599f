"""Immutable dataclasses for the data returned by the gateway.

ProfileRecord is the normalized subset of a GitHub user, SearchResultPage
carries a search payload plus pagination, LookupOutcome records the result
of one per-ID lookup during batch hydration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from core.errors import ExternalServiceError


@dataclass(frozen=True)
class ProfileRecord:
    id: int
    login: str
    avatar_url: Optional[str] = None
    html_url: Optional[str] = None
    public_repos: int = 0
    followers: int = 0

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "ProfileRecord":
        try:
            return cls(
                id=int(data["id"]),
                login=str(data["login"]),
                avatar_url=data.get("avatar_url"),
                html_url=data.get("html_url"),
                public_repos=int(data.get("public_repos") or 0),
                followers=int(data.get("followers") or 0),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ExternalServiceError(f"Malformed GitHub user payload: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        return {
            "login": self.login,
            "id": self.id,
            "avatar_url": self.avatar_url,
            "html_url": self.html_url,
            "public_repos": self.public_repos,
            "followers": self.followers,
        }


@dataclass(frozen=True)
class Pagination:
    current_page: int
    per_page: int
    total_pages: int

    @classmethod
    def compute(cls, *, page: int, per_page: int, total_count: int) -> "Pagination":
        return cls(
            current_page=page,
            per_page=per_page,
            total_pages=math.ceil(total_count / per_page) if per_page > 0 else 0,
        )


@dataclass(frozen=True)
class SearchResultPage:
    """One page of /search/users plus derived pagination.

    `payload` keeps the upstream body as-is (total_count, incomplete_results,
    items) so callers see exactly what GitHub returned.
    """

    payload: Mapping[str, Any]
    pagination: Pagination

    @property
    def total_count(self) -> int:
        return int(self.payload.get("total_count") or 0)

    @property
    def items(self) -> List[Mapping[str, Any]]:
        return list(self.payload.get("items") or [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            **dict(self.payload),
            "pagination": {
                "current_page": self.pagination.current_page,
                "per_page": self.pagination.per_page,
                "total_pages": self.pagination.total_pages,
            },
        }


@dataclass(frozen=True)
class LookupOutcome:
    id: str
    success: bool
    record: Optional[ProfileRecord] = None
    error: Optional[BaseException] = field(default=None, compare=False)
