"""GitHub client module: user search and profile lookup with caching.

This module provides a small async client focused on the two GitHub reads the
gateway needs: searching users (Search API) and fetching a single user
profile. It relies on `core.cache.ExpiringCache` for the profile and search
namespaces and on `core.rate_limiter` to classify throttling responses.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import httpx

from core.cache import PROFILE, SEARCH, ExpiringCache
from core.errors import ExternalServiceError, NotFoundError, ValidationError
from core.models import Pagination, ProfileRecord, SearchResultPage
from core.rate_limiter import rate_limit_error

from .inputs import (
    normalize_page,
    normalize_per_page,
    normalize_query,
    normalize_user_id,
    search_cache_key,
)

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async GitHub client for user search and profile lookup.

    Purpose:
      - fetch_profile(user_id) -> ProfileRecord
      - search_users(query, page=1, per_page=30) -> SearchResultPage

    Key behavior:
      - Consults the shared cache before any network call and fills it on success.
      - fetch_profile tries /user/{id} first and falls back to /users/{login}
        when the first path reports not-found or an invalid id.
      - Rate-limit responses raise RateLimitedError carrying the reset time;
        retrying is left to the caller.
      - Limits concurrency (Semaphore) across tasks sharing the client.
    """

    BASE_URL = "https://api.github.com"
    JSON_ACCEPT = "application/vnd.github.v3+json"
    USER_AGENT = "github-favorites-gateway/1.0"

    def __init__(
        self,
        *,
        cache: ExpiringCache,
        base_url: Optional[str] = None,
        timeout: float = 20.0,
        verify: bool = True,
        token: Optional[str] = None,
        max_concurrency: int = 10,
    ) -> None:
        self._cache = cache
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._headers = self._build_headers(token)
        self._sem = asyncio.Semaphore(max(1, int(max_concurrency)))

    async def fetch_profile(self, user_id: str) -> ProfileRecord:
        """Fetch one user by numeric id or login, caching under the requested key."""
        key = normalize_user_id(user_id)

        cached = self._cache.get(PROFILE, key)
        if cached is not None:
            logger.debug("[CACHE HIT] profile %s", key)
            return cached  # type: ignore[return-value]

        logger.debug("[CACHE MISS] profile %s", key)
        async with self._create_client() as client:
            try:
                data = await self._get_json(
                    client, f"/user/{key}", context="fetch_profile(primary)", invalid_is_not_found=True
                )
            except NotFoundError:
                logger.info("Primary lookup /user/%s failed, falling back to /users/%s", key, key)
                data = await self._get_json(
                    client, f"/users/{key}", context="fetch_profile(fallback)", invalid_is_not_found=True
                )

        record = ProfileRecord.from_api(data)
        self._cache.set(PROFILE, key, record)
        return record

    async def search_users(self, query: str, page: int = 1, per_page: int = 30) -> SearchResultPage:
        """Search users; pagination is derived from total_count."""
        q = normalize_query(query)
        page_clean = normalize_page(page)
        per_page_clean = normalize_per_page(per_page)

        key = search_cache_key(q, page_clean, per_page_clean)
        cached = self._cache.get(SEARCH, key)
        if cached is not None:
            logger.debug('[CACHE HIT] search "%s" (page %d)', q, page_clean)
            return cached  # type: ignore[return-value]

        logger.debug('[CACHE MISS] search "%s" (page %d)', q, page_clean)
        async with self._create_client() as client:
            data = await self._get_json(
                client,
                "/search/users",
                params={"q": q, "page": page_clean, "per_page": per_page_clean},
                context="search_users",
            )

        if not isinstance(data, dict):
            raise ExternalServiceError("Malformed GitHub search payload")

        result = SearchResultPage(
            payload=data,
            pagination=Pagination.compute(
                page=page_clean,
                per_page=per_page_clean,
                total_count=int(data.get("total_count") or 0),
            ),
        )
        self._cache.set(SEARCH, key, result)
        return result

    # --- HTTP helpers ---

    def _build_headers(self, token: Optional[str]) -> dict[str, str]:
        headers = {
            "Accept": self.JSON_ACCEPT,
            "User-Agent": self.USER_AGENT,
        }
        # Unauthenticated unless a token is configured
        if token and token.strip():
            headers["Authorization"] = f"Bearer {token.strip()}"
        return headers

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        context: str,
        invalid_is_not_found: bool = False,
    ) -> Any:
        try:
            # Limit concurrent requests across tasks
            async with self._sem:
                resp = await client.get(url, params=dict(params or {}))
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"GitHub request failed ({context}): {e}") from e

        throttled = rate_limit_error(resp)
        if throttled is not None:
            raise throttled

        # 422 on a user path means an unusable id; on search it means bad
        # parameters, e.g. a page past the 1000-result cap
        if resp.status_code == 404 or (resp.status_code == 422 and invalid_is_not_found):
            raise NotFoundError(f"GitHub resource not found: {url}")
        if resp.status_code == 422:
            raise ValidationError(f"GitHub rejected the request ({context}): {_message(resp)}")

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(f"GitHub request failed ({context}): {e}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise ExternalServiceError(f"GitHub returned invalid JSON ({context})") from e


def _message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or "unprocessable request"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "unprocessable request"
