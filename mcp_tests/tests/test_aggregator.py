import asyncio

import httpx
import pytest

import core.retry as retry_mod
from clients.github import GitHubClient
from core.cache import PROFILE, ExpiringCache
from core.errors import NotFoundError, RateLimitedError
from core.models import ProfileRecord
from core.retry import RateLimitRetry
from services.aggregator import ProfileAggregator


def _record(login: str, id_: int) -> ProfileRecord:
    return ProfileRecord(id=id_, login=login, html_url=f"https://github.com/{login}")


class FakeGitHubClient:
    """fetch_profile stand-in: behaviors map id -> record, exception, or (delay, record)."""

    def __init__(self, behaviors: dict):
        self._behaviors = behaviors
        self.calls = []

    async def fetch_profile(self, user_id: str) -> ProfileRecord:
        self.calls.append(user_id)
        behavior = self._behaviors[user_id]
        if isinstance(behavior, BaseException):
            raise behavior
        if isinstance(behavior, tuple):
            delay, record = behavior
            await asyncio.sleep(delay)
            return record
        return behavior


def _aggregator(client, cache=None):
    return ProfileAggregator(
        client=client,
        cache=cache or ExpiringCache(),
        retry=RateLimitRetry(base_delay=0.0, max_delay=0.0),
    )


@pytest.mark.asyncio
async def test_resolve_all_drops_failed_ids():
    a, c = _record("alice", 1), _record("carol", 3)
    client = FakeGitHubClient({"A": a, "B": NotFoundError("no such user"), "C": c})

    out = await _aggregator(client).resolve_all(["A", "B", "C"])

    assert len(out) == 2
    assert sorted(r.login for r in out) == ["alice", "carol"]
    assert sorted(client.calls) == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_resolve_all_empty_makes_no_calls():
    client = FakeGitHubClient({})

    assert await _aggregator(client).resolve_all([]) == []
    assert client.calls == []


@pytest.mark.asyncio
async def test_resolve_all_all_failing_returns_empty():
    client = FakeGitHubClient({"x": NotFoundError("x"), "y": RuntimeError("bug")})

    assert await _aggregator(client).resolve_all(["x", "y"]) == []


@pytest.mark.asyncio
async def test_rate_limited_id_is_retried_then_dropped():
    a = _record("alice", 1)
    client = FakeGitHubClient({"A": a, "B": RateLimitedError("limit")})

    out = await _aggregator(client).resolve_all(["A", "B"])

    assert out == [a]
    assert client.calls.count("B") == 3
    assert client.calls.count("A") == 1


@pytest.mark.asyncio
async def test_cache_hit_skips_upstream():
    cache = ExpiringCache()
    cached = _record("alice", 1)
    cache.set(PROFILE, "alice", cached)
    client = FakeGitHubClient({})

    out = await _aggregator(client, cache).resolve_all(["alice"])

    assert out == [cached]
    assert client.calls == []


@pytest.mark.asyncio
async def test_success_cached_under_requested_id_and_login():
    cache = ExpiringCache()
    record = _record("octocat", 583231)
    client = FakeGitHubClient({"583231": record})

    await _aggregator(client, cache).resolve_all(["583231"])

    assert cache.get(PROFILE, "583231") == record
    assert cache.get(PROFILE, "octocat") == record


@pytest.mark.asyncio
async def test_results_follow_completion_order():
    slow, fast = _record("slow", 1), _record("fast", 2)
    client = FakeGitHubClient({"slow": (0.05, slow), "fast": (0.0, fast)})

    out = await _aggregator(client).resolve_all(["slow", "fast"])

    assert out == [fast, slow]


@pytest.mark.asyncio
async def test_lookups_run_concurrently():
    started = []
    release = asyncio.Event()

    class GatedClient:
        async def fetch_profile(self, user_id):
            started.append(user_id)
            if len(started) == 3:
                release.set()
            # Only completes if all three lookups are in flight together
            await asyncio.wait_for(release.wait(), timeout=1.0)
            return _record(user_id, len(started))

    out = await _aggregator(GatedClient()).resolve_all(["a", "b", "c"])

    assert sorted(r.login for r in out) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_resolve_outcomes_reports_failures():
    a = _record("alice", 1)
    err = NotFoundError("gone")
    client = FakeGitHubClient({"A": a, "B": err})

    outcomes = await _aggregator(client).resolve_outcomes(["A", "B"])
    by_id = {o.id: o for o in outcomes}

    assert by_id["A"].success is True
    assert by_id["A"].record == a
    assert by_id["B"].success is False
    assert by_id["B"].record is None
    assert by_id["B"].error is err


@pytest.mark.asyncio
async def test_resolve_all_against_github_transport(monkeypatch):
    sleeps = []

    async def fake_sleep(seconds: float):
        sleeps.append(seconds)

    monkeypatch.setattr(retry_mod.asyncio, "sleep", fake_sleep)

    calls = {}

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        calls[path] = calls.get(path, 0) + 1
        if path in ("/user/limited", "/users/limited"):
            return httpx.Response(
                403,
                headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"},
                json={"message": "API rate limit exceeded"},
            )
        if path == "/users/octocat":
            return httpx.Response(
                200,
                json={"login": "octocat", "id": 583231, "html_url": "https://github.com/octocat"},
            )
        return httpx.Response(404, json={"message": "Not Found"})

    cache = ExpiringCache()
    client = GitHubClient(cache=cache)
    transport = httpx.MockTransport(handler)
    monkeypatch.setattr(
        client,
        "_create_client",
        lambda: httpx.AsyncClient(base_url=client._base_url, headers=client._headers, transport=transport),
    )
    aggregator = ProfileAggregator(client=client, cache=cache, retry=RateLimitRetry())

    out = await aggregator.resolve_all(["limited", "octocat"])

    assert [r.login for r in out] == ["octocat"]
    # Rate limit on the primary path: no fallback, three attempts, then dropped
    assert calls["/user/limited"] == 3
    assert "/users/limited" not in calls
    assert sleeps == [2.0, 4.0]
    assert calls["/user/octocat"] == 1
    assert calls["/users/octocat"] == 1
    assert cache.get(PROFILE, "octocat").id == 583231
    assert cache.get(PROFILE, "limited") is None
