"""Server bootstrap for the GitHub favorites gateway.

Creates the FastMCP instance, builds the shared cache, clients and services
once, injects them into the tool modules and starts the configured transport.
"""

from mcp.server.fastmcp import FastMCP

from clients.github import GitHubClient
from clients.twilio_client import TwilioSmsSender
from config import (
    GITHUB_API_URL,
    GITHUB_MAX_CONCURRENCY,
    GITHUB_TIMEOUT,
    GITHUB_TOKEN,
    HOST,
    HTTP_VERIFY,
    LOG_LEVEL,
    MCP_TRANSPORT,
    PORT,
    PROFILE_CACHE_TTL,
    RATE_LIMIT_BASE_DELAY,
    RATE_LIMIT_MAX_ATTEMPTS,
    RATE_LIMIT_MAX_DELAY,
    SEARCH_CACHE_TTL,
    TWILIO_ACCOUNT_SID,
    TWILIO_AUTH_TOKEN,
    TWILIO_PHONE_NUMBER,
    TWILIO_TIMEOUT,
)
from core.cache import PROFILE, SEARCH, ExpiringCache
from core.logging_setup import setup_logging
from core.retry import RateLimitRetry
from services.access_codes import AccessCodeService
from services.aggregator import ProfileAggregator
from services.favorites import FavoritesService
from stores.memory_store import InMemoryPasscodeStore

from tools.access_codes import register as register_access_codes
from tools.favorites import register as register_favorites
from tools.github_users import register as register_github_users

setup_logging(LOG_LEVEL)

mcp = FastMCP("github-favorites-gateway", host=HOST, port=PORT)


def register_tools() -> None:
    cache = ExpiringCache({PROFILE: PROFILE_CACHE_TTL, SEARCH: SEARCH_CACHE_TTL})
    github_client = GitHubClient(
        cache=cache,
        base_url=GITHUB_API_URL,
        timeout=GITHUB_TIMEOUT,
        verify=HTTP_VERIFY,
        token=GITHUB_TOKEN,
        max_concurrency=GITHUB_MAX_CONCURRENCY,
    )
    retry = RateLimitRetry(
        max_attempts=RATE_LIMIT_MAX_ATTEMPTS,
        base_delay=RATE_LIMIT_BASE_DELAY,
        max_delay=RATE_LIMIT_MAX_DELAY,
    )
    aggregator = ProfileAggregator(client=github_client, cache=cache, retry=retry)

    store = InMemoryPasscodeStore()
    sms = TwilioSmsSender(
        account_sid=TWILIO_ACCOUNT_SID,
        auth_token=TWILIO_AUTH_TOKEN,
        from_number=TWILIO_PHONE_NUMBER,
        timeout=TWILIO_TIMEOUT,
        verify=HTTP_VERIFY,
    )

    register_access_codes(mcp, access_codes=AccessCodeService(store=store, sms=sms))
    register_github_users(mcp, github_client=github_client)
    register_favorites(mcp, favorites=FavoritesService(store=store, aggregator=aggregator))


def register_health() -> None:
    @mcp.tool(name="health")
    async def health() -> dict:
        """Liveness check."""
        return {"status": 200, "data": "GitHub favorites gateway is running"}


def register_all() -> None:
    register_tools()
    register_health()


register_all()


def main() -> None:
    mcp.run(transport=MCP_TRANSPORT)


if __name__ == "__main__":
    main()
