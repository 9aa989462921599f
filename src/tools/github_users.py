"""MCP tools for GitHub user search and profile lookup.

Both go through the shared GitHubClient (and therefore its cache). Errors,
including rate limiting with its reset time, come back as envelopes.
"""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from clients.github import GitHubClient
from core.errors import GatewayError
from tools.responses import error_response, ok


def register(mcp: FastMCP, *, github_client: GitHubClient) -> None:
    @mcp.tool(name="search_github_users")
    async def search_github_users(q: str = "", page: int = 1, per_page: int = 30) -> Dict[str, Any]:
        """Search GitHub users.

        Params:
          - q: search term (required).
          - page: 1-based page number (default: 1).
          - per_page: results per page, 1..100 (default: 30).

        Returns:
          GitHub's search body (total_count, incomplete_results, items) plus
          pagination {current_page, per_page, total_pages}.
        """
        try:
            result = await github_client.search_users(q, page, per_page)
        except GatewayError as e:
            return error_response(e, context="search_github_users")
        return ok(result.to_dict())

    @mcp.tool(name="find_github_user_profile")
    async def find_github_user_profile(github_user_id: str = "") -> Dict[str, Any]:
        """Fetch one GitHub user by numeric id or login.

        Returns login, id, avatar_url, html_url, public_repos and followers.
        """
        try:
            record = await github_client.fetch_profile(github_user_id)
        except GatewayError as e:
            return error_response(e, context="find_github_user_profile")
        return ok(record.to_dict())
