from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.errors import GatewayError
from services.favorites import FavoritesService
from tools.responses import error_response, ok


def register(mcp: FastMCP, *, favorites: FavoritesService) -> None:
    @mcp.tool(name="like_github_user")
    async def like_github_user(phone_number: str = "", github_user_id: str = "") -> Dict[str, Any]:
        """Add a GitHub user to the favorites of a phone number."""
        try:
            await favorites.like_user(phone_number, github_user_id)
        except GatewayError as e:
            return error_response(e, context="like_github_user")
        return ok({"message": "GitHub user liked successfully"})

    @mcp.tool(name="get_user_profile")
    async def get_user_profile(
        phone_number: str = "",
        page: int = 0,
        limit: int = 0,
        basic: bool = False,
    ) -> Dict[str, Any]:
        """Return the favorite GitHub users of a phone number.

        Params:
          - phone_number: owner of the favorites (required).
          - page, limit: 1-based slice of the favorites, applied when both > 0.
          - basic: return {id, login} stubs without calling GitHub.

        Profiles that cannot be loaded are left out; order is not guaranteed.
        """
        try:
            users = await favorites.get_favorites(phone_number, page=page, limit=limit, basic=basic)
        except GatewayError as e:
            return error_response(e, context="get_user_profile")
        return ok({"favorite_github_users": users})
