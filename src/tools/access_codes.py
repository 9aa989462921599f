"""MCP tools for the phone-number login flow.

Registers 'create_access_code' (generate, store and text a 6-digit code)
and 'validate_access_code' (check and consume it).
"""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.fastmcp import FastMCP

from core.errors import GatewayError
from services.access_codes import AccessCodeService
from tools.responses import error_response, ok


def register(mcp: FastMCP, *, access_codes: AccessCodeService) -> None:
    @mcp.tool(name="create_access_code")
    async def create_access_code(phone_number: str = "") -> Dict[str, Any]:
        """Generate a 6-digit access code, save it and send it by SMS.

        Params:
          - phone_number: destination phone number (required).

        Returns:
          {"status": 200, "data": "<code>"} or an error envelope.
        """
        try:
            code = await access_codes.create_access_code(phone_number)
        except GatewayError as e:
            return error_response(e, context="create_access_code")
        return ok(code)

    @mcp.tool(name="validate_access_code")
    async def validate_access_code(phone_number: str = "", access_code: str = "") -> Dict[str, Any]:
        """Check an access code; a valid code is consumed.

        Returns {"status": 200, "data": {"success": true}} when valid,
        status 400 with "success": false otherwise.
        """
        try:
            valid = await access_codes.validate_access_code(phone_number, access_code)
        except GatewayError as e:
            return error_response(e, context="validate_access_code")

        if not valid:
            return {"status": 400, "error": "Invalid access code", "data": {"success": False}}
        return ok({"success": True})
