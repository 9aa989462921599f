import sys
import types
import uuid
import importlib.util
from pathlib import Path

import pytest

from clients.github import GitHubClient
from services.access_codes import AccessCodeService
from services.favorites import FavoritesService


def _find_server_py() -> Path:
    root = Path(__file__).resolve().parents[2]
    p = root / "src" / "server" / "server.py"
    if not p.exists():
        raise FileNotFoundError(f"Could not find server.py at {p}")
    return p


def _install_fake_modules(monkeypatch, captures: dict):
    # ---- Fake mcp.server.fastmcp.FastMCP ----
    mcp_mod = types.ModuleType("mcp")
    mcp_server_mod = types.ModuleType("mcp.server")
    fastmcp_mod = types.ModuleType("mcp.server.fastmcp")

    class DummyFastMCP:
        def __init__(self, name: str, **settings):
            captures["fastmcp_name"] = name
            captures["fastmcp_settings"] = settings
            captures["mcp_instance"] = self
            self.tools = {}
            self.run_calls = []

        def tool(self, *, name: str):
            def _decorator(fn):
                self.tools[name] = fn
                return fn
            return _decorator

        def run(self, *, transport: str):
            self.run_calls.append({"transport": transport})
            captures["run_calls"] = list(self.run_calls)

    fastmcp_mod.FastMCP = DummyFastMCP
    mcp_mod.__path__ = []
    mcp_server_mod.__path__ = []

    monkeypatch.setitem(sys.modules, "mcp", mcp_mod)
    monkeypatch.setitem(sys.modules, "mcp.server", mcp_server_mod)
    monkeypatch.setitem(sys.modules, "mcp.server.fastmcp", fastmcp_mod)

    # ---- Fake config ----
    config_mod = types.ModuleType("config")
    config_mod.HTTP_VERIFY = True
    config_mod.GITHUB_API_URL = "https://github.example"
    config_mod.GITHUB_TIMEOUT = 7.5
    config_mod.GITHUB_TOKEN = None
    config_mod.GITHUB_MAX_CONCURRENCY = 4
    config_mod.PROFILE_CACHE_TTL = 100.0
    config_mod.SEARCH_CACHE_TTL = 10.0
    config_mod.RATE_LIMIT_MAX_ATTEMPTS = 3
    config_mod.RATE_LIMIT_BASE_DELAY = 2.0
    config_mod.RATE_LIMIT_MAX_DELAY = 10.0
    config_mod.TWILIO_ACCOUNT_SID = ""
    config_mod.TWILIO_AUTH_TOKEN = ""
    config_mod.TWILIO_PHONE_NUMBER = ""
    config_mod.TWILIO_TIMEOUT = 5.0
    config_mod.MCP_TRANSPORT = "streamable-http"
    config_mod.HOST = "0.0.0.0"
    config_mod.PORT = 8080
    config_mod.LOG_LEVEL = "DEBUG"
    monkeypatch.setitem(sys.modules, "config", config_mod)

    # ---- Fake logging setup ----
    logging_mod = types.ModuleType("core.logging_setup")

    def setup_logging(level):
        captures["log_level"] = level

    logging_mod.setup_logging = setup_logging
    monkeypatch.setitem(sys.modules, "core.logging_setup", logging_mod)

    # ---- Fake tool registration ----
    tools_pkg = types.ModuleType("tools")
    tools_pkg.__path__ = []
    monkeypatch.setitem(sys.modules, "tools", tools_pkg)

    def _fake_tool_module(name: str):
        mod = types.ModuleType(f"tools.{name}")

        def register(mcp, **deps):
            captures.setdefault(f"register_{name}_calls", []).append({"mcp": mcp, **deps})

        mod.register = register
        monkeypatch.setitem(sys.modules, f"tools.{name}", mod)

    for name in ("access_codes", "github_users", "favorites"):
        _fake_tool_module(name)


def _load_server_module(monkeypatch, captures: dict):
    _install_fake_modules(monkeypatch, captures)

    server_path = _find_server_py()
    mod_name = f"server_under_test_{uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(mod_name, server_path)
    assert spec and spec.loader

    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, mod_name, module)
    spec.loader.exec_module(module)
    return module


def test_server_register_all_and_di(monkeypatch):
    captures = {}
    module = _load_server_module(monkeypatch, captures)

    assert captures["fastmcp_name"] == "github-favorites-gateway"
    assert captures["fastmcp_settings"] == {"host": "0.0.0.0", "port": 8080}
    assert captures["log_level"] == "DEBUG"
    mcp = captures["mcp_instance"]

    # Each tool module registered once on the same server
    for name in ("access_codes", "github_users", "favorites"):
        calls = captures[f"register_{name}_calls"]
        assert len(calls) == 1
        assert calls[0]["mcp"] is mcp

    gh = captures["register_github_users_calls"][0]["github_client"]
    assert isinstance(gh, GitHubClient)
    assert gh._base_url == "https://github.example"
    assert gh._timeout == 7.5

    assert isinstance(captures["register_access_codes_calls"][0]["access_codes"], AccessCodeService)

    favorites = captures["register_favorites_calls"][0]["favorites"]
    assert isinstance(favorites, FavoritesService)
    # Aggregator shares the client and its cache with the search/profile tools
    aggregator = favorites._aggregator
    assert aggregator._client is gh
    assert aggregator._cache is gh._cache

    assert "health" in mcp.tools

    module.main()
    assert captures["run_calls"] == [{"transport": "streamable-http"}]


@pytest.mark.asyncio
async def test_server_health_tool(monkeypatch):
    captures = {}
    _load_server_module(monkeypatch, captures)

    out = await captures["mcp_instance"].tools["health"]()
    assert out["status"] == 200
