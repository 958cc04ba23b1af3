"""Shared test fixtures for the MCP Lambda adaptor tests.

Servers are built with explicit ``Settings`` so the process environment and
the cached ``get_settings()`` never leak into a test.
"""

import base64
import json
from collections.abc import Callable
from typing import Any

import pytest

from lambda_mcp.adapters.lambda_handler import create_lambda_handler
from lambda_mcp.config.settings import Settings, get_settings
from lambda_mcp.core.logging import setup_logging
from lambda_mcp.schema.fields import integer, number, string
from lambda_mcp.server import MCPServer
from tests.helpers import rpc


EventFactory = Callable[..., dict[str, Any]]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom settings."""
    config.option.asyncio_mode = "auto"

    # Same processors as production so rendering errors surface in tests
    setup_logging(json_logs=False, log_level_name="DEBUG", configure_stdlib=False)


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Any:
    """Drop cached settings and auth variables between tests."""
    monkeypatch.delenv("VALID_TOKENS", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def server(settings: Settings) -> MCPServer:
    """Server with one capability of each kind plus failing variants."""
    server = MCPServer(name="Test Server", version="0.1.0", settings=settings)

    @server.tool("add", {"a": number(), "b": number()})
    def add(a: float, b: float) -> str:
        """Add two numbers"""
        return str(a + b)

    @server.tool(
        "echo",
        {
            "message": string(description="Text to echo"),
            "repeat": integer(minimum=1, maximum=5).with_default(1),
        },
    )
    async def echo(message: str, repeat: int) -> str:
        """Echo a message"""
        return " ".join([message] * repeat)

    @server.tool("explode", {})
    def explode() -> str:
        raise RuntimeError("boom")

    @server.resource("config", "config://app", mime_type="application/json")
    def config(uri: str) -> str:
        """Application configuration"""
        return json.dumps({"debug": False})

    @server.resource("broken", "broken://resource")
    def broken(uri: str) -> str:
        raise OSError("disk unavailable")

    @server.prompt("greeting", {"name": string(min_length=1)})
    def greeting(name: str) -> str:
        """Greet a person"""
        return f"Say hello to {name}"

    @server.prompt("faulty", {})
    def faulty() -> str:
        raise ValueError("template missing")

    return server


@pytest.fixture
def make_event() -> EventFactory:
    """Build API Gateway proxy events.

    ``version=2`` produces an HTTP API / function URL event where the method
    lives under ``requestContext.http``.
    """

    def factory(
        body: Any = None,
        method: str = "POST",
        headers: dict[str, str] | None = None,
        version: int = 1,
        base64_body: bool = False,
    ) -> dict[str, Any]:
        if headers is None:
            headers = {"Content-Type": "application/json"}

        raw = body if isinstance(body, str) or body is None else json.dumps(body)
        if base64_body and raw is not None:
            raw = base64.b64encode(raw.encode("utf-8")).decode("ascii")

        event: dict[str, Any] = {
            "headers": headers,
            "body": raw,
            "isBase64Encoded": base64_body,
        }
        if version == 1:
            event["httpMethod"] = method
        else:
            event["requestContext"] = {"http": {"method": method}}
        return event

    return factory


@pytest.fixture
def lambda_handler(server: MCPServer, settings: Settings) -> Callable[..., Any]:
    return create_lambda_handler(server, settings=settings)


@pytest.fixture
def make_rpc() -> Callable[..., dict[str, Any]]:
    return rpc
