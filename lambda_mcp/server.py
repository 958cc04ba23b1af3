"""MCP server facade: fluent capability registration plus request handling."""

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import structlog

from lambda_mcp.config.core import ServerSettings
from lambda_mcp.config.settings import Settings, get_settings
from lambda_mcp.core.logging import configure_logging_once
from lambda_mcp.protocol.dispatcher import Dispatcher, ServerInfo
from lambda_mcp.protocol.models import JSONRPCRequest
from lambda_mcp.registry import CapabilityRegistry, RegistrySnapshot
from lambda_mcp.schema.fields import Shape


__all__ = ["MCPServer", "create_mcp_server"]

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class MCPServer:
    """Registers tools, resources and prompts and answers MCP requests.

    Registration happens while the module is imported. The first request
    freezes the registry; registering afterwards raises
    ``RegistryFrozenError``.

    Example:
        server = MCPServer(name="calculator")

        @server.tool("add", {"a": number(), "b": number()})
        def add(a: float, b: float) -> str:
            \"\"\"Add two numbers\"\"\"
            return str(a + b)
    """

    def __init__(
        self,
        name: str | None = None,
        version: str | None = None,
        description: str | None = None,
        protocol_version: str | None = None,
        settings: Settings | None = None,
        logger: Any | None = None,
    ) -> None:
        self.settings = settings or get_settings()

        overrides = {
            key: value
            for key, value in {
                "name": name,
                "version": version,
                "description": description,
                "protocol_version": protocol_version,
            }.items()
            if value is not None
        }
        self.config = ServerSettings.model_validate(
            {**self.settings.server.model_dump(), **overrides}
        )
        configure_logging_once(
            self.settings.logging.level, self.settings.logging.format
        )

        self.logger = logger or structlog.get_logger(__name__).bind(
            server_name=self.config.name
        )
        self._registry = CapabilityRegistry()
        self._dispatcher: Dispatcher | None = None

    @property
    def registry(self) -> CapabilityRegistry:
        return self._registry

    @property
    def server_info(self) -> ServerInfo:
        return ServerInfo(
            name=self.config.name,
            version=self.config.version,
            description=self.config.description,
            protocol_version=self.config.protocol_version,
        )

    def tool(
        self,
        name: str,
        shape: Shape | None = None,
        handler: Callable[..., Any] | None = None,
        description: str | None = None,
    ) -> Any:
        """Register a tool; without ``handler`` this returns a decorator."""
        if handler is None:

            def decorator(func: F) -> F:
                self._registry.register_tool(name, shape or {}, func, description)
                return func

            return decorator

        self._registry.register_tool(name, shape or {}, handler, description)
        return self

    def resource(
        self,
        name: str,
        uri: str,
        handler: Callable[[str], Any] | None = None,
        description: str | None = None,
        mime_type: str | None = None,
    ) -> Any:
        """Register a resource served at ``uri``; the handler receives the uri."""
        if handler is None:

            def decorator(func: F) -> F:
                self._registry.register_resource(
                    name, uri, func, description, mime_type
                )
                return func

            return decorator

        self._registry.register_resource(name, uri, handler, description, mime_type)
        return self

    def prompt(
        self,
        name: str,
        shape: Shape | None = None,
        handler: Callable[..., Any] | None = None,
        description: str | None = None,
    ) -> Any:
        """Register a prompt template; without ``handler`` this returns a decorator."""
        if handler is None:

            def decorator(func: F) -> F:
                self._registry.register_prompt(name, shape or {}, func, description)
                return func

            return decorator

        self._registry.register_prompt(name, shape or {}, handler, description)
        return self

    def _ensure_dispatcher(self) -> Dispatcher:
        if self._dispatcher is None:
            snapshot = self._registry.freeze()
            self._dispatcher = Dispatcher(snapshot, self.server_info, self.logger)
            self.logger.info("mcp_server_ready", **snapshot.counts())
        return self._dispatcher

    def freeze(self) -> RegistrySnapshot:
        """Freeze the registry and build the dispatcher if not done yet."""
        return self._ensure_dispatcher().snapshot

    @property
    def dispatcher(self) -> Dispatcher:
        return self._ensure_dispatcher()

    async def handle_request(self, request: JSONRPCRequest | Mapping[str, Any]) -> Any:
        """Return the raw result of one request; protocol failures raise ``MCPError``."""
        if not isinstance(request, JSONRPCRequest):
            request = JSONRPCRequest.model_validate(request)
        return await self.dispatcher.handle_request(request)

    async def handle_message(self, message: Mapping[str, Any]) -> dict[str, Any] | None:
        """Return the response envelope for ``message``, or ``None`` for notifications."""
        return await self.dispatcher.handle_message(message)

    def get_stats(self) -> dict[str, Any]:
        return {
            **self._registry.counts(),
            "config": self.config.model_dump(),
        }


def create_mcp_server(**kwargs: Any) -> MCPServer:
    """Build an ``MCPServer``; keyword arguments override the configured identity."""
    return MCPServer(**kwargs)
