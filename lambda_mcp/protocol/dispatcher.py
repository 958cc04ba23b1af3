"""Route decoded JSON-RPC requests to the registered capabilities.

The dispatcher holds a frozen ``RegistrySnapshot`` and keeps no state between
calls. Failures surface in two ways:

* ``tools/call`` turns validation and handler failures into a tool result with
  ``isError: true`` so the calling agent sees them as content.
* every other failure is raised as an ``MCPError`` and rendered as a JSON-RPC
  error envelope by ``handle_message``.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel

from lambda_mcp.core.errors import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    InternalError,
    InvalidParamsError,
    MCPError,
    MethodNotFoundError,
    ShapeValidationError,
)
from lambda_mcp.registry import RegistrySnapshot

from .models import (
    DEFAULT_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    JSONRPCRequest,
    MCPMethod,
    ToolResult,
    error_envelope,
    success_envelope,
)


__all__ = ["Dispatcher", "ServerInfo", "negotiate_protocol_version"]


@dataclass(frozen=True)
class ServerInfo:
    name: str = "MCP Server"
    version: str = "1.0.0"
    description: str = "MCP Server powered by AWS Lambda"
    protocol_version: str = DEFAULT_PROTOCOL_VERSION


def negotiate_protocol_version(requested: Any, default: str) -> str:
    """Accept the client's version when supported, otherwise answer with ``default``."""
    if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return default


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    return value


class Dispatcher:
    """Stateless MCP method router."""

    def __init__(
        self,
        snapshot: RegistrySnapshot,
        server_info: ServerInfo | None = None,
        logger: Any | None = None,
    ) -> None:
        self.snapshot = snapshot
        self.server_info = server_info or ServerInfo()
        self.logger = logger or structlog.get_logger(__name__)

    async def handle_message(self, message: Mapping[str, Any]) -> dict[str, Any] | None:
        """Dispatch an already validated envelope and wrap the outcome.

        Returns ``None`` when no response body should be sent.
        """
        request_id = message.get("id")
        try:
            request = JSONRPCRequest.model_validate(message)
        except ValueError:
            return error_envelope(INVALID_REQUEST, "Invalid Request", request_id)

        try:
            result = await self.handle_request(request)
        except MCPError as e:
            self.logger.warning(
                "mcp_request_failed",
                method=request.method,
                code=e.code,
                error=e.message,
            )
            return error_envelope(e.code, e.message, request.id, e.data)
        except Exception as e:
            self.logger.error(
                "mcp_request_error", method=request.method, error=str(e), exc_info=e
            )
            return error_envelope(INTERNAL_ERROR, str(e) or "Internal error", request.id)

        if result is None:
            return None
        return success_envelope(result, request.id)

    async def handle_request(self, request: JSONRPCRequest) -> Any:
        """Run the behavior registered for ``request.method``.

        Raises:
            MCPError: For unknown methods, bad parameters and non-tool handler faults
        """
        params = request.params or {}
        self.logger.debug("mcp_request", method=request.method, id=request.id)

        match request.method:
            case MCPMethod.INITIALIZE:
                return self.handle_initialize(params)
            case MCPMethod.INITIALIZED:
                return None
            case MCPMethod.TOOLS_LIST:
                return {"tools": self.snapshot.list_tools()}
            case MCPMethod.TOOLS_CALL:
                return await self.handle_tools_call(params)
            case MCPMethod.RESOURCES_LIST:
                return {"resources": self.snapshot.list_resources()}
            case MCPMethod.RESOURCES_READ:
                return await self.handle_resources_read(params)
            case MCPMethod.PROMPTS_LIST:
                return {"prompts": self.snapshot.list_prompts()}
            case MCPMethod.PROMPTS_GET:
                return await self.handle_prompts_get(params)
            case _:
                raise MethodNotFoundError(request.method)

    def handle_initialize(self, params: Mapping[str, Any]) -> dict[str, Any]:
        info = self.server_info
        protocol_version = negotiate_protocol_version(
            params.get("protocolVersion"), info.protocol_version
        )

        counts = self.snapshot.counts()
        capabilities = {
            kind: {"listChanged": True} for kind, count in counts.items() if count
        }

        client_info = params.get("clientInfo") or {}
        self.logger.info(
            "mcp_initialize",
            requested_version=params.get("protocolVersion"),
            protocol_version=protocol_version,
            client_name=client_info.get("name") if isinstance(client_info, Mapping) else None,
        )

        return {
            "protocolVersion": protocol_version,
            "capabilities": capabilities,
            "serverInfo": {"name": info.name, "version": info.version},
            "instructions": info.description,
        }

    async def handle_tools_call(self, params: Mapping[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not name or not isinstance(name, str):
            raise InvalidParamsError("Tool name is required")

        tool = self.snapshot.find_tool(name)
        if tool is None:
            raise InvalidParamsError(f"Tool not found: {name}")

        try:
            result = await tool.handler(params.get("arguments"))
        except ShapeValidationError as e:
            self.logger.info("tool_validation_failed", tool_name=name, error=e.message)
            return ToolResult.error(e.message).model_dump(by_alias=True)
        except Exception as e:
            self.logger.warning(
                "tool_handler_failed", tool_name=name, error=str(e), exc_info=e
            )
            return ToolResult.error(str(e)).model_dump(by_alias=True)

        if isinstance(result, str):
            return ToolResult.text(result).model_dump(by_alias=True, exclude_none=True)
        return _dump(result)

    async def handle_resources_read(self, params: Mapping[str, Any]) -> dict[str, Any]:
        uri = params.get("uri")
        if not uri or not isinstance(uri, str):
            raise InvalidParamsError("Resource URI is required")

        resource = self.snapshot.find_resource_by_uri(uri)
        if resource is None:
            raise InvalidParamsError(f"Resource not found: {uri}")

        try:
            result = await resource.handler(uri)
        except Exception as e:
            self.logger.warning(
                "resource_handler_failed", uri=uri, error=str(e), exc_info=e
            )
            raise InternalError(f"Resource read error: {e}") from e

        if isinstance(result, str):
            return {
                "contents": [
                    {
                        "uri": uri,
                        "mimeType": resource.mime_type or "text/plain",
                        "text": result,
                    }
                ]
            }
        return _dump(result)

    async def handle_prompts_get(self, params: Mapping[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not name or not isinstance(name, str):
            raise InvalidParamsError("Prompt name is required")

        prompt = self.snapshot.find_prompt(name)
        if prompt is None:
            raise InvalidParamsError(f"Prompt not found: {name}")

        try:
            result = await prompt.handler(params.get("arguments"))
        except ShapeValidationError:
            raise
        except Exception as e:
            self.logger.warning(
                "prompt_handler_failed", prompt_name=name, error=str(e), exc_info=e
            )
            raise InternalError(f"Prompt execution error: {e}") from e

        if isinstance(result, str):
            return {
                "description": prompt.description,
                "messages": [
                    {"role": "user", "content": {"type": "text", "text": result}}
                ],
            }
        return _dump(result)
