"""JSON-RPC envelopes and the MCP method dispatcher."""

from .dispatcher import Dispatcher, ServerInfo, negotiate_protocol_version
from .models import (
    DEFAULT_PROTOCOL_VERSION,
    JSONRPC_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    JSONRPCRequest,
    MCPMethod,
    RequestId,
    TextContent,
    ToolResult,
    echo_request_id,
    error_envelope,
    success_envelope,
)


__all__ = [
    "DEFAULT_PROTOCOL_VERSION",
    "JSONRPC_VERSION",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "Dispatcher",
    "JSONRPCRequest",
    "MCPMethod",
    "RequestId",
    "ServerInfo",
    "TextContent",
    "ToolResult",
    "echo_request_id",
    "error_envelope",
    "negotiate_protocol_version",
    "success_envelope",
]
