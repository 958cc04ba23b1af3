"""JSON-RPC 2.0 envelope models and MCP method names."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


JSONRPC_VERSION = "2.0"

DEFAULT_PROTOCOL_VERSION = "2025-03-26"
SUPPORTED_PROTOCOL_VERSIONS: tuple[str, ...] = (
    "2024-11-05",
    "2025-03-26",
    "2025-06-18",
)

RequestId = str | int | float | None


def echo_request_id(value: Any) -> RequestId:
    """Return ``value`` when it can be echoed back as a request id, else ``None``."""
    if isinstance(value, bool) or not isinstance(value, str | int | float):
        return None
    return value


class MCPMethod(str, Enum):
    """Methods the dispatcher recognizes."""

    INITIALIZE = "initialize"
    INITIALIZED = "notifications/initialized"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    RESOURCES_LIST = "resources/list"
    RESOURCES_READ = "resources/read"
    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"


class JSONRPCRequest(BaseModel):
    """Decoded request envelope."""

    model_config = ConfigDict(extra="allow")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: str
    params: dict[str, Any] | None = None
    id: RequestId = None


class ErrorObject(BaseModel):
    code: int
    message: str
    data: Any | None = None


class JSONRPCResponse(BaseModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    result: Any
    id: RequestId = None


class JSONRPCErrorResponse(BaseModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    error: ErrorObject
    id: RequestId = None


class TextContent(BaseModel):
    """Text content item returned by tools and prompts."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Result payload of ``tools/call``."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[dict[str, Any]] = Field(default_factory=list)
    is_error: bool | None = Field(default=None, alias="isError")

    @classmethod
    def text(cls, text: str, is_error: bool | None = None) -> "ToolResult":
        return cls(content=[TextContent(text=text).model_dump()], is_error=is_error)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls.text(f"Error: {message}", is_error=True)


def success_envelope(result: Any, request_id: RequestId) -> dict[str, Any]:
    return JSONRPCResponse(result=result, id=request_id).model_dump()


def error_envelope(
    code: int,
    message: str,
    request_id: RequestId = None,
    data: Any | None = None,
) -> dict[str, Any]:
    return JSONRPCErrorResponse(
        error=ErrorObject(code=code, message=message, data=data),
        id=echo_request_id(request_id),
    ).model_dump(exclude={"error": {"data"}} if data is None else None)
