"""AWS Lambda transport for ``MCPServer``.

Each invocation carries exactly one HTTP request (API Gateway REST, HTTP API
or function URL proxy event) and produces one proxy-integration response.
Nothing is kept between invocations apart from the frozen registry.
"""

import asyncio
import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from lambda_mcp.auth import Auth, BearerTokenAuth
from lambda_mcp.auth.middleware import EventHandler, create_authenticated_handler
from lambda_mcp.config.settings import Settings
from lambda_mcp.core.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    MCPError,
    MethodNotAllowedError,
    ParseError,
)
from lambda_mcp.core.logging import configure_logging_once
from lambda_mcp.protocol.models import JSONRPC_VERSION
from lambda_mcp.utils.cors import (
    get_basic_cors_headers,
    get_cors_headers,
    get_request_origin,
)
from lambda_mcp.utils.headers import get_event_body, get_header, get_http_method

from .responses import LambdaResponse, create_error_response, create_response


if TYPE_CHECKING:
    from lambda_mcp.server import MCPServer


__all__ = [
    "LambdaAdapter",
    "create_event_pipeline",
    "create_lambda_handler",
    "status_for_error_code",
]

logger = structlog.get_logger(__name__)

LambdaHandler = Callable[[dict[str, Any], Any], LambdaResponse]

_STATUS_BY_CODE = {
    PARSE_ERROR: 400,
    INVALID_REQUEST: 400,
    METHOD_NOT_FOUND: 400,
    INVALID_PARAMS: 400,
    INTERNAL_ERROR: 500,
}


def status_for_error_code(code: int) -> int:
    """HTTP status for a JSON-RPC error envelope produced by the dispatcher."""
    return _STATUS_BY_CODE.get(code, 500)


class LambdaAdapter:
    """Translate Lambda proxy events into MCP messages and back."""

    def __init__(self, server: "MCPServer", settings: Settings | None = None) -> None:
        self.server = server
        self.settings = settings or server.settings

    @property
    def cors(self) -> Any:
        return self.settings.cors

    async def handle_event(
        self, event: dict[str, Any], context: Any = None
    ) -> LambdaResponse:
        origin = get_request_origin(event.get("headers"))
        cors_headers = get_cors_headers(self.cors, origin)

        try:
            method = get_http_method(event)
            match method:
                case "OPTIONS":
                    return create_response("", 200, cors_headers)
                case "POST":
                    return await self.handle_mcp_request(event, cors_headers)
                case "GET":
                    raise MethodNotAllowedError("Method not allowed: Stateless mode")
                case _:
                    raise MethodNotAllowedError(f"Method not allowed: {method}")
        except MCPError as e:
            logger.info("mcp_transport_rejected", code=e.code, error=e.message)
            return create_error_response(e.status_code, e.code, e.message, cors_headers)
        except Exception as e:
            logger.error("lambda_handler_error", error=str(e), exc_info=e)
            return create_error_response(
                500,
                INTERNAL_ERROR,
                "Internal server error",
                get_basic_cors_headers(self.cors, origin),
            )

    async def handle_mcp_request(
        self, event: dict[str, Any], cors_headers: dict[str, str]
    ) -> LambdaResponse:
        """Process a POSTed JSON-RPC message.

        Raises:
            ParseError: When the body is not declared as or not valid JSON
        """
        content_type = get_header(event.get("headers"), "content-type") or ""
        if "application/json" not in content_type.lower():
            raise ParseError("Parse error: Content-Type must be application/json")

        try:
            message = json.loads(get_event_body(event) or "{}")
        except ValueError as e:
            raise ParseError("Parse error: Invalid JSON") from e

        request_id = message.get("id") if isinstance(message, dict) else None

        if not isinstance(message, dict) or message.get("jsonrpc") != JSONRPC_VERSION:
            return create_error_response(
                400,
                INVALID_REQUEST,
                "Invalid Request: missing jsonrpc field",
                cors_headers,
                request_id,
            )

        if not message.get("method") or not isinstance(message["method"], str):
            return create_error_response(
                400,
                INVALID_REQUEST,
                "Invalid Request: missing method field",
                cors_headers,
                request_id,
            )

        structlog.contextvars.bind_contextvars(
            method=message["method"], request_id=request_id
        )

        response = await self.server.handle_message(message)
        if response is None:
            return create_response("", 204, cors_headers)

        status_code = 200
        if "error" in response:
            status_code = status_for_error_code(response["error"]["code"])

        return create_response(response, status_code, cors_headers)


def create_event_pipeline(
    server: "MCPServer",
    auth: BearerTokenAuth | None = None,
    settings: Settings | None = None,
) -> EventHandler:
    """Compose the async ``pipeline(event, context)`` shared by every entry point.

    With ``auth`` every non-preflight request is verified before it reaches
    the server. Without it, ``settings.security`` decides whether bearer
    authentication is enabled. Logging is configured from
    ``settings.logging`` unless structlog was set up beforehand.
    """
    adapter = LambdaAdapter(server, settings)
    configure_logging_once(
        adapter.settings.logging.level, adapter.settings.logging.format
    )
    server.freeze()

    if auth is None:
        auth = Auth.from_settings(adapter.settings.security, adapter.cors)

    if auth is None:
        return adapter.handle_event
    return create_authenticated_handler(adapter.handle_event, auth)


def create_lambda_handler(
    server: "MCPServer",
    auth: BearerTokenAuth | None = None,
    settings: Settings | None = None,
) -> LambdaHandler:
    """Build the synchronous ``handler(event, context)`` Lambda entry point."""
    pipeline = create_event_pipeline(server, auth, settings)

    def handler(event: dict[str, Any], context: Any = None) -> LambdaResponse:
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            aws_request_id=getattr(context, "aws_request_id", None)
        )
        try:
            return asyncio.run(pipeline(event, context))
        finally:
            structlog.contextvars.clear_contextvars()

    return handler
