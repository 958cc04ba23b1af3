"""Authentication wrapper around the Lambda event handler."""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from lambda_mcp.adapters.responses import LambdaResponse, create_plain_error_response
from lambda_mcp.utils.cors import get_cors_headers, get_request_origin
from lambda_mcp.utils.headers import get_http_method

from .bearer import BearerTokenAuth


logger = structlog.get_logger(__name__)

EventHandler = Callable[[dict[str, Any], Any], Awaitable[LambdaResponse]]


def create_authenticated_handler(
    handler: EventHandler, auth: BearerTokenAuth
) -> EventHandler:
    """Run ``auth`` before ``handler``.

    CORS preflight requests are answered without credentials. On success the
    verified identity and token are attached to the event as ``user`` and
    ``authToken``.
    """

    async def authenticated_handler(
        event: dict[str, Any], context: Any = None
    ) -> LambdaResponse:
        try:
            if get_http_method(event) == "OPTIONS":
                origin = get_request_origin(event.get("headers"))
                return {
                    "statusCode": 200,
                    "headers": get_cors_headers(auth.cors, origin),
                    "body": "",
                }

            result = await auth.verify(event)
            if not result.authorized:
                logger.info(
                    "authentication_failed",
                    status_code=(result.failure_response or {}).get("statusCode"),
                )
                return result.failure_response or create_plain_error_response(
                    401,
                    "unauthorized",
                    "Authentication failed",
                    auth.basic_error_headers(),
                )

            event["user"] = result.identity
            event["authToken"] = result.token
            logger.debug("authentication_succeeded")

            return await handler(event, context)
        except Exception as e:
            logger.error("authenticated_handler_error", error=str(e), exc_info=e)
            return create_plain_error_response(
                500,
                "internal_server_error",
                "An internal server error occurred",
                auth.basic_error_headers(),
            )

    return authenticated_handler
