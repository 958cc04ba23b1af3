"""Lambda proxy-integration response builders."""

import json
from typing import Any

from lambda_mcp.protocol.models import RequestId, error_envelope


LambdaResponse = dict[str, Any]


def create_response(
    body: Any,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> LambdaResponse:
    """Build a proxy-integration response; non-string bodies are JSON encoded."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json", **(headers or {})},
        "body": body if isinstance(body, str) else json.dumps(body),
    }


def create_error_response(
    status_code: int,
    code: int,
    message: str,
    headers: dict[str, str] | None = None,
    request_id: RequestId = None,
) -> LambdaResponse:
    """Build a response carrying a JSON-RPC error envelope."""
    return create_response(
        error_envelope(code, message, request_id),
        status_code=status_code,
        headers=headers,
    )


def create_plain_error_response(
    status_code: int,
    error: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> LambdaResponse:
    """Non JSON-RPC error body used before the protocol layer is reached."""
    return create_response(
        {"error": error, "message": message},
        status_code=status_code,
        headers=headers,
    )
