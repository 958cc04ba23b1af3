"""Single MCP endpoint forwarding every verb to the Lambda event pipeline."""

import base64
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Request, Response


router = APIRouter()


async def request_to_event(request: Request) -> dict[str, Any]:
    """Convert an incoming request into a Lambda proxy event.

    Both the REST API (``httpMethod``) and HTTP API (``requestContext.http``)
    method locations are filled in.
    """
    raw = await request.body()
    try:
        body = raw.decode("utf-8")
        is_base64 = False
    except UnicodeDecodeError:
        body = base64.b64encode(raw).decode("ascii")
        is_base64 = True

    return {
        "httpMethod": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "queryStringParameters": dict(request.query_params) or None,
        "body": body,
        "isBase64Encoded": is_base64,
        "requestContext": {
            "requestId": str(uuid4()),
            "http": {"method": request.method, "path": request.url.path},
        },
    }


@router.api_route(
    "/mcp",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def mcp_endpoint(request: Request) -> Response:
    event = await request_to_event(request)
    result = await request.app.state.pipeline(event, None)
    return Response(
        content=result.get("body") or b"",
        status_code=result["statusCode"],
        headers=result.get("headers") or {},
    )
