"""Header and event helpers for Lambda proxy events."""

import base64
from collections.abc import Mapping
from typing import Any


def get_header(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header lookup.

    API Gateway REST events keep the client's casing while HTTP API and
    function URL events lowercase every header name.
    """
    if not headers:
        return None

    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def get_http_method(event: Mapping[str, Any]) -> str | None:
    """HTTP verb of a REST API (v1) or HTTP API / function URL (v2) event."""
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return method.upper() if isinstance(method, str) else None


def get_event_body(event: Mapping[str, Any]) -> str:
    """Raw request body, decoding ``isBase64Encoded`` payloads."""
    body = event.get("body") or ""
    if event.get("isBase64Encoded") and body:
        return base64.b64decode(body).decode("utf-8")
    return body
