"""CORS header helpers for Lambda responses."""

from collections.abc import Mapping
from typing import TYPE_CHECKING

import structlog

from lambda_mcp.utils.headers import get_header


if TYPE_CHECKING:
    from lambda_mcp.config.cors import CORSSettings

logger = structlog.get_logger(__name__)


def get_cors_headers(
    cors_settings: "CORSSettings",
    request_origin: str | None = None,
) -> dict[str, str]:
    """Get the full CORS header set used for preflight and MCP responses.

    Args:
        cors_settings: CORS configuration settings
        request_origin: Origin from the request Origin header

    Returns:
        dict: CORS headers to add to response
    """
    headers = {}

    allowed_origin = cors_settings.get_allowed_origin(request_origin)
    if allowed_origin:
        headers["Access-Control-Allow-Origin"] = allowed_origin
        if allowed_origin != "*":
            headers["Vary"] = "Origin"

    if cors_settings.credentials and allowed_origin and allowed_origin != "*":
        headers["Access-Control-Allow-Credentials"] = "true"

    if cors_settings.headers:
        if "*" in cors_settings.headers:
            headers["Access-Control-Allow-Headers"] = "*"
        else:
            headers["Access-Control-Allow-Headers"] = ", ".join(cors_settings.headers)

    if cors_settings.methods:
        if "*" in cors_settings.methods:
            headers["Access-Control-Allow-Methods"] = "*"
        else:
            headers["Access-Control-Allow-Methods"] = ", ".join(cors_settings.methods)

    if cors_settings.expose_headers:
        headers["Access-Control-Expose-Headers"] = ", ".join(
            cors_settings.expose_headers
        )

    if cors_settings.max_age > 0:
        headers["Access-Control-Max-Age"] = str(cors_settings.max_age)

    logger.debug(
        "cors_headers_generated",
        request_origin=request_origin,
        allowed_origin=allowed_origin,
        headers_count=len(headers),
    )

    return headers


def get_basic_cors_headers(
    cors_settings: "CORSSettings",
    request_origin: str | None = None,
) -> dict[str, str]:
    """Only the allow-origin header, for error responses outside the MCP flow."""
    allowed_origin = cors_settings.get_allowed_origin(request_origin)
    if not allowed_origin:
        return {}
    return {"Access-Control-Allow-Origin": allowed_origin}


def get_request_origin(request_headers: Mapping[str, str] | None) -> str | None:
    """Extract the Origin header (case-insensitive)."""
    return get_header(request_headers, "origin")
