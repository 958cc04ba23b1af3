"""Utility helpers."""

from .cors import get_basic_cors_headers, get_cors_headers, get_request_origin
from .headers import get_event_body, get_header, get_http_method


__all__ = [
    "get_basic_cors_headers",
    "get_cors_headers",
    "get_event_body",
    "get_header",
    "get_http_method",
    "get_request_origin",
]
