"""Transport adapters.

``lambda_mcp.adapters.lambda_handler`` holds the Lambda entry point; it is not
imported here because the auth package depends on the response builders.
"""

from .responses import (
    LambdaResponse,
    create_error_response,
    create_plain_error_response,
    create_response,
)


__all__ = [
    "LambdaResponse",
    "create_error_response",
    "create_plain_error_response",
    "create_response",
]
