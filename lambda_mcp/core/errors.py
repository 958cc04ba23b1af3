"""Exception hierarchy for the MCP adaptor.

Every protocol-level failure is an ``MCPError`` carrying the JSON-RPC error
code that ends up in the response envelope and the HTTP status the Lambda
transport answers with.
"""

from dataclasses import dataclass
from typing import Any


__all__ = [
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "METHOD_NOT_ALLOWED",
    "MCPError",
    "ParseError",
    "InvalidRequestError",
    "MethodNotFoundError",
    "InvalidParamsError",
    "InternalError",
    "MethodNotAllowedError",
    "ValidationIssue",
    "ShapeValidationError",
    "RegistryFrozenError",
    "AuthenticationError",
]


# JSON-RPC 2.0 reserved codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Transport level, outside the reserved range used by the protocol itself
METHOD_NOT_ALLOWED = -32000


class MCPError(Exception):
    """Base exception for MCP protocol errors."""

    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        status_code: int = 500,
        data: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON-RPC error object."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class ParseError(MCPError):
    """Body is not JSON or not declared as JSON (400)."""

    def __init__(self, message: str = "Parse error") -> None:
        super().__init__(message=message, code=PARSE_ERROR, status_code=400)


class InvalidRequestError(MCPError):
    """Envelope is missing the protocol tag or the method (400)."""

    def __init__(self, message: str = "Invalid Request") -> None:
        super().__init__(message=message, code=INVALID_REQUEST, status_code=400)


class MethodNotFoundError(MCPError):
    """Unknown JSON-RPC method (400)."""

    def __init__(self, method: str) -> None:
        super().__init__(
            message=f"Method not found: {method}",
            code=METHOD_NOT_FOUND,
            status_code=400,
        )
        self.method = method


class InvalidParamsError(MCPError):
    """Missing or unresolvable parameters (400)."""

    def __init__(self, message: str, data: Any | None = None) -> None:
        super().__init__(
            message=message, code=INVALID_PARAMS, status_code=400, data=data
        )


class InternalError(MCPError):
    """Unexpected failure while handling a request (500)."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message=message, code=INTERNAL_ERROR, status_code=500)


class MethodNotAllowedError(MCPError):
    """HTTP verb not served by the stateless transport (405)."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, code=METHOD_NOT_ALLOWED, status_code=405)


@dataclass(frozen=True)
class ValidationIssue:
    """A single field that failed its declared shape."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


class ShapeValidationError(InvalidParamsError):
    """Arguments did not match the declared shape.

    All failing fields are collected before this is raised, so ``issues``
    holds one entry per bad field.
    """

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = list(issues)
        summary = ", ".join(str(issue) for issue in self.issues)
        super().__init__(
            message=f"Validation error: {summary}",
            data={"issues": [issue.to_dict() for issue in self.issues]},
        )


class RegistryFrozenError(RuntimeError):
    """Raised when registering capabilities after serving has started."""


class AuthenticationError(Exception):
    """Raised by custom token validators to reject a request."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)
        self.message = message
