from ._version import __version__
from .adapters.lambda_handler import LambdaAdapter, create_lambda_handler
from .auth import Auth, AuthResult, BearerTokenAuth
from .core.errors import AuthenticationError, MCPError, RegistryFrozenError
from .schema import CommonSchemas
from .schema.fields import array, boolean, enum, integer, number, obj, string
from .server import MCPServer, create_mcp_server


__all__ = [
    "__version__",
    "Auth",
    "AuthResult",
    "AuthenticationError",
    "BearerTokenAuth",
    "CommonSchemas",
    "LambdaAdapter",
    "MCPError",
    "MCPServer",
    "RegistryFrozenError",
    "array",
    "boolean",
    "create_lambda_handler",
    "create_mcp_server",
    "enum",
    "integer",
    "number",
    "obj",
    "string",
]
