"""Authentication for the Lambda transport.

Usage:
    handler = create_lambda_handler(server, auth=Auth.bearer_token("VALID_TOKENS"))
"""

from collections.abc import Sequence

from lambda_mcp.config.cors import CORSSettings
from lambda_mcp.config.security import SecuritySettings

from .bearer import AuthResult, BearerTokenAuth, TokenValidator, extract_bearer_token
from .middleware import EventHandler, create_authenticated_handler


__all__ = [
    "Auth",
    "AuthResult",
    "BearerTokenAuth",
    "EventHandler",
    "TokenValidator",
    "create_authenticated_handler",
    "extract_bearer_token",
]


class Auth:
    """Shortcuts for building an authentication strategy."""

    @staticmethod
    def none() -> None:
        """No authentication (default)."""
        return None

    @staticmethod
    def bearer_token(env_var: str = "VALID_TOKENS") -> BearerTokenAuth:
        """Accept the comma separated tokens found in ``env_var``."""
        return BearerTokenAuth.from_env(env_var)

    @staticmethod
    def bearer_tokens(tokens: str | Sequence[str]) -> BearerTokenAuth:
        if isinstance(tokens, str):
            tokens = [tokens]
        return BearerTokenAuth(tokens=tokens)

    @staticmethod
    def custom(validate: TokenValidator) -> BearerTokenAuth:
        """Delegate the decision to ``validate(token, event)``."""
        return BearerTokenAuth(validate=validate)

    @staticmethod
    def from_settings(
        security: SecuritySettings, cors: CORSSettings | None = None
    ) -> BearerTokenAuth | None:
        """Strategy described by ``security``; ``None`` when auth is disabled.

        Configured tokens win over the token environment variable.
        """
        if not security.auth_enabled:
            return None
        if security.auth_tokens:
            return BearerTokenAuth(
                tokens=security.token_values(), realm=security.realm, cors=cors
            )
        return BearerTokenAuth.from_env(
            security.token_env_var, realm=security.realm, cors=cors
        )
