"""Bearer token authentication for Lambda events."""

import inspect
import os
import secrets
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from lambda_mcp.adapters.responses import LambdaResponse, create_plain_error_response
from lambda_mcp.config.cors import CORSSettings
from lambda_mcp.core.errors import AuthenticationError
from lambda_mcp.utils.cors import get_basic_cors_headers, get_cors_headers
from lambda_mcp.utils.headers import get_header


__all__ = ["AuthResult", "BearerTokenAuth", "TokenValidator", "extract_bearer_token"]

logger = structlog.get_logger(__name__)


@dataclass
class AuthResult:
    """Outcome of verifying one request."""

    authorized: bool
    identity: Any = None
    token: str | None = None
    failure_response: LambdaResponse | None = None

    @classmethod
    def allow(cls, identity: Any = None, token: str | None = None) -> "AuthResult":
        return cls(authorized=True, identity=identity, token=token)

    @classmethod
    def deny(cls, failure_response: LambdaResponse | None = None) -> "AuthResult":
        return cls(authorized=False, failure_response=failure_response)


TokenValidator = Callable[
    [str, dict[str, Any]],
    AuthResult | bool | None | Awaitable[AuthResult | bool | None],
]


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header value."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer ") :]


class BearerTokenAuth:
    """Verify ``Authorization: Bearer`` headers against a token list or a callback.

    Exactly one strategy is used: when ``validate`` is given it decides alone,
    otherwise the token must be one of ``tokens``. An empty token list rejects
    every request with a 500 since the server is misconfigured.
    """

    def __init__(
        self,
        tokens: Sequence[str] | None = None,
        validate: TokenValidator | None = None,
        realm: str = "MCP Server",
        cors: CORSSettings | None = None,
    ) -> None:
        self.tokens = [token.strip() for token in tokens or [] if token.strip()]
        self.validate = validate
        self.realm = realm
        self.cors = cors or CORSSettings()

        if self.validate is None and not self.tokens:
            logger.warning("bearer_auth_no_tokens_configured")

    @classmethod
    def from_env(
        cls, env_var: str = "VALID_TOKENS", **kwargs: Any
    ) -> "BearerTokenAuth":
        """Read comma separated tokens from ``env_var``."""
        raw = os.environ.get(env_var, "")
        return cls(tokens=raw.split(","), **kwargs)

    def _failure(
        self,
        status_code: int,
        error: str,
        message: str,
        challenge: bool = True,
    ) -> LambdaResponse:
        headers = get_cors_headers(self.cors)
        if challenge:
            headers["WWW-Authenticate"] = f'Bearer realm="{self.realm}"'
        return create_plain_error_response(status_code, error, message, headers)

    def _invalid_token(self) -> AuthResult:
        return AuthResult.deny(
            self._failure(401, "invalid_token", "Invalid or expired token")
        )

    async def verify(self, event: dict[str, Any]) -> AuthResult:
        """Check the request carried by ``event``."""
        authorization = get_header(event.get("headers"), "authorization")

        if not authorization:
            return AuthResult.deny(
                self._failure(401, "unauthorized", "Authorization header is required")
            )

        token = extract_bearer_token(authorization)
        if token is None:
            return AuthResult.deny(
                self._failure(401, "unauthorized", "Bearer token is required")
            )

        if self.validate is not None:
            return await self._verify_with_callback(self.validate, token, event)

        if not self.tokens:
            logger.warning("bearer_auth_rejected_unconfigured")
            return AuthResult.deny(
                self._failure(
                    500, "server_error", "Authentication not configured", challenge=False
                )
            )

        if not any(secrets.compare_digest(token, valid) for valid in self.tokens):
            logger.info("bearer_auth_invalid_token")
            return self._invalid_token()

        return AuthResult.allow(identity={"token": token}, token=token)

    async def _verify_with_callback(
        self, validate: TokenValidator, token: str, event: dict[str, Any]
    ) -> AuthResult:
        try:
            outcome = validate(token, event)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except AuthenticationError as e:
            logger.info("bearer_auth_rejected_by_validator", reason=e.message)
            return AuthResult.deny(self._failure(401, "invalid_token", e.message))
        except Exception as e:
            logger.error("bearer_auth_validator_failed", error=str(e), exc_info=e)
            return AuthResult.deny(
                self._failure(
                    500,
                    "server_error",
                    "Authentication validation error",
                    challenge=False,
                )
            )

        if isinstance(outcome, AuthResult):
            if outcome.authorized:
                return AuthResult.allow(
                    identity=outcome.identity or {"token": token}, token=token
                )
            if outcome.failure_response is not None:
                return outcome
            return self._invalid_token()

        if outcome:
            return AuthResult.allow(identity={"token": token}, token=token)
        return self._invalid_token()

    def basic_error_headers(self) -> dict[str, str]:
        return get_basic_cors_headers(self.cors)
