"""Security configuration settings."""

from typing import Annotated, Any

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import NoDecode


class SecuritySettings(BaseModel):
    """Bearer token configuration for the Lambda entry point."""

    auth_enabled: bool = Field(
        default=False,
        description="Require a bearer token on every request",
    )

    auth_tokens: Annotated[list[SecretStr], NoDecode] = Field(
        default_factory=list,
        description="Accepted bearer tokens (comma separated when set from the environment)",
    )

    token_env_var: str = Field(
        default="VALID_TOKENS",
        description="Environment variable holding comma separated tokens",
    )

    realm: str = Field(
        default="MCP Server",
        description="Realm advertised in WWW-Authenticate challenges",
    )

    @field_validator("auth_tokens", mode="before")
    @classmethod
    def validate_auth_tokens(cls, v: Any) -> Any:
        """Split comma-separated strings and drop blanks."""
        if v is None:
            return []
        if isinstance(v, str | SecretStr):
            v = v.get_secret_value() if isinstance(v, SecretStr) else v
            return [token.strip() for token in v.split(",") if token.strip()]
        return v

    def token_values(self) -> list[str]:
        return [token.get_secret_value() for token in self.auth_tokens]
