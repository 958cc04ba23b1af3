"""CORS configuration settings."""

import re
from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import NoDecode


class CORSSettings(BaseModel):
    """CORS policy applied to every Lambda response.

    The defaults allow any origin without credentials, which is what browser
    based MCP clients expect from a public function URL.
    """

    origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        description="CORS allowed origins",
    )

    credentials: bool = Field(
        default=False,
        description="CORS allow credentials",
    )

    methods: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["GET", "POST", "OPTIONS"],
        description="CORS allowed methods",
    )

    headers: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "Content-Type",
            "Accept",
            "Authorization",
            "Mcp-Protocol-Version",
            "Mcp-Session-Id",
        ],
        description="CORS allowed headers",
    )

    origin_regex: str | None = Field(
        default=None,
        description="CORS origin regex pattern",
    )

    expose_headers: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="CORS exposed headers",
    )

    max_age: int = Field(
        default=0,
        description="CORS preflight max age in seconds (0 omits the header)",
        ge=0,
    )

    @field_validator("origins", "headers", "expose_headers", mode="before")
    @classmethod
    def split_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated strings coming from environment variables."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("methods", mode="before")
    @classmethod
    def validate_cors_methods(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [method.strip().upper() for method in v.split(",") if method.strip()]
        return [method.upper() for method in v]

    def is_origin_allowed(self, origin: str | None) -> bool:
        if "*" in self.origins:
            return True

        if not origin:
            return False

        if origin in self.origins:
            return True

        if self.origin_regex:
            try:
                return bool(re.match(self.origin_regex, origin))
            except re.error:
                return False

        return False

    def get_allowed_origin(self, request_origin: str | None) -> str | None:
        """Value for Access-Control-Allow-Origin, or None when the origin is refused.

        A wildcard policy answers ``*`` unless credentials are enabled, in which
        case the caller's origin is echoed back.
        """
        if "*" in self.origins and not self.credentials:
            return "*"

        if not request_origin:
            return None

        if self.is_origin_allowed(request_origin):
            return request_origin

        return None
