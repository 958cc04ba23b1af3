"""Server and logging configuration settings."""

from pydantic import BaseModel, Field, field_validator

from lambda_mcp.protocol.models import (
    DEFAULT_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
)


class ServerSettings(BaseModel):
    """Identity the server reports during ``initialize``."""

    name: str = Field(
        default="MCP Server",
        description="Server name reported in serverInfo",
    )

    version: str = Field(
        default="1.0.0",
        description="Server version reported in serverInfo",
    )

    description: str = Field(
        default="MCP Server powered by AWS Lambda",
        description="Instructions returned to clients on initialize",
    )

    protocol_version: str = Field(
        default=DEFAULT_PROTOCOL_VERSION,
        description="Protocol version answered when the client asks for an unsupported one",
    )

    @field_validator("protocol_version")
    @classmethod
    def validate_protocol_version(cls, v: str) -> str:
        if v not in SUPPORTED_PROTOCOL_VERSIONS:
            raise ValueError(
                f"Unsupported protocol version: {v}. "
                f"Must be one of {list(SUPPORTED_PROTOCOL_VERSIONS)}"
            )
        return v


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    format: str = Field(
        default="auto",
        description="Log output format: 'json', 'console', or 'auto' (json when not on a TTY)",
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        upper_v = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate and normalize log format."""
        lower_v = v.lower()
        valid_formats = ["auto", "json", "console"]
        if lower_v not in valid_formats:
            raise ValueError(f"Invalid log format: {v}. Must be one of {valid_formats}")
        return lower_v
