"""Configuration module for the MCP Lambda adaptor."""

from .core import LoggingSettings, ServerSettings
from .cors import CORSSettings
from .security import SecuritySettings
from .settings import ConfigurationError, Settings, get_settings


__all__ = [
    "Settings",
    "get_settings",
    "ConfigurationError",
    "ServerSettings",
    "LoggingSettings",
    "CORSSettings",
    "SecuritySettings",
]
