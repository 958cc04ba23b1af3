"""CLI commands."""

from .inspect import invoke, tools
from .serve import serve


__all__ = ["invoke", "serve", "tools"]
