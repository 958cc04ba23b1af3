"""Local development server exposing the Lambda transport over HTTP."""

from .app import create_app


__all__ = ["create_app"]
