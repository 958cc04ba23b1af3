"""CLI helper utilities."""

import importlib
import sys
from pathlib import Path

import typer
from rich.console import Console

from lambda_mcp.server import MCPServer


console = Console()
err_console = Console(stderr=True)


def load_server(target: str, app_dir: Path | None = None) -> MCPServer:
    """Import ``module:attribute`` and return the ``MCPServer`` it names.

    Raises:
        typer.BadParameter: If the target is malformed or not a server
    """
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise typer.BadParameter(
            f"Expected 'module:attribute', got '{target}'", param_hint="TARGET"
        )

    if app_dir is not None and str(app_dir.resolve()) not in sys.path:
        sys.path.insert(0, str(app_dir.resolve()))

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(
            f"Could not import module '{module_name}': {e}", param_hint="TARGET"
        ) from e

    server = getattr(module, attribute, None)
    if not isinstance(server, MCPServer):
        raise typer.BadParameter(
            f"'{target}' is not an MCPServer instance", param_hint="TARGET"
        )
    return server


def bold(text: str) -> str:
    return f"[bold]{text}[/bold]"


def dim(text: str) -> str:
    return f"[dim]{text}[/dim]"
