"""Serve command: run an MCP server locally behind uvicorn."""

from pathlib import Path
from typing import Annotated

import typer
import uvicorn

from lambda_mcp.api.app import create_app
from lambda_mcp.core.logging import get_logger, resolve_json_logs, setup_logging

from ..helpers import bold, console, load_server
from ..options import validate_log_level, validate_port


logger = get_logger(__name__)


def serve(
    target: Annotated[
        str, typer.Argument(help="Server to serve, as 'module:attribute'")
    ],
    host: Annotated[
        str,
        typer.Option(
            "--host",
            "-h",
            help="Host to bind the server to",
            rich_help_panel="Server Settings",
        ),
    ] = "127.0.0.1",
    port: Annotated[
        int,
        typer.Option(
            "--port",
            "-p",
            help="Port to run the server on",
            callback=validate_port,
            rich_help_panel="Server Settings",
        ),
    ] = 8000,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
            callback=validate_log_level,
            rich_help_panel="Server Settings",
        ),
    ] = None,
    app_dir: Annotated[
        Path,
        typer.Option(
            "--app-dir",
            help="Directory prepended to the import path before loading TARGET",
        ),
    ] = Path("."),
) -> None:
    """Serve TARGET over HTTP at /mcp, the same way the Lambda function would."""
    server = load_server(target, app_dir)
    level = log_level or server.settings.logging.level

    setup_logging(
        json_logs=resolve_json_logs(server.settings.logging.format),
        log_level_name=level,
    )

    app = create_app(server)
    console.print(
        f"Serving {bold(server.config.name)} at http://{host}:{port}/mcp",
        highlight=False,
    )
    logger.info("dev_server_starting", host=host, port=port, target=target)

    uvicorn.run(app, host=host, port=port, log_level=level.lower())
