"""Entry point for the ``lambda-mcp`` command."""

import typer

from lambda_mcp import __version__
from lambda_mcp.core.logging import setup_logging

from .commands import invoke, serve, tools
from .helpers import console
from .options import validate_log_level


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"lambda-mcp {__version__}")
        raise typer.Exit()


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
    help="Develop and inspect MCP servers built for AWS Lambda.",
)


@app.callback()
def app_main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Level of the log lines written to stderr",
        callback=validate_log_level,
    ),
) -> None:
    """Develop and inspect MCP servers built for AWS Lambda."""
    setup_logging(json_logs=False, log_level_name=log_level, configure_stdlib=False)


app.command(name="serve")(serve)
app.command(name="tools")(tools)
app.command(name="invoke")(invoke)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
