"""Commands that exercise a server without deploying it."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.syntax import Syntax
from rich.table import Table

from lambda_mcp.adapters.lambda_handler import create_lambda_handler

from ..helpers import console, dim, err_console, load_server


AppDir = Annotated[
    Path,
    typer.Option(
        "--app-dir",
        help="Directory prepended to the import path before loading TARGET",
    ),
]


def tools(
    target: Annotated[str, typer.Argument(help="Server as 'module:attribute'")],
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the raw tools/list result")
    ] = False,
    app_dir: AppDir = Path("."),
) -> None:
    """List the tools TARGET registers."""
    server = load_server(target, app_dir)
    listing = server.freeze().list_tools()

    if as_json:
        console.print_json(data={"tools": listing})
        return

    table = Table(title=f"{server.config.name} tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Required arguments", style="green")

    for tool in listing:
        required = tool["inputSchema"].get("required") or []
        table.add_row(tool["name"], tool["description"], ", ".join(required) or "-")

    console.print(table)


def _build_message(
    file: Path | None, method: str | None, params: str | None
) -> dict[str, Any]:
    if file is not None:
        try:
            loaded = json.loads(file.read_text(encoding="utf-8"))
        except ValueError as e:
            raise typer.BadParameter(f"Invalid JSON in {file}: {e}") from e
        if not isinstance(loaded, dict):
            raise typer.BadParameter(f"{file} must contain a single JSON object")
        return loaded

    if method is None:
        raise typer.BadParameter("Either --file or --method is required")

    message: dict[str, Any] = {"jsonrpc": "2.0", "method": method, "id": 1}
    if params:
        try:
            message["params"] = json.loads(params)
        except ValueError as e:
            raise typer.BadParameter(f"--params is not valid JSON: {e}") from e
    return message


def invoke(
    target: Annotated[str, typer.Argument(help="Server as 'module:attribute'")],
    file: Annotated[
        Path | None,
        typer.Option(
            "--file",
            "-f",
            help="File holding the JSON-RPC message to send",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    method: Annotated[
        str | None,
        typer.Option("--method", "-m", help="JSON-RPC method, e.g. tools/call"),
    ] = None,
    params: Annotated[
        str | None,
        typer.Option("--params", help="JSON object used as params"),
    ] = None,
    app_dir: AppDir = Path("."),
) -> None:
    """Send one JSON-RPC message to TARGET through its Lambda handler."""
    server = load_server(target, app_dir)
    message = _build_message(file, method, params)

    handler = create_lambda_handler(server)
    event = {
        "httpMethod": "POST",
        "headers": {"content-type": "application/json"},
        "body": json.dumps(message),
        "isBase64Encoded": False,
    }
    response = handler(event, None)

    status_code = response["statusCode"]
    console.print(dim(f"HTTP {status_code}"))
    if response["body"]:
        body = json.dumps(json.loads(response["body"]), indent=2)
        console.print(Syntax(body, "json", background_color="default"))

    if status_code >= 400:
        err_console.print(f"[red]Request failed with HTTP {status_code}[/red]")
        raise typer.Exit(1)
