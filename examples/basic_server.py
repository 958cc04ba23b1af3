"""Basic MCP server deployed as a single Lambda function.

Local run:
    lambda-mcp serve basic_server:server --app-dir examples
    lambda-mcp invoke basic_server:server --app-dir examples \
        -m tools/call --params '{"name": "calculate", "arguments": {"operation": "multiply", "a": 7, "b": 8}}'
"""

import json
import time
from datetime import UTC, datetime
from typing import Any

from lambda_mcp import MCPServer, create_lambda_handler, enum, integer, number, string


server = MCPServer(
    name="Example MCP Server",
    version="1.0.0",
    description="A demonstration of the AWS Lambda MCP adaptor",
)

_started = time.monotonic()


def calculate(operation: str, a: float, b: float) -> dict[str, Any]:
    """Perform a basic arithmetic operation"""
    if operation == "divide" and b == 0:
        return {
            "content": [{"type": "text", "text": "Error: Division by zero"}],
            "isError": True,
        }

    match operation:
        case "add":
            result = a + b
        case "subtract":
            result = a - b
        case "multiply":
            result = a * b
        case _:
            result = a / b

    return {"content": [{"type": "text", "text": f"{a} {operation} {b} = {result}"}]}


def get_time(format: str) -> str:
    """Return the current UTC time"""
    now = datetime.now(UTC)
    match format:
        case "unix":
            value = str(int(now.timestamp()))
        case "readable":
            value = now.strftime("%a, %d %b %Y %H:%M:%S GMT")
        case _:
            value = now.isoformat()
    return f"Current time ({format}): {value}"


def echo(message: str, repeat: int) -> str:
    """Echo a message back"""
    return "Echo: " + " ".join([message] * repeat)


server.tool(
    "calculate",
    {
        "operation": enum(["add", "subtract", "multiply", "divide"]).describe(
            "Mathematical operation to perform"
        ),
        "a": number(description="First number"),
        "b": number(description="Second number"),
    },
    calculate,
).tool(
    "get_time",
    {
        "format": enum(["iso", "unix", "readable"])
        .with_default("iso")
        .describe("Time format to return"),
    },
    get_time,
).tool(
    "echo",
    {
        "message": string(description="Message to echo back"),
        "repeat": integer(minimum=1, maximum=10)
        .with_default(1)
        .describe("Number of times to repeat (max 10)"),
    },
    echo,
)


@server.tool("greet", {"name": string(min_length=1, description="Who to greet")})
async def greet(name: str) -> str:
    """Greet someone by name"""
    return f"Hello, {name}!"


@server.resource("server-info", "info://server", mime_type="application/json")
def server_info(uri: str) -> dict[str, Any]:
    """Current server status and registered capabilities"""
    stats = server.get_stats()
    return {
        "contents": [
            {
                "uri": uri,
                "mimeType": "application/json",
                "text": json.dumps(
                    {
                        "status": "running",
                        "uptime": round(time.monotonic() - _started, 3),
                        **stats,
                    },
                    indent=2,
                ),
            }
        ]
    }


@server.prompt(
    "analyze-number",
    {
        "number": number(description="Number to analyze"),
        "context": string(description="Additional context").optional(),
    },
)
def analyze_number(number: float, context: str | None = None) -> dict[str, Any]:
    """Ask the model to analyze a number"""
    text = f"Please analyze this number: {number}"
    if context:
        text += f"\n\nContext: {context}"
    text += (
        "\n\nConsider its mathematical properties, significance, "
        "and any interesting facts."
    )
    return {"messages": [{"role": "user", "content": {"type": "text", "text": text}}]}


@server.prompt(
    "code-review",
    {
        "code": string(min_length=1, description="Code to review"),
        "language": string(description="Programming language").optional(),
        "focus": enum(["bugs", "style", "performance", "security"])
        .with_default("bugs")
        .describe("What the review should concentrate on"),
    },
)
def code_review(code: str, focus: str, language: str | None = None) -> str:
    """Review a piece of code"""
    fence = language or ""
    return (
        f"Please review the following code, focusing on {focus}.\n\n"
        f"```{fence}\n{code}\n```"
    )


lambda_handler = create_lambda_handler(server)
