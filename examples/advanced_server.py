"""Advanced MCP server: nested shapes, arrays and bounded values.

Set ``MCP_SECURITY__AUTH_ENABLED=true`` and ``VALID_TOKENS`` to require a
bearer token on every request.
"""

import hashlib
import json
import re
from datetime import UTC, datetime, timedelta
from typing import Any

from lambda_mcp import (
    MCPServer,
    array,
    boolean,
    create_lambda_handler,
    enum,
    integer,
    number,
    obj,
    string,
)


server = MCPServer(
    name="Advanced MCP Server",
    version="2.0.0",
    description="Advanced example showcasing complex tools and validation",
)

CATEGORIES = ["A", "B", "C"]
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
URL_RE = re.compile(r"https?://[^\s]+")


def _text(text: str, is_error: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


def _matches(item: dict[str, Any], filters: dict[str, Any]) -> bool:
    if "category" in filters and item["category"] != filters["category"]:
        return False
    if "minValue" in filters and item["value"] < filters["minValue"]:
        return False
    if "maxValue" in filters and item["value"] > filters["maxValue"]:
        return False
    required_tags = filters.get("requiredTags") or []
    if any(tag not in (item.get("tags") or []) for tag in required_tags):
        return False
    pattern = filters.get("namePattern")
    if pattern and not re.search(pattern, item["name"], re.IGNORECASE):
        return False
    return True


@server.tool(
    "process_data",
    {
        "data": array(
            obj(
                {
                    "id": string(),
                    "name": string(min_length=1, max_length=100),
                    "value": number(minimum=0, maximum=1000),
                    "category": enum(CATEGORIES),
                    "tags": array(string()).optional(),
                }
            ),
            min_items=1,
            max_items=100,
        ),
        "operation": enum(["sum", "average", "max", "min", "count", "group"]),
        "filters": obj(
            {
                "category": enum(CATEGORIES).optional(),
                "minValue": number().optional(),
                "maxValue": number().optional(),
                "requiredTags": array(string()).optional(),
                "namePattern": string().optional(),
            }
        ).optional(),
    },
)
def process_data(
    data: list[dict[str, Any]],
    operation: str,
    filters: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Filter and aggregate a list of records"""
    selected = [item for item in data if _matches(item, filters or {})]
    if not selected:
        return _text("No data matches the specified filters", is_error=True)

    values = [item["value"] for item in selected]
    result: Any
    match operation:
        case "sum":
            result = sum(values)
        case "average":
            result = sum(values) / len(values)
        case "max":
            result = max(values)
        case "min":
            result = min(values)
        case "count":
            result = len(selected)
        case _:
            result = {}
            for item in selected:
                result[item["category"]] = result.get(item["category"], 0) + 1

    return _text(
        f"Operation: {operation}\n"
        f"Filtered items: {len(selected)}/{len(data)}\n"
        f"Result: {json.dumps(result, indent=2)}"
    )


TEXT_OPERATIONS = [
    "word_count",
    "char_count",
    "line_count",
    "uppercase",
    "lowercase",
    "reverse",
    "extract_emails",
    "extract_urls",
    "hash",
]


@server.tool(
    "text_operations",
    {
        "text": string(min_length=1, max_length=10000),
        "operations": array(enum(TEXT_OPERATIONS), min_items=1),
    },
)
def text_operations(text: str, operations: list[str]) -> str:
    """Run simple analyses and transformations on a text"""
    results: dict[str, Any] = {}
    for op in operations:
        match op:
            case "word_count":
                results["word_count"] = len(text.split())
            case "char_count":
                results["char_count"] = len(text)
            case "line_count":
                results["line_count"] = len(text.split("\n"))
            case "uppercase":
                results["uppercase"] = text.upper()
            case "lowercase":
                results["lowercase"] = text.lower()
            case "reverse":
                results["reverse"] = text[::-1]
            case "extract_emails":
                results["emails"] = EMAIL_RE.findall(text)
            case "extract_urls":
                results["urls"] = URL_RE.findall(text)
            case "hash":
                results["sha256_hash"] = hashlib.sha256(text.encode()).hexdigest()

    return f"Text Operations Results:\n{json.dumps(results, indent=2)}"


class _SeededRandom:
    """Linear congruential generator so a seed reproduces the same records."""

    def __init__(self, seed: str | None) -> None:
        self.state = sum(ord(c) for c in seed) if seed else 0

    def random(self) -> float:
        self.state = (self.state * 9301 + 49297) % 233280
        return self.state / 233280

    def randint(self, low: int, high: int) -> int:
        return int(self.random() * (high - low + 1)) + low

    def choice(self, items: list[str]) -> str:
        return items[int(self.random() * len(items))]


NAMES = ["Alice", "Bob", "Charlie", "Diana", "Eve", "Frank", "Grace", "Henry"]
PRODUCTS = ["Widget", "Gadget", "Tool", "Device", "Component", "Module"]
EVENTS = ["Login", "Purchase", "View", "Click", "Download", "Share"]


@server.tool(
    "generate_test_data",
    {
        "type": enum(["users", "products", "events"]),
        "count": integer(minimum=1, maximum=100),
        "options": obj(
            {
                "includeIds": boolean().with_default(True),
                "includeTimestamps": boolean().with_default(False),
                "categories": array(string()).optional(),
                "seed": string().optional(),
            }
        ).optional(),
    },
)
def generate_test_data(
    type: str, count: int, options: dict[str, Any] | None = None
) -> str:
    """Generate reproducible sample records"""
    options = options or {"includeIds": True, "includeTimestamps": False}
    rng = _SeededRandom(options.get("seed"))
    categories = options.get("categories") or ["Premium", "Standard", "Basic"]
    now = datetime.now(UTC)

    records = []
    for i in range(count):
        item: dict[str, Any] = {}
        if options.get("includeIds"):
            item["id"] = f"{type}_{i + 1}_{rng.randint(1000, 9999)}"

        match type:
            case "users":
                item["name"] = rng.choice(NAMES)
                item["email"] = f"{item['name'].lower()}{rng.randint(1, 999)}@example.com"
                item["age"] = rng.randint(18, 80)
            case "products":
                item["name"] = f"{rng.choice(PRODUCTS)} {rng.randint(100, 999)}"
                item["price"] = round(rng.random() * 1000, 2)
                item["category"] = rng.choice(categories)
            case _:
                item["event"] = rng.choice(EVENTS)
                item["userId"] = f"user_{rng.randint(1, 100)}"

        if options.get("includeTimestamps"):
            item["timestamp"] = (now - timedelta(days=rng.randint(0, 30))).isoformat()

        records.append(item)

    return f"Generated {count} {type} records:\n{json.dumps(records, indent=2)}"


lambda_handler = create_lambda_handler(server)
