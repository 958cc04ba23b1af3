"""Tests for MCP method dispatch."""

import pytest
from structlog.testing import capture_logs

from lambda_mcp.core.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    InternalError,
    InvalidParamsError,
    MethodNotFoundError,
)
from lambda_mcp.protocol.dispatcher import (
    Dispatcher,
    ServerInfo,
    negotiate_protocol_version,
)
from lambda_mcp.protocol.models import JSONRPCRequest
from lambda_mcp.registry import CapabilityRegistry
from lambda_mcp.server import MCPServer
from tests.helpers import rpc


def request(method: str, params: dict | None = None) -> JSONRPCRequest:
    return JSONRPCRequest.model_validate(rpc(method, params))


@pytest.fixture
def dispatcher(server: MCPServer) -> Dispatcher:
    return server.dispatcher


@pytest.mark.unit
class TestInitialize:
    async def test_reports_server_info_and_capabilities(
        self, dispatcher: Dispatcher
    ) -> None:
        result = await dispatcher.handle_request(
            request(
                "initialize",
                {"protocolVersion": "2024-11-05", "clientInfo": {"name": "inspector"}},
            )
        )
        assert result == {
            "protocolVersion": "2024-11-05",
            "capabilities": {
                "tools": {"listChanged": True},
                "resources": {"listChanged": True},
                "prompts": {"listChanged": True},
            },
            "serverInfo": {"name": "Test Server", "version": "0.1.0"},
            "instructions": "MCP Server powered by AWS Lambda",
        }

    async def test_unsupported_version_falls_back_to_default(
        self, dispatcher: Dispatcher
    ) -> None:
        result = await dispatcher.handle_request(
            request("initialize", {"protocolVersion": "1999-01-01"})
        )
        assert result["protocolVersion"] == "2025-03-26"

    async def test_empty_registries_are_not_advertised(self) -> None:
        registry = CapabilityRegistry()
        registry.register_tool("only", {}, lambda: "ok")
        dispatcher = Dispatcher(registry.freeze(), ServerInfo(name="Tiny"))

        result = await dispatcher.handle_request(request("initialize"))
        assert result["capabilities"] == {"tools": {"listChanged": True}}
        assert result["serverInfo"] == {"name": "Tiny", "version": "1.0.0"}

    def test_negotiate_protocol_version(self) -> None:
        assert negotiate_protocol_version("2025-06-18", "2025-03-26") == "2025-06-18"
        assert negotiate_protocol_version(None, "2025-03-26") == "2025-03-26"
        assert negotiate_protocol_version(20250618, "2024-11-05") == "2024-11-05"


@pytest.mark.unit
class TestListing:
    async def test_initialized_notification_returns_none(
        self, dispatcher: Dispatcher
    ) -> None:
        assert await dispatcher.handle_request(request("notifications/initialized")) is None

    async def test_tools_list(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.handle_request(request("tools/list"))
        tools = {tool["name"]: tool for tool in result["tools"]}

        assert set(tools) == {"add", "echo", "explode"}
        assert tools["add"]["description"] == "Add two numbers"
        assert tools["explode"]["description"] == "Tool: explode"
        assert tools["echo"]["inputSchema"]["required"] == ["message"]
        assert tools["echo"]["inputSchema"]["properties"]["repeat"]["default"] == 1

    async def test_resources_list(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.handle_request(request("resources/list"))
        assert result["resources"][0] == {
            "uri": "config://app",
            "name": "config",
            "description": "Application configuration",
            "mimeType": "application/json",
        }

    async def test_prompts_list(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.handle_request(request("prompts/list"))
        assert result["prompts"][0] == {
            "name": "greeting",
            "description": "Greet a person",
            "arguments": [
                {"name": "name", "description": "name parameter", "required": True}
            ],
        }

    @pytest.mark.parametrize("method", ["tools/delete", "ping", "", "TOOLS/LIST"])
    async def test_unknown_method(self, dispatcher: Dispatcher, method: str) -> None:
        with pytest.raises(MethodNotFoundError) as exc_info:
            await dispatcher.handle_request(request(method))
        assert exc_info.value.code == METHOD_NOT_FOUND
        assert exc_info.value.message == f"Method not found: {method}"


@pytest.mark.unit
class TestToolsCall:
    async def test_success_wraps_text(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.handle_request(
            request("tools/call", {"name": "add", "arguments": {"a": 2, "b": 3}})
        )
        assert result == {"content": [{"type": "text", "text": "5"}]}

    async def test_defaults_reach_handler(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.handle_request(
            request("tools/call", {"name": "echo", "arguments": {"message": "hi"}})
        )
        assert result["content"][0]["text"] == "hi"

    async def test_handler_exception_becomes_error_result(
        self, dispatcher: Dispatcher
    ) -> None:
        with capture_logs() as logs:
            result = await dispatcher.handle_request(
                request("tools/call", {"name": "explode"})
            )

        assert result == {
            "content": [{"type": "text", "text": "Error: boom"}],
            "isError": True,
        }
        assert any(log["event"] == "tool_handler_failed" for log in logs)

    async def test_validation_failure_becomes_error_result(
        self, dispatcher: Dispatcher
    ) -> None:
        result = await dispatcher.handle_request(
            request("tools/call", {"name": "add", "arguments": {"a": "2"}})
        )
        assert result["isError"] is True
        assert result["content"][0]["text"] == (
            "Error: Validation error: a: Expected number, received string, b: Required"
        )

    @pytest.mark.parametrize("params", [{}, {"name": ""}, {"name": 5}])
    async def test_name_is_required(self, dispatcher: Dispatcher, params: dict) -> None:
        with pytest.raises(InvalidParamsError, match="Tool name is required"):
            await dispatcher.handle_request(request("tools/call", params))

    async def test_unknown_tool(self, dispatcher: Dispatcher) -> None:
        with pytest.raises(InvalidParamsError, match="Tool not found: missing"):
            await dispatcher.handle_request(request("tools/call", {"name": "missing"}))

    @pytest.mark.parametrize("arguments", [[], 0, "", False])
    async def test_non_object_arguments_are_rejected(
        self, dispatcher: Dispatcher, arguments: object
    ) -> None:
        result = await dispatcher.handle_request(
            request("tools/call", {"name": "explode", "arguments": arguments})
        )

        assert result["isError"] is True
        assert "arguments: Expected object" in result["content"][0]["text"]


@pytest.mark.unit
class TestResourcesRead:
    async def test_string_result_is_wrapped(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.handle_request(
            request("resources/read", {"uri": "config://app"})
        )
        assert result == {
            "contents": [
                {
                    "uri": "config://app",
                    "mimeType": "application/json",
                    "text": '{"debug": false}',
                }
            ]
        }

    async def test_uri_is_required(self, dispatcher: Dispatcher) -> None:
        with pytest.raises(InvalidParamsError, match="Resource URI is required"):
            await dispatcher.handle_request(request("resources/read", {}))

    async def test_unknown_uri(self, dispatcher: Dispatcher) -> None:
        with pytest.raises(InvalidParamsError) as exc_info:
            await dispatcher.handle_request(
                request("resources/read", {"uri": "missing://x"})
            )
        assert exc_info.value.code == INVALID_PARAMS
        assert exc_info.value.message == "Resource not found: missing://x"

    async def test_handler_fault_is_internal_error(
        self, dispatcher: Dispatcher
    ) -> None:
        with pytest.raises(InternalError) as exc_info:
            await dispatcher.handle_request(
                request("resources/read", {"uri": "broken://resource"})
            )
        assert exc_info.value.code == INTERNAL_ERROR
        assert exc_info.value.message == "Resource read error: disk unavailable"


@pytest.mark.unit
class TestPromptsGet:
    async def test_string_result_becomes_user_message(
        self, dispatcher: Dispatcher
    ) -> None:
        result = await dispatcher.handle_request(
            request("prompts/get", {"name": "greeting", "arguments": {"name": "Ada"}})
        )
        assert result == {
            "description": "Greet a person",
            "messages": [
                {
                    "role": "user",
                    "content": {"type": "text", "text": "Say hello to Ada"},
                }
            ],
        }

    async def test_validation_failure_is_protocol_error(
        self, dispatcher: Dispatcher
    ) -> None:
        with pytest.raises(InvalidParamsError) as exc_info:
            await dispatcher.handle_request(request("prompts/get", {"name": "greeting"}))
        assert exc_info.value.message == "Validation error: name: Required"

    async def test_handler_fault_is_internal_error(
        self, dispatcher: Dispatcher
    ) -> None:
        with pytest.raises(InternalError, match="Prompt execution error: template missing"):
            await dispatcher.handle_request(request("prompts/get", {"name": "faulty"}))

    async def test_unknown_prompt(self, dispatcher: Dispatcher) -> None:
        with pytest.raises(InvalidParamsError, match="Prompt not found: nope"):
            await dispatcher.handle_request(request("prompts/get", {"name": "nope"}))

    @pytest.mark.parametrize("arguments", [[], 0, ""])
    async def test_non_object_arguments_are_rejected(
        self, dispatcher: Dispatcher, arguments: object
    ) -> None:
        with pytest.raises(InvalidParamsError, match="arguments: Expected object"):
            await dispatcher.handle_request(
                request("prompts/get", {"name": "faulty", "arguments": arguments})
            )


@pytest.mark.unit
class TestHandleMessage:
    async def test_success_envelope(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message(rpc("tools/list", id="abc"))
        assert response["jsonrpc"] == "2.0"
        assert response["id"] == "abc"
        assert "tools" in response["result"]

    async def test_error_envelope(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message(rpc("nope", id=9))
        assert response == {
            "jsonrpc": "2.0",
            "error": {"code": METHOD_NOT_FOUND, "message": "Method not found: nope"},
            "id": 9,
        }

    async def test_validation_error_carries_data(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message(
            rpc("prompts/get", {"name": "greeting", "arguments": {"name": ""}})
        )
        assert response["error"]["code"] == INVALID_PARAMS
        assert response["error"]["data"] == {
            "issues": [
                {
                    "path": "name",
                    "message": "String must contain at least 1 character(s)",
                }
            ]
        }

    async def test_notification_has_no_response(self, dispatcher: Dispatcher) -> None:
        assert await dispatcher.handle_message(rpc("notifications/initialized")) is None

    async def test_malformed_params(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message(
            {"jsonrpc": "2.0", "method": "tools/call", "params": [1, 2], "id": 3}
        )
        assert response["error"]["code"] == INVALID_REQUEST
        assert response["id"] == 3

    async def test_fractional_id_is_echoed(self, dispatcher: Dispatcher) -> None:
        response = await dispatcher.handle_message(rpc("tools/list", id=1.5))
        assert response["id"] == 1.5
        assert "tools" in response["result"]

    @pytest.mark.parametrize("request_id", [{"nested": 1}, [1], True])
    async def test_invalid_id_is_answered_with_null(
        self, dispatcher: Dispatcher, request_id: object
    ) -> None:
        response = await dispatcher.handle_message(
            {"jsonrpc": "2.0", "method": "tools/list", "params": [], "id": request_id}
        )
        assert response["error"]["code"] == INVALID_REQUEST
        assert response["id"] is None

    async def test_unexpected_failure_is_internal_error(self) -> None:
        class BrokenSnapshot:
            def list_tools(self) -> list:
                raise KeyError("index corrupted")

        dispatcher = Dispatcher(BrokenSnapshot())  # type: ignore[arg-type]
        response = await dispatcher.handle_message(rpc("tools/list"))
        assert response["error"]["code"] == INTERNAL_ERROR
