"""Capability registry for tools, resources and prompts.

The registry is filled while the server is being built and frozen into an
immutable ``RegistrySnapshot`` before the first request is served. Entries
are keyed by name and re-registering a name replaces the previous entry.
"""

import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog

from lambda_mcp.core.errors import RegistryFrozenError
from lambda_mcp.schema.fields import Shape
from lambda_mcp.schema.translator import prompt_arguments, to_json_schema
from lambda_mcp.schema.validator import validate_arguments


__all__ = [
    "ToolEntry",
    "ResourceEntry",
    "PromptEntry",
    "CapabilityRegistry",
    "RegistrySnapshot",
    "describe_handler",
]

logger = structlog.get_logger(__name__)

Handler = Callable[..., Any]
BoundHandler = Callable[[Mapping[str, Any] | None], Awaitable[Any]]


@dataclass(frozen=True)
class ToolEntry:
    name: str
    description: str
    shape: Shape
    input_schema: dict[str, Any]
    handler: BoundHandler = field(repr=False)

    def to_listing(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(frozen=True)
class ResourceEntry:
    name: str
    uri: str
    description: str
    handler: Callable[[str], Awaitable[Any]] = field(repr=False)
    mime_type: str | None = None

    def to_listing(self) -> dict[str, Any]:
        listing: dict[str, Any] = {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
        }
        if self.mime_type:
            listing["mimeType"] = self.mime_type
        return listing


@dataclass(frozen=True)
class PromptEntry:
    name: str
    description: str
    shape: Shape
    arguments: list[dict[str, Any]]
    handler: BoundHandler = field(repr=False)

    def to_listing(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "arguments": self.arguments,
        }


def describe_handler(handler: Handler, fallback: str) -> str:
    """First docstring line of ``handler``, else ``fallback``."""
    doc = inspect.getdoc(handler)
    if doc:
        return doc.strip().splitlines()[0]
    return fallback


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _validating(shape: Shape, handler: Handler) -> BoundHandler:
    """Wrap ``handler`` so it only ever sees validated keyword arguments."""

    async def validated_handler(arguments: Mapping[str, Any] | None) -> Any:
        validated = validate_arguments(shape, arguments)
        return await _maybe_await(handler(**validated))

    validated_handler.__wrapped__ = handler  # type: ignore[attr-defined]
    return validated_handler


def _plain(handler: Callable[[str], Any]) -> Callable[[str], Awaitable[Any]]:
    async def resource_handler(uri: str) -> Any:
        return await _maybe_await(handler(uri))

    resource_handler.__wrapped__ = handler  # type: ignore[attr-defined]
    return resource_handler


class _CapabilityView:
    """Read operations shared by the mutable registry and its snapshots."""

    _tools: Mapping[str, ToolEntry]
    _resources: Mapping[str, ResourceEntry]
    _prompts: Mapping[str, PromptEntry]

    @property
    def tools(self) -> Mapping[str, ToolEntry]:
        return MappingProxyType(dict(self._tools))

    @property
    def resources(self) -> Mapping[str, ResourceEntry]:
        return MappingProxyType(dict(self._resources))

    @property
    def prompts(self) -> Mapping[str, PromptEntry]:
        return MappingProxyType(dict(self._prompts))

    def list_tools(self) -> list[dict[str, Any]]:
        return [entry.to_listing() for entry in self._tools.values()]

    def list_resources(self) -> list[dict[str, Any]]:
        return [entry.to_listing() for entry in self._resources.values()]

    def list_prompts(self) -> list[dict[str, Any]]:
        return [entry.to_listing() for entry in self._prompts.values()]

    def find_tool(self, name: str) -> ToolEntry | None:
        return self._tools.get(name)

    def find_resource_by_uri(self, uri: str) -> ResourceEntry | None:
        for entry in self._resources.values():
            if entry.uri == uri:
                return entry
        return None

    def find_prompt(self, name: str) -> PromptEntry | None:
        return self._prompts.get(name)

    def counts(self) -> dict[str, int]:
        return {
            "tools": len(self._tools),
            "resources": len(self._resources),
            "prompts": len(self._prompts),
        }


class RegistrySnapshot(_CapabilityView):
    """Immutable view handed to the dispatcher."""

    def __init__(
        self,
        tools: Mapping[str, ToolEntry],
        resources: Mapping[str, ResourceEntry],
        prompts: Mapping[str, PromptEntry],
    ) -> None:
        self._tools = MappingProxyType(dict(tools))
        self._resources = MappingProxyType(dict(resources))
        self._prompts = MappingProxyType(dict(prompts))

        uri_index: dict[str, ResourceEntry] = {}
        for entry in self._resources.values():
            uri_index.setdefault(entry.uri, entry)
        self._resources_by_uri = MappingProxyType(uri_index)

    def find_resource_by_uri(self, uri: str) -> ResourceEntry | None:
        return self._resources_by_uri.get(uri)


class CapabilityRegistry(_CapabilityView):
    """Name-keyed store of tools, resources and prompts."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolEntry] = {}
        self._resources: dict[str, ResourceEntry] = {}
        self._prompts: dict[str, PromptEntry] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self, kind: str, name: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register {kind} '{name}': registry is frozen while serving"
            )

    def register_tool(
        self,
        name: str,
        shape: Shape,
        handler: Handler,
        description: str | None = None,
    ) -> "CapabilityRegistry":
        self._check_mutable("tool", name)
        if name in self._tools:
            logger.debug("tool_replaced", tool_name=name)

        self._tools[name] = ToolEntry(
            name=name,
            description=description or describe_handler(handler, f"Tool: {name}"),
            shape=dict(shape),
            input_schema=to_json_schema(shape),
            handler=_validating(shape, handler),
        )
        logger.debug("tool_registered", tool_name=name, fields=list(shape))
        return self

    def register_resource(
        self,
        name: str,
        uri: str,
        handler: Callable[[str], Any],
        description: str | None = None,
        mime_type: str | None = None,
    ) -> "CapabilityRegistry":
        self._check_mutable("resource", name)
        self._resources[name] = ResourceEntry(
            name=name,
            uri=uri,
            description=description or describe_handler(handler, f"Resource: {name}"),
            handler=_plain(handler),
            mime_type=mime_type,
        )
        logger.debug("resource_registered", resource_name=name, uri=uri)
        return self

    def register_prompt(
        self,
        name: str,
        shape: Shape,
        handler: Handler,
        description: str | None = None,
    ) -> "CapabilityRegistry":
        self._check_mutable("prompt", name)
        self._prompts[name] = PromptEntry(
            name=name,
            description=description or describe_handler(handler, f"Prompt: {name}"),
            shape=dict(shape),
            arguments=prompt_arguments(shape),
            handler=_validating(shape, handler),
        )
        logger.debug("prompt_registered", prompt_name=name, fields=list(shape))
        return self

    def freeze(self) -> RegistrySnapshot:
        """Stop accepting registrations and return the immutable snapshot."""
        if not self._frozen:
            self._frozen = True
            logger.debug("registry_frozen", **self.counts())
        return RegistrySnapshot(self._tools, self._resources, self._prompts)
