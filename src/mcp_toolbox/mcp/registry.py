"""
Registry of tools, resources and prompts.

Entries are registered once while the server is assembled and are
read-only afterwards, so lookups need no locking even when several
invocations are in flight.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from .faults import DuplicateNameFault, UnknownOperationFault
from .schema import EMPTY_SCHEMA, SchemaDescriptor

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    """Kinds of operation a client can target."""
    TOOL = "tool"
    RESOURCE = "resource"
    PROMPT = "prompt"


@dataclass(frozen=True)
class RegistryEntry:
    """A registered operation: its schema and the handler that serves it."""

    name: str
    kind: OperationKind
    schema: SchemaDescriptor
    handler: Callable[..., Any]
    description: str = ""
    uri: Optional[str] = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class OperationDescriptor:
    """Static metadata about one entry, for client-side discovery."""

    name: str
    kind: OperationKind
    description: str
    schema: SchemaDescriptor
    uri: Optional[str] = None
    mime_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the shape of the matching MCP list result."""
        data: Dict[str, Any] = {
            "name": self.name,
            "kind": self.kind.value,
            "description": self.description,
        }
        if self.kind == OperationKind.TOOL:
            data["inputSchema"] = self.schema.to_json_schema()
        elif self.kind == OperationKind.PROMPT:
            data["arguments"] = [
                {"name": name, "description": spec.description, "required": spec.required}
                for name, spec in self.schema
            ]
        else:
            data["uri"] = self.uri
            data["mimeType"] = self.mime_type
        return data


class RegistryListing:
    """
    Restartable view over registry entries.

    Each iteration walks the registry afresh, so the same listing can be
    consumed any number of times.
    """

    def __init__(self, entries: Dict[Tuple[OperationKind, str], RegistryEntry], kind: Optional[OperationKind]):
        self._entries = entries
        self._kind = kind

    def __iter__(self) -> Iterator[OperationDescriptor]:
        for entry in self._entries.values():
            if self._kind is not None and entry.kind != self._kind:
                continue
            yield OperationDescriptor(
                name=entry.name,
                kind=entry.kind,
                description=entry.description,
                schema=entry.schema,
                uri=entry.uri,
                mime_type=entry.mime_type,
            )

    def names(self) -> list:
        return [descriptor.name for descriptor in self]


class Registry:
    """Maps (kind, name) pairs to registry entries."""

    def __init__(self):
        self._entries: Dict[Tuple[OperationKind, str], RegistryEntry] = {}

    def register(
        self,
        name: str,
        kind: OperationKind,
        schema: SchemaDescriptor,
        handler: Callable[..., Any],
        description: str = "",
        uri: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> RegistryEntry:
        """
        Register an operation.

        Args:
            name: Operation name, unique per kind
            kind: Tool, resource or prompt
            schema: Declared arguments
            handler: Callable invoked with the validated arguments
            description: Human-readable description for discovery
            uri: Resource URI (resources only)
            mime_type: Resource MIME type (resources only)

        Returns:
            The stored RegistryEntry

        Raises:
            DuplicateNameFault: If name is already registered for kind
            ValueError: If a resource is missing its URI or declares arguments
        """
        kind = OperationKind(kind)
        key = (kind, name)
        if key in self._entries:
            raise DuplicateNameFault(name, kind.value)

        if kind == OperationKind.RESOURCE:
            if not uri:
                raise ValueError(f"Resource '{name}' must declare a URI")
            if len(schema):
                raise ValueError(f"Resource '{name}' cannot declare arguments")

        entry = RegistryEntry(
            name=name,
            kind=kind,
            schema=schema,
            handler=handler,
            description=description,
            uri=uri,
            mime_type=mime_type,
        )
        self._entries[key] = entry
        logger.debug("Registered %s '%s'", kind.value, name)
        return entry

    def register_tool(self, name: str, schema: SchemaDescriptor, handler: Callable[..., Any], description: str = "") -> RegistryEntry:
        return self.register(name, OperationKind.TOOL, schema, handler, description)

    def register_resource(
        self,
        name: str,
        uri: str,
        handler: Callable[..., Any],
        description: str = "",
        mime_type: str = "text/plain",
    ) -> RegistryEntry:
        return self.register(
            name, OperationKind.RESOURCE, EMPTY_SCHEMA, handler, description, uri=uri, mime_type=mime_type
        )

    def register_prompt(self, name: str, schema: SchemaDescriptor, handler: Callable[..., Any], description: str = "") -> RegistryEntry:
        return self.register(name, OperationKind.PROMPT, schema, handler, description)

    def lookup(self, name: str, kind: OperationKind = OperationKind.TOOL) -> RegistryEntry:
        """
        Look up a registered entry.

        Raises:
            UnknownOperationFault: If name is not registered for kind, or kind
                is not an operation kind
        """
        try:
            kind = OperationKind(kind)
        except ValueError:
            raise UnknownOperationFault(name, str(kind)) from None

        try:
            return self._entries[(kind, name)]
        except KeyError:
            raise UnknownOperationFault(name, kind.value) from None

    def listing(self, kind: Optional[OperationKind] = None) -> RegistryListing:
        """Return a restartable listing of entries, optionally filtered by kind."""
        return RegistryListing(self._entries, OperationKind(kind) if kind is not None else None)

    def __contains__(self, key: Tuple[OperationKind, str]) -> bool:
        kind, name = key
        return (OperationKind(kind), name) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
