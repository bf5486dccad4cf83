"""
Declarative argument descriptors for registered operations.

A SchemaDescriptor lists the named arguments an operation accepts. Each
argument has one kind from a closed set (string, number, enum) and is
either required or carries a default. Descriptors are pure data; the
validator interprets them and the transport shim renders them as JSON
Schema for client-side discovery.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


class ArgumentKind(str, Enum):
    """Supported argument kinds. Adding one means updating the validator."""
    STRING = "string"
    NUMBER = "number"
    ENUM = "enum"


@dataclass(frozen=True)
class ArgumentSpec:
    """
    Declaration of a single argument.

    Attributes:
        kind: Argument kind
        description: Human-readable description shown to clients
        required: Whether the argument must be supplied
        default: Value substituted when an optional argument is omitted
        choices: Allowed values (enum kind only)
    """

    kind: ArgumentKind
    description: str = ""
    required: bool = True
    default: Any = None
    choices: Tuple[str, ...] = ()

    def __post_init__(self):
        """Validate declaration after initialization."""
        if self.kind == ArgumentKind.ENUM:
            if not self.choices:
                raise ValueError("Enum arguments must declare at least one choice")
            if self.default is not None and self.default not in self.choices:
                raise ValueError(
                    f"Default '{self.default}' is not one of the declared choices: "
                    f"{', '.join(self.choices)}"
                )
        elif self.choices:
            raise ValueError(f"Choices are only valid for enum arguments, not {self.kind.value}")

        if self.required and self.default is not None:
            raise ValueError("Required arguments cannot declare a default")

    def to_json_schema(self) -> Dict[str, Any]:
        """Render as a JSON Schema property."""
        if self.kind == ArgumentKind.ENUM:
            prop: Dict[str, Any] = {"type": "string", "enum": list(self.choices)}
        else:
            prop = {"type": self.kind.value}

        if self.description:
            prop["description"] = self.description
        if not self.required and self.default is not None:
            prop["default"] = self.default
        return prop


def string(description: str = "", required: bool = True, default: Optional[str] = None) -> ArgumentSpec:
    """Declare a string argument."""
    return ArgumentSpec(ArgumentKind.STRING, description, required, default)


def number(description: str = "", required: bool = True, default: Optional[float] = None) -> ArgumentSpec:
    """Declare a number argument."""
    return ArgumentSpec(ArgumentKind.NUMBER, description, required, default)


def enum(
    choices: Tuple[str, ...],
    description: str = "",
    required: bool = True,
    default: Optional[str] = None,
) -> ArgumentSpec:
    """Declare an enum argument restricted to ``choices``."""
    return ArgumentSpec(ArgumentKind.ENUM, description, required, default, tuple(choices))


@dataclass(frozen=True)
class SchemaDescriptor:
    """Ordered set of argument declarations for one operation."""

    arguments: Mapping[str, ArgumentSpec] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze a private copy so callers cannot mutate a registered schema
        object.__setattr__(self, "arguments", dict(self.arguments))

    def __iter__(self) -> Iterator[Tuple[str, ArgumentSpec]]:
        return iter(self.arguments.items())

    def __len__(self) -> int:
        return len(self.arguments)

    @property
    def required(self) -> List[str]:
        return [name for name, spec in self.arguments.items() if spec.required]

    def to_json_schema(self) -> Dict[str, Any]:
        """Render as a JSON Schema object for tool discovery."""
        return {
            "type": "object",
            "properties": {
                name: spec.to_json_schema() for name, spec in self.arguments.items()
            },
            "required": self.required,
        }


EMPTY_SCHEMA = SchemaDescriptor()
