"""
Argument validation against a SchemaDescriptor.

``validate`` never raises for bad input: it returns either a complete
ArgumentRecord or one ValidationFault listing every problem it found.
"""

import math
from typing import Any, Dict, Iterator, List, Mapping, Union

from .faults import FieldProblem, ValidationFault
from .schema import ArgumentKind, ArgumentSpec, SchemaDescriptor


class ArgumentRecord(Mapping[str, Any]):
    """Immutable mapping of validated, defaulted argument values."""

    __slots__ = ("_values",)

    def __init__(self, values: Dict[str, Any]):
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ArgumentRecord({self._values!r})"


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _check(spec: ArgumentSpec, value: Any) -> Union[str, None]:
    """Return a rejection reason for ``value``, or None if it conforms."""
    if spec.kind == ArgumentKind.STRING:
        if not isinstance(value, str):
            return f"expected string, got {_type_name(value)}"
    elif spec.kind == ArgumentKind.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"expected number, got {_type_name(value)}"
        if isinstance(value, float) and not math.isfinite(value):
            return "expected a finite number"
    elif spec.kind == ArgumentKind.ENUM:
        if not isinstance(value, str) or value not in spec.choices:
            return f"must be one of: {', '.join(spec.choices)}"
    else:
        return f"unsupported argument kind: {spec.kind}"
    return None


def validate(
    schema: SchemaDescriptor,
    raw_args: Any,
) -> Union[ArgumentRecord, ValidationFault]:
    """
    Validate raw arguments against a schema.

    Undeclared arguments are ignored. A None value is treated the same as
    an omitted argument.

    Args:
        schema: Declared arguments for the operation
        raw_args: Arguments as received from the client

    Returns:
        ArgumentRecord with every declared field populated, or a
        ValidationFault naming every offending field
    """
    if raw_args is None:
        raw_args = {}
    if not isinstance(raw_args, Mapping):
        return ValidationFault([
            FieldProblem("<arguments>", f"expected object, got {_type_name(raw_args)}")
        ])

    values: Dict[str, Any] = {}
    problems: List[FieldProblem] = []

    for name, spec in schema:
        value = raw_args.get(name)

        if value is None:
            if spec.required:
                problems.append(FieldProblem(name, "required field is missing"))
            else:
                values[name] = spec.default
            continue

        reason = _check(spec, value)
        if reason:
            problems.append(FieldProblem(name, reason))
        else:
            values[name] = value

    if problems:
        return ValidationFault(problems)
    return ArgumentRecord(values)
