"""
Fault taxonomy for tool, resource and prompt invocations.

Faults are raised by the registry and by handlers, and captured by the
dispatcher, which renders them into failure envelopes. Nothing below the
dispatcher formats its own error response.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence


class Fault(Exception):
    """Base class for every structured, non-fatal invocation failure."""

    kind = "fault"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for the response envelope."""
        return {"kind": self.kind, "message": self.message}


class DuplicateNameFault(Fault):
    """Raised when a name is registered twice for the same operation kind."""

    kind = "duplicate_name"

    def __init__(self, name: str, operation_kind: str):
        self.name = name
        self.operation_kind = operation_kind
        super().__init__(f"A {operation_kind} named '{name}' is already registered")


class UnknownOperationFault(Fault):
    """Raised when a lookup targets a name that was never registered."""

    kind = "unknown_operation"

    def __init__(self, name: str, operation_kind: str):
        self.name = name
        self.operation_kind = operation_kind
        super().__init__(f"Unknown {operation_kind}: {name}")


@dataclass(frozen=True)
class FieldProblem:
    """One offending argument and the reason it was rejected."""

    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


class ValidationFault(Fault):
    """
    Aggregated argument validation failure.

    Carries every problem found in one pass so a client can fix all of
    them in a single round trip.
    """

    kind = "validation"

    def __init__(self, problems: Sequence[FieldProblem]):
        self.problems: List[FieldProblem] = list(problems)
        details = "; ".join(str(problem) for problem in self.problems)
        super().__init__(f"Invalid arguments: {details}")

    @property
    def fields(self) -> List[str]:
        """Names of the offending fields, in declaration order."""
        return [problem.field for problem in self.problems]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["problems"] = [
            {"field": problem.field, "reason": problem.reason}
            for problem in self.problems
        ]
        return data


class InvalidOperationFault(Fault):
    """Raised by a handler when its input is valid in shape but not in meaning."""

    kind = "invalid_operation"


class MissingCredentialFault(Fault):
    """Raised when an external call is attempted without its credential."""

    kind = "missing_credential"

    def __init__(self, credential: str):
        self.credential = credential
        super().__init__(
            f"{credential} is not configured. "
            f"Set the {credential} environment variable to enable this tool."
        )


class UpstreamFault(Fault):
    """Raised when the remote provider fails or returns unusable data."""

    kind = "upstream"


class InternalFault(Fault):
    """Raised on invariant violations and unexpected handler exceptions."""

    kind = "internal"
