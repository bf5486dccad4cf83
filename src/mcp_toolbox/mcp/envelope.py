"""
Response envelope and content blocks.

Every invocation, successful or not, produces one ResponseEnvelope. A
success carries an ordered sequence of self-describing content blocks; a
failure carries exactly one fault.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .faults import Fault


@dataclass(frozen=True)
class Annotations:
    """Client-side rendering hints for a content block."""

    audience: Tuple[str, ...] = ("user",)
    priority: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"audience": list(self.audience)}
        if self.priority is not None:
            data["priority"] = self.priority
        return data


@dataclass(frozen=True)
class TextBlock:
    """Plain text content."""

    text: str
    type: str = field(default="text", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ImageBlock:
    """Base64-encoded image content."""

    data: str
    mime_type: str
    annotations: Optional[Annotations] = None
    type: str = field(default="image", init=False)

    def __post_init__(self):
        if not self.mime_type:
            raise ValueError("Image content requires a MIME type")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "data": self.data,
            "mimeType": self.mime_type,
        }
        if self.annotations:
            data["annotations"] = self.annotations.to_dict()
        return data


@dataclass(frozen=True)
class BinaryBlock:
    """Base64-encoded binary content embedded as a resource."""

    data: str
    mime_type: str
    uri: str = "binary://payload"
    type: str = field(default="resource", init=False)

    def __post_init__(self):
        if not self.mime_type:
            raise ValueError("Binary content requires a MIME type")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "resource": {
                "uri": self.uri,
                "mimeType": self.mime_type,
                "blob": self.data,
            },
        }


ContentBlock = Union[TextBlock, ImageBlock, BinaryBlock]
CONTENT_BLOCK_TYPES = (TextBlock, ImageBlock, BinaryBlock)


@dataclass
class ResponseEnvelope:
    """
    Uniform success/failure wrapper returned for every invocation.

    Attributes:
        success: Whether the invocation completed successfully
        content: Ordered content blocks (success only)
        fault: The captured fault (failure only)
    """

    success: bool
    content: List[ContentBlock] = field(default_factory=list)
    fault: Optional[Fault] = None

    def __post_init__(self):
        """Reject envelopes that mix success and failure."""
        if self.success and (self.fault is not None or not self.content):
            raise ValueError("A success envelope carries content and no fault")
        if not self.success and (self.fault is None or self.content):
            raise ValueError("A failure envelope carries one fault and no content")

    @classmethod
    def success_result(cls, content: Sequence[ContentBlock]) -> "ResponseEnvelope":
        """Create success envelope."""
        return cls(success=True, content=list(content))

    @classmethod
    def failure_result(cls, fault: Fault) -> "ResponseEnvelope":
        """Create failure envelope."""
        return cls(success=False, fault=fault)

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks, or the fault message."""
        if self.fault is not None:
            return self.fault.message
        return "\n".join(block.text for block in self.content if isinstance(block, TextBlock))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the MCP call result shape."""
        if self.fault is not None:
            return {
                "content": [TextBlock(self.fault.message).to_dict()],
                "isError": True,
                "fault": self.fault.to_dict(),
            }
        return {
            "content": [block.to_dict() for block in self.content],
            "isError": False,
        }
