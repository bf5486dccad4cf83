"""
Invocation dispatcher.

Routes an invocation through registry lookup, argument validation and
handler execution, and converts whatever comes back (content, a raised
fault, or an unexpected exception) into a ResponseEnvelope. This is the
only place faults are turned into failure responses.
"""

import inspect
import logging
from typing import Any, List, Mapping, Optional

from .envelope import CONTENT_BLOCK_TYPES, ContentBlock, ResponseEnvelope, TextBlock
from .faults import Fault, InternalFault, UnknownOperationFault, ValidationFault
from .registry import OperationKind, Registry
from .validation import validate

logger = logging.getLogger(__name__)


def normalize_content(output: Any) -> List[ContentBlock]:
    """
    Normalize handler output into an ordered list of content blocks.

    Raises:
        InternalFault: If the output is empty, untyped binary, or of an
            unsupported type
    """
    if isinstance(output, str):
        return [TextBlock(output)]

    if isinstance(output, CONTENT_BLOCK_TYPES):
        return [output]

    if isinstance(output, (bytes, bytearray)):
        raise InternalFault("Handler returned binary output without a MIME type")

    if isinstance(output, (list, tuple)):
        blocks: List[ContentBlock] = []
        for item in output:
            if isinstance(item, str):
                blocks.append(TextBlock(item))
            elif isinstance(item, CONTENT_BLOCK_TYPES):
                blocks.append(item)
            else:
                raise InternalFault(
                    f"Handler returned unsupported content item: {type(item).__name__}"
                )
        if not blocks:
            raise InternalFault("Handler returned no content")
        return blocks

    raise InternalFault(f"Handler returned unsupported output: {type(output).__name__}")


class Dispatcher:
    """Routes invocations to registered handlers and shapes their responses."""

    def __init__(self, registry: Registry):
        self.registry = registry

    async def invoke(
        self,
        name: str,
        raw_args: Optional[Mapping[str, Any]] = None,
        kind: OperationKind = OperationKind.TOOL,
    ) -> ResponseEnvelope:
        """
        Invoke a registered operation.

        Never raises for invocation failures: unknown names, invalid
        arguments, handler faults and unexpected handler exceptions all
        produce a failure envelope.

        Args:
            name: Registered operation name
            raw_args: Arguments as received from the client
            kind: Operation kind to look up

        Returns:
            ResponseEnvelope describing the outcome
        """
        try:
            entry = self.registry.lookup(name, kind)
        except UnknownOperationFault as fault:
            logger.warning("%s", fault.message)
            return ResponseEnvelope.failure_result(fault)

        logger.debug("Invoking %s '%s'", entry.kind.value, name)

        record = validate(entry.schema, raw_args)
        if isinstance(record, ValidationFault):
            logger.warning("Rejected arguments for '%s': %s", name, record.message)
            return ResponseEnvelope.failure_result(record)

        try:
            output = entry.handler(**record)
            if inspect.isawaitable(output):
                output = await output
            content = normalize_content(output)
        except Fault as fault:
            logger.warning("%s '%s' failed: %s", entry.kind.value, name, fault.message)
            return ResponseEnvelope.failure_result(fault)
        except Exception as e:
            logger.exception(f"Unexpected error in handler for '{name}': {e}")
            return ResponseEnvelope.failure_result(InternalFault(str(e) or type(e).__name__))

        return ResponseEnvelope.success_result(content)

    async def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ResponseEnvelope:
        return await self.invoke(name, arguments, OperationKind.TOOL)

    async def read_resource(self, name: str) -> ResponseEnvelope:
        return await self.invoke(name, None, OperationKind.RESOURCE)

    async def get_prompt(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ResponseEnvelope:
        return await self.invoke(name, arguments, OperationKind.PROMPT)
