"""
Calculator tool.

Performs one binary arithmetic operation and reports it as an equation,
e.g. ``"10 ÷ 2 = 5"``.
"""

import math
from typing import Union

from mcp_toolbox.mcp.faults import InternalFault, InvalidOperationFault
from mcp_toolbox.mcp.registry import Registry
from mcp_toolbox.mcp.schema import SchemaDescriptor, enum, number

Number = Union[int, float]

OPERATION_SYMBOLS = {
    "add": "+",
    "subtract": "-",
    "multiply": "×",
    "divide": "÷",
}

CALCULATOR_SCHEMA = SchemaDescriptor({
    "operation": enum(tuple(OPERATION_SYMBOLS), "Arithmetic operation to perform"),
    "a": number("First operand"),
    "b": number("Second operand"),
})


def format_number(value: Number) -> str:
    """Render integral floats without a fractional part (5.0 -> "5")."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def calculate(operation: str, a: Number, b: Number) -> Number:
    """
    Apply ``operation`` to the operands.

    Raises:
        InvalidOperationFault: On division by zero, or when the result
            does not fit in a finite float
        InternalFault: If operation is not a supported operation
    """
    if operation not in OPERATION_SYMBOLS:
        # Validation restricts operation to OPERATION_SYMBOLS
        raise InternalFault(f"Unsupported operation: {operation}")

    if operation == "divide" and b == 0:
        raise InvalidOperationFault("Cannot divide by zero")

    try:
        if operation == "add":
            result = a + b
        elif operation == "subtract":
            result = a - b
        elif operation == "multiply":
            result = a * b
        else:
            result = a / b
    except OverflowError as e:
        raise InvalidOperationFault(f"Result is out of range: {e}") from e

    if isinstance(result, float) and not math.isfinite(result):
        raise InvalidOperationFault("Result is out of range")
    return result


def calculator_handler(operation: str, a: Number, b: Number) -> str:
    """Return the evaluated equation as text."""
    result = calculate(operation, a, b)
    symbol = OPERATION_SYMBOLS[operation]
    return f"{format_number(a)} {symbol} {format_number(b)} = {format_number(result)}"


def register_calculator_tool(registry: Registry) -> None:
    registry.register_tool(
        name="calculator",
        schema=CALCULATOR_SCHEMA,
        handler=calculator_handler,
        description="Add, subtract, multiply or divide two numbers",
    )
