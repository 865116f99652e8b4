"""Python type names for SBE primitive types."""

from __future__ import annotations

from sbe_mock_generator.ir import PrimitiveType

SBE_TYPE_TO_PYTHON = {
    PrimitiveType.CHAR: "bytes",
    PrimitiveType.INT8: "int",
    PrimitiveType.INT16: "int",
    PrimitiveType.INT32: "int",
    PrimitiveType.INT64: "int",
    PrimitiveType.UINT8: "int",
    PrimitiveType.UINT16: "int",
    PrimitiveType.UINT32: "int",
    PrimitiveType.UINT64: "int",
    PrimitiveType.FLOAT: "float",
    PrimitiveType.DOUBLE: "float",
}

# char arrays are exposed as a single byte string, not a list of one-byte strings
SBE_ARRAY_TYPE_TO_PYTHON = {
    primitive: "bytes" if primitive is PrimitiveType.CHAR else f"list[{python_type}]"
    for primitive, python_type in SBE_TYPE_TO_PYTHON.items()
}
