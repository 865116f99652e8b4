"""Intermediate representation consumed by the mock generator.

The IR is a flat, pre-order stream of tokens. Nested structures (messages, groups,
composites, sets, enums) are encoded by paired BEGIN/END signals.
"""

from __future__ import annotations

import enum
import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

MESSAGE_HEADER_TYPE = "MessageHeader"


class IrLoadError(ValueError):
    """Raised when a serialized IR document cannot be turned into an `Ir`."""

    pass


class Signal(enum.Enum):
    """Role of a token within the flat stream."""

    BEGIN_MESSAGE = "BEGIN_MESSAGE"
    END_MESSAGE = "END_MESSAGE"
    BEGIN_COMPOSITE = "BEGIN_COMPOSITE"
    END_COMPOSITE = "END_COMPOSITE"
    BEGIN_FIELD = "BEGIN_FIELD"
    END_FIELD = "END_FIELD"
    BEGIN_GROUP = "BEGIN_GROUP"
    END_GROUP = "END_GROUP"
    BEGIN_ENUM = "BEGIN_ENUM"
    VALID_VALUE = "VALID_VALUE"
    END_ENUM = "END_ENUM"
    BEGIN_SET = "BEGIN_SET"
    CHOICE = "CHOICE"
    END_SET = "END_SET"
    BEGIN_VAR_DATA = "BEGIN_VAR_DATA"
    END_VAR_DATA = "END_VAR_DATA"
    ENCODING = "ENCODING"


class Presence(enum.Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    CONSTANT = "constant"


class PrimitiveType(enum.Enum):
    CHAR = "char"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"


@dataclass(frozen=True)
class Encoding:
    """Encoding details of a leaf token."""

    primitive_type: PrimitiveType
    presence: Presence = Presence.REQUIRED
    array_length: int = 1
    const_value: str | None = None


@dataclass(frozen=True)
class Token:
    """One element of the flat token stream."""

    signal: Signal
    name: str
    encoding: Encoding | None = None

    @property
    def array_length(self) -> int:
        """Number of primitive elements encoded by this token (1 for tokens without an encoding)."""
        if self.encoding is None:
            return 1
        return self.encoding.array_length

    @property
    def is_constant(self) -> bool:
        return self.encoding is not None and self.encoding.presence is Presence.CONSTANT


@dataclass
class Ir:
    """The schema catalog: header structure, types and messages as token ranges.

    Every token range starts with a BEGIN token and ends with its matching END token.
    The catalog is read-only for the duration of a generation run.
    """

    applicable_namespace: str
    header_structure: list[Token] = field(default_factory=list)
    types: list[list[Token]] = field(default_factory=list)
    messages: list[list[Token]] = field(default_factory=list)

    def __post_init__(self):
        if not self.header_structure:
            self.header_structure = [
                Token(Signal.BEGIN_COMPOSITE, "messageHeader"),
                Token(Signal.END_COMPOSITE, "messageHeader"),
            ]

    @classmethod
    def from_dict(cls, document: dict[str, Any]) -> Ir:
        """Build a catalog from its JSON form.

        Args:
            document (dict[str, Any]): The decoded JSON document.

        Raises:
            IrLoadError: If the document is missing keys or holds unknown values.

        Returns:
            Ir: The catalog.
        """
        try:
            namespace = document["namespace"]
            header = _tokens_from_list(document.get("header", []))
            types = [_tokens_from_list(tokens) for tokens in document.get("types", [])]
            messages = [_tokens_from_list(tokens) for tokens in document.get("messages", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise IrLoadError(f"Invalid IR document: {e}") from e

        if not isinstance(namespace, str) or not namespace:
            raise IrLoadError("Invalid IR document: 'namespace' must be a non-empty string.")

        return cls(applicable_namespace=namespace, header_structure=header, types=types, messages=messages)


def _encoding_from_dict(data: dict[str, Any]) -> Encoding:
    const_value = data.get("const_value")
    return Encoding(
        primitive_type=PrimitiveType(data["primitive_type"]),
        presence=Presence(data.get("presence", Presence.REQUIRED.value)),
        array_length=int(data.get("array_length", 1)),
        const_value=None if const_value is None else str(const_value),
    )


def _token_from_dict(data: dict[str, Any]) -> Token:
    name = data["name"]
    if not isinstance(name, str):
        raise TypeError(f"token name must be a string, not {type(name).__name__}")

    encoding = data.get("encoding")
    return Token(
        signal=Signal[data["signal"]],
        name=name,
        encoding=None if encoding is None else _encoding_from_dict(encoding),
    )


def _tokens_from_list(items: Sequence[dict[str, Any]]) -> list[Token]:
    return [_token_from_dict(item) for item in items]


def load_ir(path: str | os.PathLike[str]) -> Ir:
    """Load a catalog from a JSON file.

    Args:
        path (str | os.PathLike[str]): Path of the JSON IR file.

    Raises:
        IrLoadError: If the file does not hold valid UTF-8 encoded JSON or a valid IR document.

    Returns:
        Ir: The catalog.
    """
    with open(path, encoding="utf8") as f:
        try:
            document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise IrLoadError(f"'{path}' is not valid UTF-8 encoded JSON: {e}") from e

    if not isinstance(document, dict):
        raise IrLoadError(f"'{path}' does not hold a JSON object.")

    ir = Ir.from_dict(document)
    logger.info(
        "Loaded IR for namespace '%s' with %d type(s) and %d message(s).",
        ir.applicable_namespace,
        len(ir.types),
        len(ir.messages),
    )
    return ir
