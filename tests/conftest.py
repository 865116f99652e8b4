"""Pytest configuration, token builders and fixtures for sbe mock generator tests."""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path
from typing import Any

import pytest

from sbe_mock_generator.ir import Encoding, Ir, Presence, PrimitiveType, Signal, Token
from sbe_mock_generator.output import StringOutputManager
from sbe_mock_generator.writer import MockGenerator

TESTS_DIR = Path(__file__).parent

CAR_NAMESPACE = "car_codecs"

# Real codec classes that the generated mocks of the car schema subclass
CAR_CODECS_SOURCE = '''"""Stand-in for the real generated codec package of the car schema."""


class MessageHeader:
    pass


class BooleanType:
    pass


class Model:
    pass


class OptionalExtras:
    pass


class Engine:
    pass


class Car:
    class FuelFigures:
        pass

    class PerformanceFigures:
        class Acceleration:
            pass
'''


def encoding(
    primitive: str = "int32",
    presence: Presence = Presence.REQUIRED,
    array_length: int = 1,
    const_value: str | None = None,
) -> Encoding:
    return Encoding(PrimitiveType(primitive), presence, array_length, const_value)


def encoding_token(
    name: str,
    primitive: str = "int32",
    presence: Presence = Presence.REQUIRED,
    array_length: int = 1,
    const_value: str | None = None,
) -> Token:
    return Token(Signal.ENCODING, name, encoding(primitive, presence, array_length, const_value))


def field_tokens(
    name: str,
    primitive: str = "int32",
    presence: Presence = Presence.REQUIRED,
    array_length: int = 1,
    const_value: str | None = None,
) -> list[Token]:
    """A field with a primitive encoding."""
    field_encoding = encoding(primitive, presence, array_length, const_value)
    return [
        Token(Signal.BEGIN_FIELD, name, field_encoding),
        Token(Signal.ENCODING, primitive, field_encoding),
        Token(Signal.END_FIELD, name, field_encoding),
    ]


def enum_tokens(name: str, *values: str) -> list[Token]:
    return [
        Token(Signal.BEGIN_ENUM, name, encoding("uint8")),
        *(Token(Signal.VALID_VALUE, value, encoding("uint8")) for value in values),
        Token(Signal.END_ENUM, name, encoding("uint8")),
    ]


def set_tokens(name: str, *choices: str) -> list[Token]:
    return [
        Token(Signal.BEGIN_SET, name, encoding("uint8")),
        *(Token(Signal.CHOICE, choice, encoding("uint8")) for choice in choices),
        Token(Signal.END_SET, name, encoding("uint8")),
    ]


def composite_tokens(name: str, *members: Token | list[Token]) -> list[Token]:
    body: list[Token] = []
    for member in members:
        body.extend(member if isinstance(member, list) else [member])
    return [Token(Signal.BEGIN_COMPOSITE, name), *body, Token(Signal.END_COMPOSITE, name)]


def type_field_tokens(name: str, type_tokens: list[Token]) -> list[Token]:
    """A field whose encoding is an enum, a set or a composite."""
    return [Token(Signal.BEGIN_FIELD, name), *type_tokens, Token(Signal.END_FIELD, name)]


def group_tokens(name: str, *members: list[Token]) -> list[Token]:
    """A repeating group, including its dimension composite."""
    dimensions = composite_tokens(
        "groupSizeEncoding",
        encoding_token("blockLength", "uint16"),
        encoding_token("numInGroup", "uint8"),
    )
    body = [token for member in members for token in member]
    return [Token(Signal.BEGIN_GROUP, name), *dimensions, *body, Token(Signal.END_GROUP, name)]


def var_data_tokens(name: str) -> list[Token]:
    return [
        Token(Signal.BEGIN_VAR_DATA, name),
        *composite_tokens(
            "varDataEncoding",
            encoding_token("length", "uint8"),
            encoding_token("varData", "char", array_length=0),
        ),
        Token(Signal.END_VAR_DATA, name),
    ]


def message_tokens(name: str, *members: list[Token]) -> list[Token]:
    body = [token for member in members for token in member]
    return [Token(Signal.BEGIN_MESSAGE, name), *body, Token(Signal.END_MESSAGE, name)]


def header_tokens() -> list[Token]:
    return composite_tokens(
        "messageHeader",
        encoding_token("blockLength", "uint16"),
        encoding_token("templateId", "uint16"),
        encoding_token("schemaId", "uint16"),
        encoding_token("version", "uint16"),
    )


def car_ir(namespace: str = CAR_NAMESPACE) -> Ir:
    """The catalog of the classic car example schema."""
    engine = composite_tokens(
        "Engine",
        encoding_token("capacity", "uint16"),
        encoding_token("numCylinders", "uint8"),
        encoding_token("maxRpm", "uint16", Presence.CONSTANT, const_value="9000"),
        encoding_token("manufacturerCode", "char", array_length=3),
        encoding_token("fuel", "char", Presence.CONSTANT, array_length=6, const_value="Petrol"),
    )
    boolean_type = enum_tokens("BooleanType", "F", "T")
    model = enum_tokens("Model", "A", "B", "C")
    optional_extras = set_tokens("OptionalExtras", "sunRoof", "sportsPack", "cruiseControl")

    car = message_tokens(
        "Car",
        field_tokens("serialNumber", "uint64"),
        field_tokens("modelYear", "uint16"),
        type_field_tokens("available", boolean_type),
        type_field_tokens("code", model),
        field_tokens("someNumbers", "int32", array_length=5),
        field_tokens("vehicleCode", "char", array_length=6),
        type_field_tokens("extras", optional_extras),
        type_field_tokens("engine", engine),
        group_tokens(
            "fuelFigures",
            field_tokens("speed", "uint16"),
            field_tokens("mpg", "float"),
        ),
        group_tokens(
            "performanceFigures",
            field_tokens("octaneRating", "uint8"),
            group_tokens(
                "acceleration",
                field_tokens("mph", "uint16"),
                field_tokens("seconds", "float"),
            ),
        ),
        var_data_tokens("make"),
        var_data_tokens("model"),
    )

    return Ir(
        applicable_namespace=namespace,
        header_structure=header_tokens(),
        types=[boolean_type, model, optional_extras, engine],
        messages=[car],
    )


def token_to_dict(token: Token) -> dict[str, Any]:
    data: dict[str, Any] = {"signal": token.signal.name, "name": token.name}
    if token.encoding is not None:
        data["encoding"] = {
            "primitive_type": token.encoding.primitive_type.value,
            "presence": token.encoding.presence.value,
            "array_length": token.encoding.array_length,
        }
        if token.encoding.const_value is not None:
            data["encoding"]["const_value"] = token.encoding.const_value
    return data


def ir_to_document(ir: Ir) -> dict[str, Any]:
    """The JSON form of a catalog, as read by `load_ir`."""
    return {
        "namespace": ir.applicable_namespace,
        "header": [token_to_dict(token) for token in ir.header_structure],
        "types": [[token_to_dict(token) for token in tokens] for tokens in ir.types],
        "messages": [[token_to_dict(token) for token in tokens] for tokens in ir.messages],
    }


@pytest.fixture
def car_ir_path(tmp_path) -> Path:
    """The car catalog written to a JSON IR file."""
    path = tmp_path / "car.json"
    path.write_text(json.dumps(ir_to_document(car_ir()), indent=2), encoding="utf8")
    return path


@pytest.fixture(scope="session")
def car_outputs() -> dict[str, str]:
    """Generated mock modules of the car catalog, keyed by unit name."""
    output_manager = StringOutputManager()
    MockGenerator(car_ir(), output_manager).generate()
    return output_manager.outputs


@pytest.fixture(scope="module")
def car_mocks(tmp_path_factory, car_outputs):
    """Imports the generated car mocks next to a stand-in codec package.

    Yields:
        Callable[[str], ModuleType]: Imports a generated mock module by unit name.
    """
    directory = tmp_path_factory.mktemp("car_mocks")
    package_dir = directory / CAR_NAMESPACE
    package_dir.mkdir()
    (package_dir / "__init__.py").write_text(CAR_CODECS_SOURCE, encoding="utf8")

    for name, output in car_outputs.items():
        (directory / f"{name}.py").write_text(output, encoding="utf8")

    sys.path.insert(0, str(directory))
    importlib.invalidate_caches()

    yield importlib.import_module

    sys.path.remove(str(directory))
    for name in [CAR_NAMESPACE, *car_outputs]:
        sys.modules.pop(name, None)
