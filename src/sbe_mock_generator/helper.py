"""Helper functionality that is used in other modules of this package.

Holds the naming rules for generated Python code and small builders for lines of Python source.
"""

from __future__ import annotations

import keyword
import re
import sys
from collections.abc import Collection, Sequence
from dataclasses import dataclass

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from sbe_mock_generator.ir import PrimitiveType
from sbe_mock_generator.python_types import SBE_ARRAY_TYPE_TO_PYTHON, SBE_TYPE_TO_PYTHON

MOCK = "Mock"

_WORD_SEPARATORS = re.compile(r"[_\-\s]+")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def sanitize_name(name: str, reserved: Collection[str] = ()) -> str:
    """Sanitize a name to avoid Python keywords and reserved member names.

    If the name is a Python keyword or one of the reserved names, append an underscore.
    E.g. 'lambda' becomes 'lambda_', 'class' becomes 'class_'.

    Args:
        name (str): The original name.
        reserved (Collection[str], optional): Names already taken in the enclosing class. Defaults to ().

    Returns:
        str: The sanitized name.
    """
    if keyword.iskeyword(name) or name in reserved:
        return f"{name}_"
    return name


def to_lower_first_char(name: str) -> str:
    """Lower-case the first character of a name, e.g. `FuelFigures` becomes `fuelFigures`."""
    return name[:1].lower() + name[1:]


def to_upper_first_char(name: str) -> str:
    return name[:1].upper() + name[1:]


def format_class_name(name: str) -> str:
    """Format a schema name as a Python class name.

    Words separated by underscores, hyphens or whitespace are joined in PascalCase.
    E.g. `fuelFigures` becomes `FuelFigures`, `booster_type` becomes `BoosterType`.

    Args:
        name (str): The schema name.

    Returns:
        str: The class name.
    """
    return "".join(to_upper_first_char(part) for part in _WORD_SEPARATORS.split(name) if part)


def format_property_name(name: str, reserved: Collection[str] = ()) -> str:
    """Format a schema name as a Python attribute name.

    CamelCase is converted to snake_case and keywords are sanitized.
    E.g. `serialNumber` becomes `serial_number`, `HTTPCode` becomes `http_code`, `from` becomes `from_`.

    Args:
        name (str): The schema name.
        reserved (Collection[str], optional): Names already taken in the enclosing class. Defaults to ().

    Returns:
        str: The attribute name.
    """
    snake_name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    snake_name = _CAMEL_BOUNDARY.sub(r"\1_\2", snake_name)
    snake_name = _WORD_SEPARATORS.sub("_", snake_name).strip("_").lower()
    return sanitize_name(snake_name, reserved)


def python_type_name(primitive_type: PrimitiveType) -> str:
    """The Python type that holds a single value of an SBE primitive type."""
    return SBE_TYPE_TO_PYTHON[primitive_type]


def python_array_type_name(primitive_type: PrimitiveType) -> str:
    """The Python type that holds a fixed-length array of an SBE primitive type."""
    return SBE_ARRAY_TYPE_TO_PYTHON[primitive_type]


def new_mock_name(type_name: str) -> str:
    """Converts a class name to the name of its mock, e.g. `Car` becomes `CarMock`."""
    return f"{type_name}{MOCK}"


def new_storage_name(property_name: str) -> str:
    """The name of the private attribute that stores a property, e.g. `_serial_number`."""
    return f"_{property_name}"


def new_mutator_name(property_name: str) -> str:
    """The name of the fluent setter of a property, e.g. `set_serial_number`."""
    return f"set_{property_name}"


@dataclass
class TypeHintedVariable:
    """A variable with a type hint and an optional default."""

    name: str
    type_hint: str
    default: str = ""

    @override
    def __str__(self) -> str:
        typed_variable = f"{self.name}: {self.type_hint}"

        if self.default:
            typed_variable = f"{typed_variable} = {self.default}"

        return typed_variable


def join_parameters(parameters: Sequence[TypeHintedVariable | str] | None) -> str:
    """Joins parameters by means of ', '.

    Args:
        parameters (Sequence[TypeHintedVariable | str] | None): The parameters to join.

    Returns:
        str: The joined parameters.
    """
    if parameters:
        return ", ".join(str(p) for p in parameters if p)

    else:
        return ""


def new_function(
    name: str,
    parameters: Sequence[TypeHintedVariable | str] | None = None,
    return_type: str | None = None,
) -> str:
    """Create the heading line of a function definition.

    Args:
        name (str): The function name.
        parameters (Sequence[TypeHintedVariable | str] | None, optional): The function parameters, if any.
            Defaults to None.
        return_type (str | None, optional): The function's return type. Defaults to None.

    Returns:
        str: The function heading, e.g. `def count(self) -> int:`.
    """
    if return_type is None:
        return_type = "None"

    arguments = join_parameters(parameters)
    return f"def {name}({arguments}) -> {return_type}:"


def new_class_declaration(name: str, parameters: Sequence[str] | None = None) -> str:
    """Creates a string for declaring a class.

    For example, for a name of 'CarMock' and a list of parameters that is 'Car', the output
    will be 'class CarMock(Car):'.

    If no parameters are provided, the output is just 'class CarMock:'.

    Args:
        name (str): The class name.
        parameters (Sequence[str] | None, optional):
            A list of parameters that are part of the class declaration. Defaults to None.

    Returns:
        str: The class declaration.
    """
    if parameters:
        return f"class {name}({join_parameters(parameters)}):"
    else:
        return f"class {name}:"
