"""Generate mock classes for SBE codecs from the flat token stream of an `Ir`.

Every generated mock subclasses the real codec class of the same name. Properties get private
storage, an accessor and a fluent setter; repeating groups become nested mock classes that iterate
over a fixed list of fixture items.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from sbe_mock_generator import helper
from sbe_mock_generator.ir import MESSAGE_HEADER_TYPE, Ir, Signal, Token
from sbe_mock_generator.output import OutputManager
from sbe_mock_generator.scope import NoParentError, Scope
from sbe_mock_generator.traversal import body, collect_groups, collect_root_fields, skip_to_end
from sbe_mock_generator.writer_dto import GroupGenerationContext

logger = logging.getLogger(__name__)

FILE_DOCSTRING = '"""Generated SBE (Simple Binary Encoding) message codec mock."""'

# Leaf signals that refer to a named type instead of a primitive encoding
_NAMED_TYPE_SIGNALS = {
    Signal.BEGIN_COMPOSITE: Signal.END_COMPOSITE,
    Signal.BEGIN_ENUM: Signal.END_ENUM,
    Signal.BEGIN_SET: Signal.END_SET,
}

VALUE_NAME = "value"

# Public members of the fixture cursor of a group mock
CURSOR_MEMBERS = frozenset({"count", "has_next", "next", "remove"})


class Writer:
    """A class that builds the source of one generated mock module."""

    def __init__(self, namespace: str):
        """Initialize the writer.

        Args:
            namespace (str): The package of the real codec classes, imported by the mock module.
        """
        self.scope = Scope(name="")
        self._namespace = namespace

    @property
    def imports(self) -> list[str]:
        """The fixed import block of every mock module."""
        return [
            "from __future__ import annotations",
            "",
            "from collections.abc import Iterator",
            "from typing import Self",
            "",
            f"from {self._namespace} import *  # noqa: F403",
        ]

    def new_scope(self, name: str, scope_heading: str):
        """Add a heading line to the current scope and continue in a new scope one level deeper.

        Args:
            name (str): The name of the new scope.
            scope_heading (str): The line of code that starts this new scope.
        """
        self._add_member(scope_heading)
        self.scope = Scope(name=name, parent=self.scope)

    def return_from_scope(self):
        """Return from the current scope, moving its lines to the parent scope."""
        if self.scope.parent is None:
            raise NoParentError("The root scope cannot be returned from.")

        self.scope.close()
        self.scope = self.scope.parent

    def _add_member(self, *lines: str):
        """Add the lines of a class member, separated from a previous member by a blank line."""
        if self.scope.lines:
            self.scope.add("")
        self.scope.add(*lines)

    def _property_name(self, name: str) -> str:
        """Format a schema name as a property name that does not replace a member of the current class."""
        return helper.format_property_name(name, self.scope.reserved_names)

    def open_mock_class(self, type_name: str, base_type_name: str | None = None) -> str:
        """Open the scope of a mock class.

        Args:
            type_name (str): The class name of the real type, e.g. `Car`.
            base_type_name (str | None, optional): Qualified name of the real type, if it differs from
                `type_name`. Defaults to None.

        Returns:
            str: The mock class name.
        """
        mock_name = helper.new_mock_name(type_name)
        declaration = helper.new_class_declaration(mock_name, [base_type_name or type_name])
        self.new_scope(mock_name, declaration)
        return mock_name

    def gen_property(self, property_name: str, type_name: str, default: str = "None", optional: bool = True):
        """Add the storage, accessor and fluent setter of one property.

        Args:
            property_name (str): The formatted property name.
            type_name (str): The type of the stored value.
            default (str, optional): The initial stored value. Defaults to "None".
            optional (bool, optional): Whether the stored value may be `None`. Defaults to True.
        """
        storage_name = helper.new_storage_name(property_name)
        stored_type = f"{type_name} | None" if optional else type_name
        value = helper.TypeHintedVariable(VALUE_NAME, type_name)

        self._add_member(str(helper.TypeHintedVariable(storage_name, stored_type, default)))
        self._add_member(
            helper.new_function(property_name, ["self"], stored_type),
            f"    return self.{storage_name}",
        )
        self._add_member(
            helper.new_function(helper.new_mutator_name(property_name), ["self", value], "Self"),
            f"    self.{storage_name} = {VALUE_NAME}",
            "    return self",
        )

    def gen_primitive_property(self, property_name: str, token: Token):
        """Add a property for a primitive encoding token.

        Constants have no per-instance state, so nothing is added for them. Tokens with an array
        length of zero encode no value and are skipped as well.

        Args:
            property_name (str): The formatted property name.
            token (Token): The encoding token.
        """
        if token.is_constant or token.encoding is None:
            return

        array_length = token.array_length
        primitive_type = token.encoding.primitive_type

        if array_length == 1:
            self.gen_property(property_name, helper.python_type_name(primitive_type))
        elif array_length > 1:
            self.gen_property(property_name, helper.python_array_type_name(primitive_type))

    def gen_fields(self, tokens: Sequence[Token]):
        """Add a property for every field in a list of root field tokens.

        Args:
            tokens (Sequence[Token]): Root field tokens, as collected by `collect_root_fields`.
        """
        for i, field_token in enumerate(tokens):
            if field_token.signal is not Signal.BEGIN_FIELD or i + 1 >= len(tokens):
                continue

            encoding_token = tokens[i + 1]
            property_name = self._property_name(field_token.name)

            if encoding_token.signal is Signal.ENCODING:
                if not field_token.is_constant:
                    self.gen_primitive_property(property_name, encoding_token)

            elif encoding_token.signal in _NAMED_TYPE_SIGNALS:
                if not (field_token.is_constant or encoding_token.is_constant):
                    self.gen_property(property_name, helper.format_class_name(encoding_token.name))

    def gen_primitive_property_encodings(self, tokens: Sequence[Token]):
        """Add a property for every member of a composite body.

        Nested composites, enums and sets become properties of their own class; their members are
        not expanded.

        Args:
            tokens (Sequence[Token]): The body of a composite.
        """
        index = 0

        while index < len(tokens):
            token = tokens[index]
            property_name = self._property_name(token.name)

            if token.signal is Signal.ENCODING:
                self.gen_primitive_property(property_name, token)

            elif token.signal in _NAMED_TYPE_SIGNALS:
                if not token.is_constant:
                    self.gen_property(property_name, helper.format_class_name(token.name))
                index = skip_to_end(tokens, index, token.signal, _NAMED_TYPE_SIGNALS[token.signal])

            index += 1

    def gen_choices(self, tokens: Sequence[Token]):
        """Add an independent boolean flag for every choice of a set.

        Args:
            tokens (Sequence[Token]): The body of a set.
        """
        for token in tokens:
            if token.signal is Signal.CHOICE:
                self.gen_property(self._property_name(token.name), "bool", default="False", optional=False)

    def gen_group_class_header(self, context: GroupGenerationContext):
        """Open the mock class of a group and add its fixture cursor.

        The cursor walks a fixed list of items given to the constructor. `count()` is the size of that
        list regardless of the cursor position, and items cannot be removed. Properties added to the class
        later get a trailing underscore where their name would replace a cursor member, e.g. `count_`.

        Args:
            context (GroupGenerationContext): The names of the group.
        """
        base_type = context.base_type_name
        self.open_mock_class(context.class_name, base_type)
        self.scope.reserved_names = CURSOR_MEMBERS

        self._add_member(
            helper.new_function("__init__", ["self", f"*items: {base_type}"]),
            "    self.__items = items",
            "    self.__index = 0",
        )
        self._add_member(
            helper.new_function("count", ["self"], "int"),
            "    return len(self.__items)",
        )
        self._add_member(
            helper.new_function("has_next", ["self"], "bool"),
            "    return self.__index < len(self.__items)",
        )
        self._add_member(
            helper.new_function("next", ["self"], base_type),
            "    if not self.has_next():",
            "        raise StopIteration",
            "    item = self.__items[self.__index]",
            "    self.__index += 1",
            "    return item",
        )
        self._add_member(
            helper.new_function("remove", ["self"]),
            f'    raise TypeError("{context.mock_name} fixtures cannot be removed")',
        )
        self._add_member(
            helper.new_function("__iter__", ["self"], f"Iterator[{base_type}]"),
            "    return self",
        )
        self._add_member(
            helper.new_function("__next__", ["self"], base_type),
            "    return self.next()",
        )

    def gen_groups(self, tokens: Sequence[Token], index: int, parent_type_name: str) -> int:
        """Add a property and a nested mock class for every group at one nesting level.

        The stream places the groups of a group right after its root fields, so after consuming the
        root fields a BEGIN_GROUP token means one more level of nesting. A recursive call stops at the
        END_GROUP token that closes its enclosing group.

        Args:
            tokens (Sequence[Token]): The tokens to scan.
            index (int): Where to start scanning.
            parent_type_name (str): Qualified name of the real class that declares the groups.

        Returns:
            int: The index of the END_GROUP token that closes the enclosing group, or an index at or
                beyond the end of `tokens`.
        """
        size = len(tokens)

        while index < size:
            token = tokens[index]
            if token.signal is Signal.END_GROUP:
                return index

            if token.signal is not Signal.BEGIN_GROUP:
                index += 1
                continue

            context = GroupGenerationContext.create(token.name, parent_type_name)
            property_name = helper.sanitize_name(context.property_name, self.scope.reserved_names)
            self.gen_property(property_name, context.base_type_name)
            self.gen_group_class_header(context)

            root_fields, index = collect_root_fields(tokens, index + 1)
            self.gen_fields(root_fields)

            if index < size and tokens[index].signal is Signal.BEGIN_GROUP:
                index = self.gen_groups(tokens, index, context.base_type_name)

            # variable-length data of the group is not mocked
            while index < size and tokens[index].signal is not Signal.END_GROUP:
                index += 1
            index = min(index + 1, size)

            self.return_from_scope()

        return index

    def dumps(self) -> str:
        """Generates the string output of the mock module.

        Returns:
            str: The output string.
        """
        assert self.scope.is_root, "A mock class scope is still open."

        out: list[str] = []
        out.append(FILE_DOCSTRING)
        out.append("")
        out.extend(self.imports)
        out.append("")
        out.append("")
        out.extend(self.scope.lines)

        return "\n".join(out) + "\n"


class MockGenerator:
    """Generates one mock module per header, set, composite and message of an `Ir`."""

    def __init__(
        self,
        ir: Ir,
        output_manager: OutputManager,
        formatter: Callable[[str], str] | None = None,
    ):
        """Initialize the generator.

        Args:
            ir (Ir): The schema catalog.
            output_manager (OutputManager): Where generated modules are written.
            formatter (Callable[[str], str] | None, optional): Applied to every module before it is
                written. Defaults to None.

        Raises:
            ValueError: If `ir` or `output_manager` is None.
        """
        if ir is None:
            raise ValueError("ir must not be None")
        if output_manager is None:
            raise ValueError("output_manager must not be None")

        self._ir = ir
        self._output_manager = output_manager
        self._formatter = formatter
        self.written: list[str] = []

    def _new_writer(self) -> Writer:
        return Writer(self._ir.applicable_namespace)

    def _write(self, name: str, writer: Writer):
        output = writer.dumps()
        if self._formatter is not None:
            output = self._formatter(output)

        with self._output_manager.create_output(name) as out:
            out.write(output)

        self.written.append(name)
        logger.info("Generated mock '%s'.", name)

    def generate_message_header_stub(self):
        """Generate the mock of the message header, which is always present."""
        writer = self._new_writer()
        mock_name = writer.open_mock_class(MESSAGE_HEADER_TYPE)
        writer.gen_primitive_property_encodings(body(self._ir.header_structure))
        writer.return_from_scope()

        self._write(mock_name, writer)

    def generate_type_stubs(self):
        """Generate mocks for all sets and composites. Enums have no mutable state and get no mock."""
        for tokens in self._ir.types:
            signal = tokens[0].signal

            if signal is Signal.BEGIN_SET:
                self.generate_bit_set(tokens)
            elif signal is Signal.BEGIN_COMPOSITE:
                self.generate_composite(tokens)
            elif signal is Signal.BEGIN_ENUM:
                logger.debug("Skipping enum '%s'.", tokens[0].name)

    def generate_bit_set(self, tokens: Sequence[Token]):
        writer = self._new_writer()
        mock_name = writer.open_mock_class(helper.format_class_name(tokens[0].name))
        writer.gen_choices(body(tokens))
        writer.return_from_scope()

        self._write(mock_name, writer)

    def generate_composite(self, tokens: Sequence[Token]):
        writer = self._new_writer()
        mock_name = writer.open_mock_class(helper.format_class_name(tokens[0].name))
        writer.gen_primitive_property_encodings(body(tokens))
        writer.return_from_scope()

        self._write(mock_name, writer)

    def generate_message(self, tokens: Sequence[Token]):
        """Generate the mock of one message: its root fields first, then its groups.

        Args:
            tokens (Sequence[Token]): The token range of the message.
        """
        class_name = helper.format_class_name(tokens[0].name)
        message_body = body(tokens)

        writer = self._new_writer()
        mock_name = writer.open_mock_class(class_name)

        root_fields, _ = collect_root_fields(message_body)
        writer.gen_fields(root_fields)

        groups, _ = collect_groups(message_body)
        writer.gen_groups(groups, 0, class_name)

        writer.return_from_scope()

        self._write(mock_name, writer)

    def generate_message_stubs(self):
        for tokens in self._ir.messages:
            self.generate_message(tokens)

    def generate(self):
        """Generate mocks for the header, all types and all messages of the `Ir`."""
        self.generate_message_header_stub()
        self.generate_type_stubs()
        self.generate_message_stubs()

        logger.info("Generated %d mock module(s) for '%s'.", len(self.written), self._ir.applicable_namespace)
