"""Indentation scopes of generated Python source."""

from __future__ import annotations

INDENT = "    "


class NoParentError(Exception):
    """Raised when a scope operation needs a parent scope that does not exist."""

    pass


class Scope:
    """A block of generated lines, e.g. a module or the body of a class.

    Lines are stored indented to the depth of the scope, so that a finished child scope can be
    appended to its parent as is.
    """

    def __init__(self, name: str, parent: Scope | None = None):
        self.name = name
        self.parent = parent
        self.lines: list[str] = []
        # member names that properties added to this scope must not take
        self.reserved_names: frozenset[str] = frozenset()

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def depth(self) -> int:
        """The indentation level of lines in this scope. The root scope is not indented."""
        if self.parent is None:
            return 0
        return self.parent.depth + 1

    @property
    def trace(self) -> list[Scope]:
        """All scopes from the root down to this one."""
        if self.parent is None:
            return [self]
        return self.parent.trace + [self]

    @property
    def indent(self) -> str:
        return INDENT * self.depth

    def add(self, *lines: str):
        """Add lines to this scope, indenting all lines that are not blank."""
        for line in lines:
            self.lines.append(f"{self.indent}{line}" if line else "")

    def close(self):
        """Move the lines of this scope into its parent.

        An empty body is completed with `pass` to keep the enclosing class valid.

        Raises:
            NoParentError: If this is the root scope.
        """
        if self.parent is None:
            raise NoParentError(f"The scope '{self.name}' has no parent to return to.")

        if any(line for line in self.lines):
            self.parent.lines.extend(self.lines)
        else:
            self.parent.lines.append(f"{self.indent}pass")
