"""Destinations for generated mock modules, one named output unit per generated type."""

from __future__ import annotations

import io
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol, TextIO

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

logger = logging.getLogger(__name__)

PY_SUFFIX = ".py"


class OutputManager(Protocol):
    """Opens one writable output unit per generated type."""

    def create_output(self, name: str) -> AbstractContextManager[TextIO]: ...


class DirectoryOutputManager:
    """Writes every output unit to `<directory>/<name>.py`."""

    def __init__(self, directory: str | os.PathLike[str]):
        self.directory = os.fspath(directory)

    @contextmanager
    def create_output(self, name: str) -> Iterator[TextIO]:
        """Open the file for an output unit. The file is closed on every exit path.

        Args:
            name (str): The name of the unit, e.g. `CarMock`.

        Yields:
            TextIO: The open file.
        """
        os.makedirs(self.directory, exist_ok=True)
        path = os.path.join(self.directory, name + PY_SUFFIX)

        with open(path, "w", encoding="utf8") as output_file:
            yield output_file

        logger.debug("Wrote '%s'.", path)

    @override
    def __repr__(self) -> str:
        return f"DirectoryOutputManager({self.directory!r})"


class StringOutputManager:
    """Keeps every output unit in memory, keyed by unit name."""

    def __init__(self):
        self.outputs: dict[str, str] = {}

    @contextmanager
    def create_output(self, name: str) -> Iterator[TextIO]:
        buffer = io.StringIO()
        try:
            yield buffer
            self.outputs[name] = buffer.getvalue()
        finally:
            buffer.close()
