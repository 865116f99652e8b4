"""Scanning of flat token ranges into root fields, groups and variable-length data.

Both scans are single forward passes. They return the index at which they stopped, which is
`len(tokens)` when no stop marker was found; callers treat such an index as "nothing follows".
"""

from __future__ import annotations

from collections.abc import Sequence

from sbe_mock_generator.ir import Signal, Token

_ROOT_FIELD_TERMINATORS = frozenset({Signal.BEGIN_GROUP, Signal.END_GROUP, Signal.BEGIN_VAR_DATA})


def body(tokens: Sequence[Token]) -> list[Token]:
    """The tokens strictly between the BEGIN and END markers of a definition."""
    return list(tokens[1:-1])


def collect_root_fields(tokens: Sequence[Token], index: int = 0) -> tuple[list[Token], int]:
    """Collect the fields that precede any group or variable-length data.

    Args:
        tokens (Sequence[Token]): The tokens to scan.
        index (int, optional): Where to start scanning. Defaults to 0.

    Returns:
        tuple[list[Token], int]: The root field tokens and the index of the first token that is not
            part of them.
    """
    root_fields: list[Token] = []

    for index in range(index, len(tokens)):
        token = tokens[index]
        if token.signal in _ROOT_FIELD_TERMINATORS:
            return root_fields, index

        root_fields.append(token)

    return root_fields, len(tokens)


def collect_groups(tokens: Sequence[Token], index: int = 0) -> tuple[list[Token], int]:
    """Collect the tokens that precede the variable-length data of a definition.

    Groups are not filtered out: the result still holds the root fields, which the caller skips
    while looking for BEGIN_GROUP markers. Variable-length data declared inside a group does not stop
    the scan.

    Args:
        tokens (Sequence[Token]): The tokens to scan.
        index (int, optional): Where to start scanning. Defaults to 0.

    Returns:
        tuple[list[Token], int]: The collected tokens and the index of the first BEGIN_VAR_DATA token
            outside of any group.
    """
    groups: list[Token] = []
    depth = 0

    for index in range(index, len(tokens)):
        token = tokens[index]
        if token.signal is Signal.BEGIN_VAR_DATA and depth == 0:
            return groups, index

        if token.signal is Signal.BEGIN_GROUP:
            depth += 1
        elif token.signal is Signal.END_GROUP:
            depth -= 1

        groups.append(token)

    return groups, len(tokens)


def skip_to_end(tokens: Sequence[Token], index: int, begin: Signal, end: Signal) -> int:
    """Find the END token that closes the BEGIN token at `index`.

    Returns:
        int: The index of the matching END token, or `len(tokens)` when there is none.
    """
    depth = 0

    for index in range(index, len(tokens)):
        signal = tokens[index].signal
        if signal is begin:
            depth += 1
        elif signal is end:
            depth -= 1
            if depth == 0:
                return index

    return len(tokens)
