"""Splitting of the candidates into atomic units and their reassembly.

Candidates are split into lines, tokens, characters, or hierarchical nodes. Nodes are
top-level blocks of the program: a block starts at a line and spans until the brace depth
returns to zero; indented lines directly following a block are considered its continuation.
Lines and nodes are reassembled with the new line, tokens and characters with no separator.
"""

from __future__ import annotations

# Standard Imports
from typing import Callable

# Third-Party Imports

# Culprit Imports
from culprit.utils.exceptions import UnsupportedModuleException
from culprit.utils.structs.dd_structs import UnitKind

TOKEN_DELIMITERS: str = "(){}[];,"


def tokenize(text: str) -> list[str]:
    """Splits the text into words, whitespace and punctuation tokens

    Each whitespace character is turned into a single space token, each of the
    :data:`TOKEN_DELIMITERS` is a standalone token.

    :param text: split text
    :return: list of tokens
    """
    tokens: list[str] = []
    current: list[str] = []
    for char in text:
        if char.isspace() or char in TOKEN_DELIMITERS:
            if current:
                tokens.append("".join(current))
                current = []
            tokens.append(" " if char.isspace() else char)
        else:
            current.append(char)
    if current:
        tokens.append("".join(current))
    return tokens


def split_nodes(text: str) -> list[str]:
    """Splits the text into the top-level blocks

    :param text: split text
    :return: list of blocks, each consisting of one or more lines
    """
    nodes: list[list[str]] = []
    depth = 0
    for line in text.splitlines():
        is_continuation = depth > 0 or (line[:1].isspace() and line.strip() != "")
        if is_continuation and nodes:
            nodes[-1].append(line)
        else:
            nodes.append([line])
        depth = max(depth + line.count("{") - line.count("}"), 0)
    return ["\n".join(node) for node in nodes]


SPLITTERS: dict[UnitKind, Callable[[str], list[str]]] = {
    UnitKind.LINE: str.splitlines,
    UnitKind.TOKEN: tokenize,
    UnitKind.CHARACTER: list,
    UnitKind.NODE: split_nodes,
}


def to_unit_kind(kind: str | UnitKind) -> UnitKind:
    """Converts the name of the unit kind to the enum

    :param kind: name of the kind (line, token, character, node)
    :return: unit kind
    :raises UnsupportedModuleException: when the kind is not supported
    """
    try:
        return UnitKind(kind)
    except ValueError:
        raise UnsupportedModuleException(str(kind))


def split(text: str, kind: UnitKind) -> list[str]:
    """Splits the text into the units of given kind

    :param text: split text
    :param kind: kind of the units
    :return: list of units
    """
    return SPLITTERS[kind](text)


def join(units: list[str], kind: UnitKind) -> str:
    """Reassembles the units into the text

    :param units: list of units
    :param kind: kind of the units
    :return: reassembled text
    """
    return kind.separator.join(units)


def measure(text: str, kind: UnitKind) -> int:
    """
    :param text: measured text
    :param kind: kind of the units
    :return: number of units of given kind in the text
    """
    return len(split(text, kind))


def partition(units: list[str], chunk_count: int) -> list[list[str]]:
    """Partitions the units into near-equal consecutive chunks

    The last chunk absorbs the remainder of the division.

    :param units: partitioned units, at least chunk_count of them
    :param chunk_count: number of chunks
    :return: list of chunks
    """
    size = len(units) // chunk_count
    chunks = [units[i * size : (i + 1) * size] for i in range(chunk_count - 1)]
    chunks.append(units[(chunk_count - 1) * size :])
    return chunks
