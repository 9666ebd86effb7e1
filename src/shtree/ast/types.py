"""AST node types for shtree.

The tree is produced by an external parser, evaluated once and discarded.
All nodes are frozen; the interpreter never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


# =============================================================================
# Words
# =============================================================================


@dataclass(frozen=True)
class LiteralPart:
    """Literal text."""

    value: str


@dataclass(frozen=True)
class EnvPart:
    """Environment variable reference ($NAME)."""

    name: str


WordPart = Union[LiteralPart, EnvPart]


@dataclass(frozen=True)
class WordNode:
    """A word: ordered fragments concatenated on expansion."""

    parts: tuple[WordPart, ...]

    def env_reference(self) -> Optional[str]:
        """Variable name when the word is a single $NAME fragment, else None."""
        if len(self.parts) == 1:
            part = self.parts[0]
            if isinstance(part, EnvPart):
                return part.name
        return None

    def assignment_split(self) -> Optional[tuple[str, tuple[WordPart, ...]]]:
        """Split a NAME=VALUE word into (name, value parts).

        A word is an assignment when its second fragment is literal text
        starting with '='. Text after that '=' becomes a literal prefix
        of the value. Returns None for ordinary words.
        """
        if len(self.parts) < 2:
            return None
        head, marker = self.parts[0], self.parts[1]
        if not isinstance(head, LiteralPart):
            return None
        if not isinstance(marker, LiteralPart) or not marker.value.startswith("="):
            return None
        rest = marker.value[1:]
        value_parts: tuple[WordPart, ...] = self.parts[2:]
        if rest:
            value_parts = (LiteralPart(rest),) + value_parts
        return head.value, value_parts


# =============================================================================
# Commands
# =============================================================================


@dataclass(frozen=True)
class SimpleCommandNode:
    """A single command invocation: verb, params and redirections."""

    verb: WordNode
    params: tuple[WordNode, ...] = ()
    stdin: Optional[WordNode] = None
    stdout: Optional[WordNode] = None
    stderr: Optional[WordNode] = None
    append: bool = False
    """Open stdout/stderr targets with O_APPEND instead of O_TRUNC."""


class Operator(Enum):
    """Binary operators joining two subtrees."""

    SEQUENTIAL = ";"
    CONDITIONAL_ZERO = "&&"
    CONDITIONAL_NONZERO = "||"
    PARALLEL = "&"
    PIPE = "|"


@dataclass(frozen=True)
class BinaryNode:
    """Two subtrees joined by an operator."""

    op: Operator
    left: "CommandNode"
    right: "CommandNode"


CommandNode = Union[SimpleCommandNode, BinaryNode]


# =============================================================================
# Factory
# =============================================================================


WordLike = Union[str, WordPart, WordNode]


def _as_word(value: WordLike) -> WordNode:
    if isinstance(value, WordNode):
        return value
    if isinstance(value, str):
        return WordNode((LiteralPart(value),))
    return WordNode((value,))


def _as_optional_word(value: Optional[WordLike]) -> Optional[WordNode]:
    if value is None:
        return None
    return _as_word(value)


class AST:
    """Factory helpers for building command trees.

    Example:
        tree = AST.pipe(
            AST.simple("printf", "abc"),
            AST.simple("cat", stdout="out.txt"),
        )
    """

    @staticmethod
    def word(*parts: Union[str, WordPart]) -> WordNode:
        """Create a word; plain strings become literal fragments."""
        return WordNode(tuple(
            LiteralPart(p) if isinstance(p, str) else p for p in parts
        ))

    @staticmethod
    def var(name: str) -> EnvPart:
        """Create an environment reference fragment."""
        return EnvPart(name)

    @staticmethod
    def simple(
        verb: WordLike,
        *params: WordLike,
        stdin: Optional[WordLike] = None,
        stdout: Optional[WordLike] = None,
        stderr: Optional[WordLike] = None,
        append: bool = False,
    ) -> SimpleCommandNode:
        """Create a simple command node."""
        return SimpleCommandNode(
            verb=_as_word(verb),
            params=tuple(_as_word(p) for p in params),
            stdin=_as_optional_word(stdin),
            stdout=_as_optional_word(stdout),
            stderr=_as_optional_word(stderr),
            append=append,
        )

    @staticmethod
    def assignment(name: str, *value: Union[str, WordPart]) -> SimpleCommandNode:
        """Create a NAME=VALUE command."""
        parts: list[WordPart] = [LiteralPart(name), LiteralPart("=")]
        parts.extend(LiteralPart(p) if isinstance(p, str) else p for p in value)
        return SimpleCommandNode(verb=WordNode(tuple(parts)))

    @staticmethod
    def sequential(left: CommandNode, right: CommandNode) -> BinaryNode:
        return BinaryNode(Operator.SEQUENTIAL, left, right)

    @staticmethod
    def conditional_zero(left: CommandNode, right: CommandNode) -> BinaryNode:
        return BinaryNode(Operator.CONDITIONAL_ZERO, left, right)

    @staticmethod
    def conditional_nonzero(left: CommandNode, right: CommandNode) -> BinaryNode:
        return BinaryNode(Operator.CONDITIONAL_NONZERO, left, right)

    @staticmethod
    def parallel(left: CommandNode, right: CommandNode) -> BinaryNode:
        return BinaryNode(Operator.PARALLEL, left, right)

    @staticmethod
    def pipe(left: CommandNode, right: CommandNode) -> BinaryNode:
        return BinaryNode(Operator.PIPE, left, right)
