"""Word Expansion.

A word is a sequence of literal and environment-reference fragments. It
expands to exactly one string: fragments are concatenated in order and an
undefined variable contributes nothing. There is no splitting or globbing.
"""

from typing import TYPE_CHECKING, Iterable

from ..ast.types import EnvPart, LiteralPart, WordNode, WordPart

if TYPE_CHECKING:
    from .types import InterpreterContext


def expand_parts(ctx: "InterpreterContext", parts: Iterable[WordPart]) -> str:
    """Expand a sequence of fragments into one string."""
    env = ctx.state.env
    pieces: list[str] = []
    for part in parts:
        if isinstance(part, LiteralPart):
            pieces.append(part.value)
        elif isinstance(part, EnvPart):
            pieces.append(env.get(part.name, ""))
        else:
            raise TypeError(f"unknown word part: {part!r}")
    return "".join(pieces)


def expand_word(ctx: "InterpreterContext", word: WordNode) -> str:
    """Expand a word into one string."""
    return expand_parts(ctx, word.parts)


def expand_argv(ctx: "InterpreterContext", verb: WordNode, params: Iterable[WordNode]) -> list[str]:
    """Build an argument vector; empty expansions stay as empty arguments."""
    return [expand_word(ctx, verb)] + [expand_word(ctx, p) for p in params]
