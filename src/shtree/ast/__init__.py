"""AST module for shtree."""

from .types import (
    AST,
    BinaryNode,
    CommandNode,
    EnvPart,
    LiteralPart,
    Operator,
    SimpleCommandNode,
    WordNode,
    WordPart,
)

__all__ = [
    "AST",
    "BinaryNode",
    "CommandNode",
    "EnvPart",
    "LiteralPart",
    "Operator",
    "SimpleCommandNode",
    "WordNode",
    "WordPart",
]
