"""Exit/quit builtin."""

from typing import TYPE_CHECKING

from ...types import TERMINATE_SHELL

if TYPE_CHECKING:
    from ...ast.types import SimpleCommandNode
    from ..types import InterpreterContext


async def handle_exit(ctx: "InterpreterContext", node: "SimpleCommandNode") -> int:
    """Ask the outer loop to stop. Arguments are ignored."""
    return TERMINATE_SHELL
