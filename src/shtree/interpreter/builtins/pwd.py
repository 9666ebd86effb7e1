"""Pwd builtin implementation.

Usage: pwd

Print the current working directory. Fails if the directory no longer
exists.
"""

import os
from typing import TYPE_CHECKING

from ...types import EXIT_FAILURE, EXIT_SUCCESS
from ..errors import ShellError
from ..redirections import write_stream

if TYPE_CHECKING:
    from ...ast.types import SimpleCommandNode
    from ..types import InterpreterContext


async def handle_pwd(ctx: "InterpreterContext", node: "SimpleCommandNode") -> int:
    """Execute the pwd builtin."""
    cwd = ctx.state.cwd
    if not os.path.isdir(cwd):
        raise ShellError(
            "pwd: error retrieving current directory: No such file or directory",
            EXIT_FAILURE,
        )
    await write_stream(ctx.streams.stdout, cwd + "\n")
    return EXIT_SUCCESS
