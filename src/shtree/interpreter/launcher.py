"""Process Launcher.

Runs a non-builtin simple command as a child process. Redirections are
applied to the descriptors handed to the child; the parent closes its own
copies as soon as the child has been started and then waits for it.
"""

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

from ..ast.types import SimpleCommandNode
from .errors import AbnormalTermination, ExecutionNotFound
from .expansion import expand_argv
from .redirections import redirected, write_stream

if TYPE_CHECKING:
    from .types import InterpreterContext

logger = logging.getLogger(__name__)


def _flush_python_streams() -> None:
    # Buffered Python output must reach the descriptors before the child's.
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (AttributeError, ValueError, OSError):
            pass


async def _spawn(ctx: "InterpreterContext", argv: list[str]) -> asyncio.subprocess.Process:
    """Start argv with the context's streams, env and cwd."""
    _flush_python_streams()
    try:
        return await asyncio.create_subprocess_exec(
            *argv,
            stdin=ctx.streams.stdin,
            stdout=ctx.streams.stdout,
            stderr=ctx.streams.stderr,
            cwd=ctx.state.cwd,
            env=ctx.state.env,
        )
    except OSError as e:
        raise ExecutionNotFound.from_os_error(argv[0], e) from e


async def launch(ctx: "InterpreterContext", node: SimpleCommandNode) -> int:
    """Run an external command and return its exit status.

    Raises FileAccessError if a redirection target cannot be opened and
    AbnormalTermination if the child was killed by a signal.
    """
    argv = expand_argv(ctx, node.verb, node.params)
    with redirected(ctx, node):
        try:
            process = await _spawn(ctx, argv)
        except ExecutionNotFound as error:
            # Reported through the command's own (redirected) stderr.
            await write_stream(ctx.streams.stderr, f"{ctx.options.shell_name}: {error.stderr}")
            return error.exit_code

    logger.debug("spawned pid %d: %r", process.pid, argv)
    returncode = await process.wait()
    logger.debug("pid %d exited with %d", process.pid, returncode)
    if returncode < 0:
        raise AbnormalTermination(argv[0], -returncode)
    return returncode
