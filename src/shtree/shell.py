"""Main Shell class - the primary API for shtree.

Example usage:
    from shtree import AST, Shell, TERMINATE_SHELL

    shell = Shell()

    # Synchronous usage (for a read-eval-print loop)
    status = shell.run(AST.simple("echo", "hello"))

    # Async usage
    status = await shell.evaluate(
        AST.conditional_zero(
            AST.simple("cd", "/tmp"),
            AST.simple("pwd", stdout="where.txt"),
        )
    )

    # Captured output
    result = await shell.capture(AST.simple("echo", "hi"))
    print(result.stdout)  # "hi\\n"
"""

import asyncio
import logging
import os
import tempfile
from typing import Optional

import nest_asyncio  # type: ignore[import-untyped]

from .ast.types import CommandNode
from .interpreter import Interpreter, InterpreterState, ShellOptions, StdStreams
from .types import ExecResult, Status

logger = logging.getLogger(__name__)


class Shell:
    """Command tree evaluator bound to a persistent environment and cwd.

    State persists across calls, so a loop that evaluates one tree per
    input line sees the effects of earlier cd and NAME=VALUE commands.
    """

    def __init__(
        self,
        *,
        env: Optional[dict[str, str]] = None,
        cwd: Optional[str] = None,
        inherit_env: bool = True,
        options: Optional[ShellOptions] = None,
        stdin: int = 0,
        stdout: int = 1,
        stderr: int = 2,
    ):
        """Initialize the shell.

        Args:
            env: Environment variables to add on top of the inherited ones.
            cwd: Initial working directory (defaults to the process cwd).
            inherit_env: Start from os.environ.
            options: Engine configuration.
            stdin: Descriptor used as standard input.
            stdout: Descriptor used as standard output.
            stderr: Descriptor used as standard error.
        """
        self._options = options or ShellOptions()
        self._streams = StdStreams(stdin=stdin, stdout=stdout, stderr=stderr)
        self._initial_state = InterpreterState.from_process(
            env=env, cwd=cwd, inherit_env=inherit_env
        )
        self._state = self._initial_state.copy()

    @property
    def cwd(self) -> str:
        """Get the current working directory."""
        return self._state.cwd

    @property
    def env(self) -> dict[str, str]:
        """Get the environment variables."""
        return self._state.env

    @property
    def last_exit_code(self) -> Status:
        return self._state.last_exit_code

    async def evaluate(self, tree: CommandNode, *, streams: Optional[StdStreams] = None) -> Status:
        """Evaluate a command tree.

        Returns:
            The tree's status, or TERMINATE_SHELL if exit/quit ran.
        """
        interpreter = Interpreter(
            state=self._state,
            options=self._options,
            streams=streams or self._streams,
        )
        status = await interpreter.evaluate(tree)
        logger.debug("evaluated tree with status %d", status)
        return status

    def run(self, tree: CommandNode) -> Status:
        """Evaluate a command tree synchronously.

        Works in any context, including Jupyter notebooks and async
        frameworks.
        """
        try:
            asyncio.get_running_loop()
            # Already inside an event loop; allow nesting
            nest_asyncio.apply()
        except RuntimeError:
            pass
        return asyncio.run(self.evaluate(tree))

    async def capture(self, tree: CommandNode) -> ExecResult:
        """Evaluate a tree with stdout/stderr captured to temporary files."""
        with tempfile.TemporaryFile() as out, tempfile.TemporaryFile() as err:
            streams = self._streams.copy(stdout=out.fileno(), stderr=err.fileno())
            status = await self.evaluate(tree, streams=streams)
            return ExecResult(
                stdout=_read_back(out.fileno()),
                stderr=_read_back(err.fileno()),
                exit_code=status,
            )

    def run_captured(self, tree: CommandNode) -> ExecResult:
        """Synchronous form of capture()."""
        try:
            asyncio.get_running_loop()
            nest_asyncio.apply()
        except RuntimeError:
            pass
        return asyncio.run(self.capture(tree))

    def reset(self) -> None:
        """Reset env and cwd to their initial values."""
        self._state = self._initial_state.copy()


def _read_back(fd: int) -> str:
    os.lseek(fd, 0, os.SEEK_SET)
    chunks: list[bytes] = []
    while True:
        chunk = os.read(fd, 65536)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks).decode(errors="replace")
