"""Interpreter - command tree execution engine.

Walks a command tree, dispatching leaves to builtins or the process
launcher and implementing the five binary operators. Delegates to:
- Word expansion (expansion.py)
- Redirections (redirections.py)
- Built-in commands (builtins/)
- External processes (launcher.py)

Parallel and pipe operands run concurrently, each in a child interpreter
over a copy of the state, so their env/cwd changes never reach the parent.
"""

import asyncio
import logging
import os
from typing import Awaitable, Optional

from ..ast.types import BinaryNode, CommandNode, Operator, SimpleCommandNode
from ..types import EXIT_FAILURE, EXIT_SUCCESS, TERMINATE_SHELL, Status
from .builtins import BUILTINS, REDIRECTABLE_BUILTINS, handle_assignment
from .errors import ShellError
from .expansion import expand_word
from .launcher import launch
from .redirections import redirected, write_stream
from .types import InterpreterContext, InterpreterState, ShellOptions, StdStreams

logger = logging.getLogger(__name__)


def _joined(status: Status) -> Status:
    """Status of a concurrent operand as seen at the join point."""
    if status == TERMINATE_SHELL:
        return EXIT_FAILURE
    return status


class Interpreter:
    """Evaluator for command trees."""

    def __init__(
        self,
        state: InterpreterState,
        options: Optional[ShellOptions] = None,
        streams: Optional[StdStreams] = None,
    ):
        """Initialize the interpreter.

        Args:
            state: Mutable state; changed in place by builtins.
            options: Engine configuration.
            streams: Standard descriptors (defaults to 0, 1, 2).
        """
        self._state = state
        self._options = options or ShellOptions()
        self._ctx = InterpreterContext(
            state=state,
            streams=streams or StdStreams(),
            options=self._options,
        )

    @property
    def state(self) -> InterpreterState:
        """Get the interpreter state."""
        return self._state

    async def evaluate(self, node: CommandNode) -> Status:
        """Evaluate a command tree and return its status."""
        if isinstance(node, SimpleCommandNode):
            status = await self._execute_simple_command(node)
            self._state.last_exit_code = status
            return status
        if isinstance(node, BinaryNode):
            return await self._execute_binary(node)
        raise TypeError(f"unknown command node: {node!r}")

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    async def _execute_binary(self, node: BinaryNode) -> Status:
        op = node.op

        if op == Operator.SEQUENTIAL:
            status = await self.evaluate(node.left)
            if status == TERMINATE_SHELL:
                return status
            return await self.evaluate(node.right)

        if op == Operator.CONDITIONAL_ZERO:
            status = await self.evaluate(node.left)
            if status == TERMINATE_SHELL or status != EXIT_SUCCESS:
                return status
            return await self.evaluate(node.right)

        if op == Operator.CONDITIONAL_NONZERO:
            status = await self.evaluate(node.left)
            if status == TERMINATE_SHELL or status == EXIT_SUCCESS:
                return status
            return await self.evaluate(node.right)

        if op == Operator.PARALLEL:
            return await self._execute_parallel(node)

        if op == Operator.PIPE:
            return await self._execute_pipe(node)

        raise ValueError(f"unknown operator: {op!r}")

    def _subshell(self, **stream_overrides: int) -> "Interpreter":
        """Child interpreter over a snapshot of this context."""
        return Interpreter(
            state=self._state.copy(),
            options=self._options,
            streams=self._ctx.streams.copy(**stream_overrides),
        )

    @staticmethod
    async def _join(left: Awaitable[Status], right: Awaitable[Status]) -> tuple[Status, Status]:
        """Run both operands to completion, then surface any exception."""
        results = await asyncio.gather(left, right, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        left_status, right_status = results
        return _joined(left_status), _joined(right_status)

    async def _execute_parallel(self, node: BinaryNode) -> Status:
        left = self._subshell()
        right = self._subshell()
        left_status, right_status = await self._join(
            left.evaluate(node.left),
            right.evaluate(node.right),
        )
        logger.debug("parallel joined: %d, %d", left_status, right_status)
        if left_status == EXIT_SUCCESS and right_status == EXIT_SUCCESS:
            return EXIT_SUCCESS
        return EXIT_FAILURE

    async def _execute_pipe(self, node: BinaryNode) -> Status:
        read_fd, write_fd = os.pipe()
        producer = self._subshell(stdout=write_fd)
        consumer = self._subshell(stdin=read_fd)
        _, status = await self._join(
            self._evaluate_then_close(producer, node.left, write_fd),
            self._evaluate_then_close(consumer, node.right, read_fd),
        )
        # The consumer's status is authoritative; no pipefail.
        logger.debug("pipe joined: %d", status)
        return status

    @staticmethod
    async def _evaluate_then_close(interpreter: "Interpreter", node: CommandNode, fd: int) -> Status:
        try:
            return await interpreter.evaluate(node)
        finally:
            os.close(fd)

    # -------------------------------------------------------------------------
    # Leaves
    # -------------------------------------------------------------------------

    async def _execute_simple_command(self, node: SimpleCommandNode) -> Status:
        """Run one leaf; failures become a status plus a diagnostic."""
        try:
            return await self._dispatch(node)
        except ShellError as error:
            await self._report(error.stderr)
            return error.exit_code
        except OSError as e:
            # Writing builtin output to a closed pipe and the like.
            logger.debug("I/O error in %r: %s", node.verb, e)
            return EXIT_FAILURE

    async def _dispatch(self, node: SimpleCommandNode) -> Status:
        verb = expand_word(self._ctx, node.verb)
        handler = BUILTINS.get(verb)
        if handler is not None:
            if verb not in REDIRECTABLE_BUILTINS:
                return await handler(self._ctx, node)
            with redirected(self._ctx, node):
                try:
                    return await handler(self._ctx, node)
                except ShellError as error:
                    # Reported through the builtin's own (redirected) stderr.
                    await self._report(error.stderr)
                    return error.exit_code

        split = node.verb.assignment_split()
        if split is not None:
            name, value_parts = split
            return await handle_assignment(self._ctx, name, value_parts)

        return await launch(self._ctx, node)

    async def _report(self, text: str) -> None:
        if not text:
            return
        try:
            await write_stream(self._ctx.streams.stderr, f"{self._options.shell_name}: {text}")
        except OSError as e:
            logger.debug("could not write diagnostic: %s", e)
