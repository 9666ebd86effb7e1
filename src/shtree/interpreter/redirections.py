"""Redirection handling.

Opens the in/out/err targets of a simple command and swaps them into the
context's standard streams for the duration of a ``with`` block. The
previous streams are restored and every descriptor opened here is closed
on exit, whether the block succeeds or raises.

When both stdout and stderr are redirected in truncate mode, each target
is truncated once up front and then opened with O_APPEND, so the two
streams interleave in a shared file instead of clobbering each other.
"""

import asyncio
import logging
import os
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

from ..ast.types import SimpleCommandNode, WordNode
from .errors import FileAccessError
from .expansion import expand_word

if TYPE_CHECKING:
    from .types import InterpreterContext, StdStreams

logger = logging.getLogger(__name__)


def has_redirections(node: SimpleCommandNode) -> bool:
    return node.stdin is not None or node.stdout is not None or node.stderr is not None


def _write_all(fd: int, text: str) -> None:
    data = os.fsencode(text)
    while data:
        written = os.write(fd, data)
        data = data[written:]


async def write_stream(fd: int, text: str) -> None:
    """Write all of text to a raw descriptor.

    The write blocks while a pipe is full, so it runs in a worker thread
    and the other side of the pipe keeps being served by the event loop.
    Paths carrying surrogate escapes are written back as their raw bytes.
    """
    await asyncio.to_thread(_write_all, fd, text)


def _resolve(ctx: "InterpreterContext", word: WordNode) -> str:
    return ctx.state.resolve_path(expand_word(ctx, word))


def _open(ctx: "InterpreterContext", word: WordNode, flags: int) -> tuple[str, int]:
    target = expand_word(ctx, word)
    path = ctx.state.resolve_path(target)
    try:
        fd = os.open(path, flags, ctx.options.create_mode)
    except OSError as e:
        raise FileAccessError(target, e.strerror or str(e)) from e
    return path, fd


def _truncate(ctx: "InterpreterContext", word: WordNode) -> None:
    _, fd = _open(ctx, word, os.O_WRONLY | os.O_CREAT | os.O_TRUNC)
    os.close(fd)


def _open_targets(
    ctx: "InterpreterContext", node: SimpleCommandNode, opened: list[int]
) -> dict[str, int]:
    """Open every redirection target, recording descriptors in opened."""
    targets: dict[str, int] = {}

    if node.stdin is not None:
        _, fd = _open(ctx, node.stdin, os.O_RDONLY)
        opened.append(fd)
        targets["stdin"] = fd

    combined = node.stdout is not None and node.stderr is not None
    if combined and not node.append:
        _truncate(ctx, node.stdout)
        if _resolve(ctx, node.stderr) != _resolve(ctx, node.stdout):
            _truncate(ctx, node.stderr)
        append = True
    else:
        append = node.append

    write_flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    out_path: Optional[str] = None
    if node.stdout is not None:
        out_path, fd = _open(ctx, node.stdout, write_flags)
        opened.append(fd)
        targets["stdout"] = fd
    if node.stderr is not None:
        if combined and _resolve(ctx, node.stderr) == out_path:
            targets["stderr"] = targets["stdout"]
        else:
            _, fd = _open(ctx, node.stderr, write_flags)
            opened.append(fd)
            targets["stderr"] = fd
    return targets


@contextmanager
def redirected(ctx: "InterpreterContext", node: SimpleCommandNode) -> Iterator["StdStreams"]:
    """Apply node's redirections to ctx.streams for the enclosed block.

    Raises FileAccessError if a target cannot be opened; in that case the
    streams are left untouched.
    """
    if not has_redirections(node):
        yield ctx.streams
        return

    saved = ctx.streams
    opened: list[int] = []
    try:
        targets = _open_targets(ctx, node, opened)
        ctx.streams = saved.copy(**targets)
        logger.debug("redirected streams %s -> %s", saved, ctx.streams)
        yield ctx.streams
    finally:
        ctx.streams = saved
        for fd in opened:
            os.close(fd)
