"""Cd builtin implementation.

Usage: cd [dir]

Change the working directory of the current context. With no argument,
or with more than one, cd does nothing and succeeds; callers rely on
this, so it is kept rather than reported as an error.

A lone $NAME argument names the directory through the variable NAME;
an unset NAME is an error rather than an empty path.
"""

import errno
import logging
import os
from typing import TYPE_CHECKING

from ...types import EXIT_SUCCESS
from ..errors import DirectoryChangeError
from ..expansion import expand_word

if TYPE_CHECKING:
    from ...ast.types import SimpleCommandNode, WordNode
    from ..types import InterpreterContext

logger = logging.getLogger(__name__)


def _target(ctx: "InterpreterContext", arg: "WordNode") -> str:
    name = arg.env_reference()
    if name is not None:
        value = ctx.state.env.get(name)
        if value is None:
            raise DirectoryChangeError("$" + name, "variable not set")
        return value
    return expand_word(ctx, arg)


async def handle_cd(ctx: "InterpreterContext", node: "SimpleCommandNode") -> int:
    """Execute the cd builtin."""
    if len(node.params) != 1:
        return EXIT_SUCCESS

    target = _target(ctx, node.params[0])
    if not target:
        raise DirectoryChangeError(target, os.strerror(errno.ENOENT))

    new_dir = os.path.realpath(ctx.state.resolve_path(target))
    if not os.path.exists(new_dir):
        raise DirectoryChangeError(target, os.strerror(errno.ENOENT))
    if not os.path.isdir(new_dir):
        raise DirectoryChangeError(target, os.strerror(errno.ENOTDIR))
    if not os.access(new_dir, os.X_OK):
        raise DirectoryChangeError(target, os.strerror(errno.EACCES))

    old_dir = ctx.state.cwd
    ctx.state.cwd = new_dir
    ctx.state.env["OLDPWD"] = old_dir
    ctx.state.env["PWD"] = new_dir
    logger.debug("cd %s -> %s", old_dir, new_dir)
    return EXIT_SUCCESS
