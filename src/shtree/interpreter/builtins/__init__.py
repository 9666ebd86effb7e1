"""Shell builtins.

Builtins run inside the calling context without spawning a process, so
they can change its environment and working directory.
"""

from .assign import ASSIGNMENT_NAME, handle_assignment
from .cd import handle_cd
from .control import handle_exit
from .pwd import handle_pwd

BUILTINS = {
    "exit": handle_exit,
    "quit": handle_exit,
    "cd": handle_cd,
    "pwd": handle_pwd,
}
"""Dispatch table, in lookup order."""

REDIRECTABLE_BUILTINS = frozenset({"cd", "pwd"})
"""Builtins that honour in/out/err redirection targets."""

__all__ = [
    "ASSIGNMENT_NAME",
    "BUILTINS",
    "REDIRECTABLE_BUILTINS",
    "handle_assignment",
    "handle_cd",
    "handle_exit",
    "handle_pwd",
]
