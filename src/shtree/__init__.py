"""shtree - evaluate parsed shell command trees against real processes.

Example:
    from shtree import AST, Shell

    shell = Shell()
    shell.run(AST.pipe(AST.simple("printf", "abc"), AST.simple("cat")))
"""

import logging

from .ast import AST, BinaryNode, CommandNode, EnvPart, LiteralPart, Operator, SimpleCommandNode, WordNode
from .interpreter import Interpreter, InterpreterState, ShellOptions
from .shell import Shell
from .types import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    TERMINATE_SHELL,
    ExecResult,
    Status,
    is_terminate,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "AST",
    "BinaryNode",
    "CommandNode",
    "EXIT_FAILURE",
    "EXIT_SUCCESS",
    "EnvPart",
    "ExecResult",
    "Interpreter",
    "InterpreterState",
    "LiteralPart",
    "Operator",
    "Shell",
    "ShellOptions",
    "SimpleCommandNode",
    "Status",
    "TERMINATE_SHELL",
    "WordNode",
    "is_terminate",
]
