"""Interpreter module for shtree."""

from .errors import (
    AbnormalTermination,
    DirectoryChangeError,
    EnvironmentAssignmentError,
    ExecutionNotFound,
    FileAccessError,
    ShellError,
)
from .interpreter import Interpreter
from .types import InterpreterContext, InterpreterState, ShellOptions, StdStreams

__all__ = [
    "AbnormalTermination",
    "DirectoryChangeError",
    "EnvironmentAssignmentError",
    "ExecutionNotFound",
    "FileAccessError",
    "Interpreter",
    "InterpreterContext",
    "InterpreterState",
    "ShellError",
    "ShellOptions",
    "StdStreams",
]
