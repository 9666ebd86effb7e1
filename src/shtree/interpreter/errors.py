"""Interpreter error types.

Each error carries the diagnostic text and the status it maps to. They are
raised where a failure is detected and turned into a Status at the leaf
boundary of the interpreter; none of them escapes evaluate().
"""

import os

from ..types import EXIT_CANNOT_EXECUTE, EXIT_FAILURE, EXIT_NOT_FOUND, SIGNAL_EXIT_BASE


class ShellError(Exception):
    """Base class for command failures reported as a status."""

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    @property
    def stderr(self) -> str:
        return self.message + "\n" if self.message else ""


class FileAccessError(ShellError):
    """A redirection target cannot be opened for the required mode."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path


class DirectoryChangeError(ShellError):
    """cd target missing, not a directory, or inaccessible."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"cd: {path}: {reason}")
        self.path = path


class ExecutionNotFound(ShellError):
    """An external verb could not be resolved or executed."""

    def __init__(self, verb: str, reason: str, exit_code: int = EXIT_NOT_FOUND):
        super().__init__(f"{verb}: {reason}", exit_code)
        self.verb = verb

    @classmethod
    def from_os_error(cls, verb: str, error: OSError) -> "ExecutionNotFound":
        reason = error.strerror or str(error)
        # The failing file is not always the program (e.g. a vanished cwd).
        if error.filename is not None and os.fsdecode(error.filename) != verb:
            return cls(verb, f"{os.fsdecode(error.filename)}: {reason}", EXIT_CANNOT_EXECUTE)
        if isinstance(error, FileNotFoundError):
            return cls(verb, "command not found", EXIT_NOT_FOUND)
        return cls(verb, reason, EXIT_CANNOT_EXECUTE)


class AbnormalTermination(ShellError):
    """A child process was killed by a signal instead of exiting."""

    def __init__(self, verb: str, signum: int):
        super().__init__(f"{verb}: terminated by signal {signum}", SIGNAL_EXIT_BASE + signum)
        self.verb = verb
        self.signum = signum


class EnvironmentAssignmentError(ShellError):
    """NAME=VALUE with an invalid name or a rejected value."""

    def __init__(self, name: str, reason: str = "not a valid identifier"):
        super().__init__(f"`{name}': {reason}")
        self.name = name
