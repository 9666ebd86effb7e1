"""Interpreter types for shtree."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass
class ShellOptions:
    """Engine configuration."""

    create_mode: int = 0o777
    """Permission bits for files created by output redirection (umask applies)."""

    shell_name: str = "shtree"
    """Prefix for diagnostics written to stderr."""


@dataclass
class StdStreams:
    """The three standard descriptors of an execution context.

    The descriptors are borrowed; whoever opened them closes them.
    """

    stdin: int = 0
    stdout: int = 1
    stderr: int = 2

    def copy(self, **overrides: int) -> StdStreams:
        return replace(self, **overrides)


@dataclass
class InterpreterState:
    """Mutable state of one execution context."""

    env: dict[str, str] = field(default_factory=dict)
    """Environment variables, passed verbatim to child processes."""

    cwd: str = "/"
    """Current working directory (absolute, symlinks resolved)."""

    last_exit_code: int = 0
    """Status of the last evaluated leaf."""

    def copy(self) -> InterpreterState:
        """Snapshot for an isolated child context."""
        return InterpreterState(
            env=dict(self.env),
            cwd=self.cwd,
            last_exit_code=self.last_exit_code,
        )

    def resolve_path(self, path: str) -> str:
        """Resolve a path against the current working directory."""
        return os.path.join(self.cwd, path)

    @classmethod
    def from_process(
        cls,
        env: Optional[dict[str, str]] = None,
        cwd: Optional[str] = None,
        inherit_env: bool = True,
    ) -> InterpreterState:
        """Seed state from the running process."""
        base = dict(os.environ) if inherit_env else {}
        if env:
            base.update(env)
        return cls(env=base, cwd=os.path.realpath(cwd or os.getcwd()))


@dataclass
class InterpreterContext:
    """Context provided to builtins, redirections and the launcher."""

    state: InterpreterState
    """Mutable state (env, cwd)."""

    streams: StdStreams
    """Current standard descriptors; swapped while redirections are active."""

    options: ShellOptions
    """Engine configuration."""
