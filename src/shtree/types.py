"""Core types for shtree."""

from dataclasses import dataclass

Status = int
"""Result of evaluating a command tree."""

EXIT_SUCCESS: Status = 0
EXIT_FAILURE: Status = 1
EXIT_CANNOT_EXECUTE: Status = 126
EXIT_NOT_FOUND: Status = 127
SIGNAL_EXIT_BASE: Status = 128
"""A child killed by signal N reports SIGNAL_EXIT_BASE + N."""

TERMINATE_SHELL: Status = -100
"""Sentinel returned by exit/quit; outside the 0..255 exit-code range."""


def is_terminate(status: Status) -> bool:
    """Check whether a status is the TERMINATE_SHELL sentinel."""
    return status == TERMINATE_SHELL


@dataclass
class ExecResult:
    """Result of a captured evaluation."""

    stdout: str
    stderr: str
    exit_code: Status
