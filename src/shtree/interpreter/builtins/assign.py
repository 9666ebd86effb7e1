"""NAME=VALUE assignment.

Sets an environment variable in the current context, overwriting any
existing value. Redirection targets on an assignment are ignored.
"""

import logging
import re
from typing import TYPE_CHECKING, Iterable

from ...types import EXIT_SUCCESS
from ..errors import EnvironmentAssignmentError
from ..expansion import expand_parts

if TYPE_CHECKING:
    from ...ast.types import WordPart
    from ..types import InterpreterContext

logger = logging.getLogger(__name__)

ASSIGNMENT_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


async def handle_assignment(
    ctx: "InterpreterContext", name: str, value_parts: Iterable["WordPart"]
) -> int:
    """Execute a NAME=VALUE assignment split by WordNode.assignment_split()."""
    if not ASSIGNMENT_NAME.match(name):
        raise EnvironmentAssignmentError(name)

    value = expand_parts(ctx, value_parts)
    if "\0" in value:
        raise EnvironmentAssignmentError(name, "value contains a NUL byte")
    ctx.state.env[name] = value
    logger.debug("assigned %s", name)
    return EXIT_SUCCESS
