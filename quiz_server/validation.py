"""Quiz id validation."""

from __future__ import annotations

import re

from quiz_server.errors import InvalidArgument, MissingArgument

# Leading integer portion; anything after the digits is discarded.
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def validate_id(raw: str | None) -> int:
    """
    Turn raw command argument text into a quiz id.

    ``"12xy"`` parses as ``12``. Whether a quiz with that id exists is up to the
    caller.

    Raises:
        MissingArgument: ``raw`` is None
        InvalidArgument: ``raw`` has no leading integer
    """
    if raw is None:
        raise MissingArgument("Missing parameter <id>.")
    match = _LEADING_INT.match(raw)
    if not match:
        raise InvalidArgument("The value of parameter <id> is not a number.")
    return int(match.group(1))
