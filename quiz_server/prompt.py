"""Single-question prompts over a session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from quiz_server.presentation import colorize

if TYPE_CHECKING:
    from quiz_server.session import Session


async def ask(session: Session, text: str, default: str | None = None) -> str:
    """
    Write ``text`` and wait for the user's next line, returned trimmed.

    Commands that need several answers await ``ask`` once per answer, in order.
    ``default`` pre-fills the answer when the session prompt is in terminal
    mode and is ignored otherwise.

    Raises:
        SessionClosed: the client disconnected before answering
    """
    if default is not None:
        session.rl.write(default)
    answer = await session.rl.question(colorize(text, "red", color=session.color))
    return answer.strip()


def answers_match(given: str, expected: str) -> bool:
    """Case-insensitive, whitespace-trimmed exact comparison."""
    return given.strip().lower() == expected.strip().lower()
