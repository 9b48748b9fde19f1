"""
Error kinds raised inside a session.

Every ``QuizError`` is caught at the command boundary and written to the
client as an error line. ``SessionClosed`` is not a ``QuizError``: it ends the
session and is never reported to the client.
"""

from __future__ import annotations


class QuizError(Exception):
    """Base class for errors reported to a session."""


class MissingArgument(QuizError):
    """A command that needs an argument was issued without one."""


class InvalidArgument(QuizError):
    """The argument could not be parsed (non-numeric id)."""


class NotFound(QuizError):
    """No quiz exists for the requested id."""

    def __init__(self, quiz_id: int):
        super().__init__(f"No quiz is associated with id={quiz_id}.")
        self.quiz_id = quiz_id


class ValidationFailure(QuizError):
    """The store rejected one or more fields."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)


class StoreUnavailable(QuizError):
    """The quiz store call itself failed."""


class SessionClosed(Exception):
    """The client channel went away while a prompt was pending."""
