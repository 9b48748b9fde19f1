"""
Session command handlers.

Each handler is a coroutine taking the session (and the raw argument for
commands that need an id). The ``command`` decorator provides the common
completion contract: quiz errors are written to the client, never raised to
the read loop, and the prompt is re-armed once the handler is done.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from loguru import logger

from quiz_server.errors import (
    NotFound,
    QuizError,
    SessionClosed,
    StoreUnavailable,
    ValidationFailure,
)
from quiz_server.play import PlayRound
from quiz_server.presentation import biglog, colorize, errorlog, log
from quiz_server.prompt import answers_match, ask
from quiz_server.validation import validate_id

if TYPE_CHECKING:
    from quiz_server.db.store import QuizRecord
    from quiz_server.session import Session

Handler = Callable[..., Awaitable[None]]

HELP_LINES = [
    "Commands:",
    "  h|help - Show this help.",
    "  list - List the existing quizzes.",
    "  show <id> - Show the question and the answer of the given quiz.",
    "  add - Add a new quiz interactively.",
    "  delete <id> - Delete the given quiz.",
    "  edit <id> - Edit the given quiz.",
    "  test <id> - Test the given quiz.",
    "  p|play - Play: answer every quiz in random order.",
    "  credits - Credits.",
    "  q|quit - Leave the session.",
]

CREDITS_LINES = [
    "Authors of the practice:",
    "Javier Guijarro Benitez",
]


def command(func: Handler) -> Handler:
    """Report errors to the session and re-arm its prompt when ``func`` completes."""

    @functools.wraps(func)
    async def wrapper(session: Session, *args: str | None) -> None:
        try:
            await func(session, *args)
        except SessionClosed:
            raise
        except ValidationFailure as exc:
            logger.warning("Session {}: invalid quiz: {}", session.id, exc.errors)
            errorlog(session, "The quiz is invalid:")
            for message in exc.errors:
                errorlog(session, message)
        except StoreUnavailable as exc:
            logger.error("Session {}: {} failed: {}", session.id, func.__name__, exc)
            errorlog(session, exc)
        except QuizError as exc:
            logger.warning("Session {}: {}", session.id, exc)
            errorlog(session, exc)
        except Exception as exc:
            logger.exception("Session {}: unexpected error in {}", session.id, func.__name__)
            errorlog(session, exc)
        finally:
            session.rl.prompt()

    return wrapper


def _quiz_line(session: Session, quiz: QuizRecord, *, with_answer: bool = False) -> str:
    line = f" [{colorize(quiz.id, 'magenta', color=session.color)}]: {quiz.question}"
    if with_answer:
        line += f" {colorize('=>', 'magenta', color=session.color)} {quiz.answer}"
    return line


async def _find_quiz(session: Session, raw_id: str | None) -> QuizRecord:
    quiz_id = validate_id(raw_id)
    quiz = await session.store.find_by_id(quiz_id)
    if quiz is None:
        raise NotFound(quiz_id)
    return quiz


@command
async def help_cmd(session: Session) -> None:
    for line in HELP_LINES:
        log(session, line)


@command
async def list_cmd(session: Session) -> None:
    for quiz in await session.store.find_all():
        log(session, _quiz_line(session, quiz))


@command
async def show_cmd(session: Session, raw_id: str | None = None) -> None:
    quiz = await _find_quiz(session, raw_id)
    log(session, _quiz_line(session, quiz, with_answer=True))


@command
async def add_cmd(session: Session) -> None:
    """Ask for a question and then its answer, and store the new quiz."""
    question = await ask(session, "Enter a question: ")
    answer = await ask(session, "Enter the answer: ")
    quiz = await session.store.create(question=question, answer=answer)
    log(session, f"{colorize('Added', 'magenta', color=session.color)}{_quiz_line(session, quiz, with_answer=True)}")


@command
async def delete_cmd(session: Session, raw_id: str | None = None) -> None:
    quiz_id = validate_id(raw_id)
    deleted = await session.store.destroy(quiz_id)
    logger.debug("Session {}: delete id={} affected {} rows", session.id, quiz_id, deleted)


@command
async def edit_cmd(session: Session, raw_id: str | None = None) -> None:
    """
    Edit a quiz in place.

    The current question and answer are offered as pre-filled defaults when
    the session runs in terminal mode.
    """
    quiz = await _find_quiz(session, raw_id)
    question = await ask(session, "Enter the question: ", default=quiz.question)
    answer = await ask(session, "Enter the answer: ", default=quiz.answer)
    quiz.question = question
    quiz.answer = answer
    quiz = await session.store.save(quiz)
    log(
        session,
        f"Quiz {colorize(quiz.id, 'magenta', color=session.color)} changed to: "
        f"{quiz.question} {colorize('=>', 'magenta', color=session.color)} {quiz.answer}",
    )


@command
async def test_cmd(session: Session, raw_id: str | None = None) -> None:
    quiz = await _find_quiz(session, raw_id)
    answer = await ask(session, f"{quiz.question}? ")
    if answers_match(answer, quiz.answer):
        log(session, "Your answer is correct.")
        biglog(session, "Correct", "green")
    else:
        log(session, "Your answer is incorrect.")
        biglog(session, "Incorrect", "red")


@command
async def play_cmd(session: Session) -> None:
    await PlayRound(session).run()


@command
async def credits_cmd(session: Session) -> None:
    log(session, CREDITS_LINES[0])
    for name in CREDITS_LINES[1:]:
        log(session, name, "green")


async def quit_cmd(session: Session) -> None:
    """Close the prompt and the channel. No prompt follows."""
    logger.info("Session {}: quit", session.id)
    session.close()


# Verb -> (handler, takes an argument)
COMMANDS: dict[str, tuple[Handler, bool]] = {
    "h": (help_cmd, False),
    "help": (help_cmd, False),
    "list": (list_cmd, False),
    "show": (show_cmd, True),
    "add": (add_cmd, False),
    "delete": (delete_cmd, True),
    "edit": (edit_cmd, True),
    "test": (test_cmd, True),
    "p": (play_cmd, False),
    "play": (play_cmd, False),
    "credits": (credits_cmd, False),
    "q": (quit_cmd, False),
    "quit": (quit_cmd, False),
}


def parse_command(line: str) -> tuple[str, str | None]:
    """Split an input line into a lower-cased verb and its first argument."""
    words = line.split()
    if not words:
        return "", None
    return words[0].lower(), words[1] if len(words) > 1 else None


async def dispatch(session: Session, line: str) -> None:
    """Run the handler for one input line."""
    verb, arg = parse_command(line)
    if not verb:
        session.rl.prompt()
        return

    entry = COMMANDS.get(verb)
    if entry is None:
        log(session, f"Unknown command: '{colorize(verb, 'red', color=session.color)}'")
        log(session, f"Use {colorize('help', 'green', color=session.color)} to see all available commands.")
        session.rl.prompt()
        return

    handler, takes_arg = entry
    logger.debug("Session {}: {} {}", session.id, verb, arg or "")
    if takes_arg:
        await handler(session, arg)
    else:
        await handler(session)
