"""
Play round: every quiz in the store, asked once each in random order.

States:
    LOADING -> ASKING -> {ASKING, WON, LOST}
    LOADING -> FAILED when the store cannot be read

The round is won when the pool runs out and lost on the first wrong answer.
A ``PlayState`` lives only for one round and is passed explicitly from turn
to turn.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from quiz_server.db.store import QuizRecord
from quiz_server.errors import QuizError
from quiz_server.presentation import biglog, errorlog, log
from quiz_server.prompt import answers_match, ask

if TYPE_CHECKING:
    from quiz_server.session import RandomSource, Session


class PlayStatus(str, Enum):
    LOADING = "loading"
    ASKING = "asking"
    WON = "won"
    LOST = "lost"
    FAILED = "failed"


@dataclass
class PlayState:
    """Mutable state of one round."""

    pool: list[QuizRecord] = field(default_factory=list)
    score: int = 0
    status: PlayStatus = PlayStatus.LOADING
    asked: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class PlayOutcome:
    """Result of ``PlayRound.run``."""

    status: PlayStatus
    score: int
    asked: tuple[int, ...]
    error: str | None = None


class PlayRound:
    """Drive one round of the play command for a session."""

    def __init__(self, session: Session, rng: RandomSource | None = None):
        self.session = session
        self.rng = rng or session.rng

    async def run(self) -> PlayOutcome:
        state = PlayState()
        try:
            state.pool = list(await self.session.store.find_all())
        except QuizError as exc:
            logger.warning("Session {}: play round aborted: {}", self.session.id, exc)
            errorlog(self.session, exc)
            state.status = PlayStatus.FAILED
            return self._outcome(state, error=str(exc))

        state.status = PlayStatus.ASKING
        logger.debug("Session {}: play round with {} quizzes", self.session.id, len(state.pool))
        while state.status is PlayStatus.ASKING:
            await self.play_one(state)

        log(self.session, f"Final score: {state.score}", "magenta")
        biglog(self.session, state.score, "magenta")
        return self._outcome(state)

    async def play_one(self, state: PlayState) -> None:
        """Ask one question from the pool, updating ``state`` in place."""
        if not state.pool:
            log(self.session, "No more questions. You win!", "green")
            state.status = PlayStatus.WON
            return

        quiz = state.pool.pop(self.rng.randrange(len(state.pool)))
        state.asked.append(quiz.id)
        answer = await ask(self.session, f"{quiz.question}? ")

        if answers_match(answer, quiz.answer):
            state.score += 1
            log(self.session, f"Correct answer. Hits: {state.score}", "green")
            return

        log(self.session, "Incorrect answer.", "red")
        log(self.session, f"End of the quiz. Hits: {state.score}", "red")
        state.status = PlayStatus.LOST

    @staticmethod
    def _outcome(state: PlayState, error: str | None = None) -> PlayOutcome:
        return PlayOutcome(
            status=state.status,
            score=state.score,
            asked=tuple(state.asked),
            error=error,
        )
