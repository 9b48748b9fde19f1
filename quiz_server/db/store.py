"""
Quiz Store: async persistence for quiz records.

The store hands out plain ``QuizRecord`` copies, never live ORM objects, and
opens one database session per call so concurrent client sessions never
share a unit of work.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from quiz_server.db.database import async_session_scope, create_engine, create_session_factory
from quiz_server.db.models import Quiz
from quiz_server.errors import NotFound, StoreUnavailable, ValidationFailure

# SQLite and PostgreSQL integer keys are signed 64-bit.
_MAX_ID = 2**63 - 1

DEFAULT_QUIZZES = [
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
]


@dataclass
class QuizRecord:
    """Plain copy of a stored quiz."""

    id: int
    question: str
    answer: str

    @classmethod
    def from_model(cls, quiz: Quiz) -> QuizRecord:
        return cls(id=quiz.id, question=quiz.question, answer=quiz.answer)


class QuizStore:
    """Async quiz repository backed by SQLAlchemy."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> QuizStore:
        engine = create_engine(database_url, echo=echo)
        return cls(create_session_factory(engine), engine=engine)

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    @asynccontextmanager
    async def _scope(self) -> AsyncGenerator[AsyncSession, None]:
        try:
            async with async_session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Quiz store failure: {}", exc)
            raise StoreUnavailable(f"Quiz store unavailable: {exc.__class__.__name__}") from exc

    async def find_all(self) -> list[QuizRecord]:
        """Return every quiz ordered by id."""
        async with self._scope() as session:
            result = await session.execute(select(Quiz).order_by(Quiz.id))
            return [QuizRecord.from_model(quiz) for quiz in result.scalars()]

    async def find_by_id(self, quiz_id: int) -> QuizRecord | None:
        if not 0 < quiz_id <= _MAX_ID:
            return None
        async with self._scope() as session:
            quiz = await session.get(Quiz, quiz_id)
            return QuizRecord.from_model(quiz) if quiz else None

    async def count(self) -> int:
        async with self._scope() as session:
            result = await session.execute(select(func.count()).select_from(Quiz))
            return result.scalar_one()

    async def create(self, question: str, answer: str) -> QuizRecord:
        """
        Store a new quiz.

        Raises:
            ValidationFailure: question or answer is empty
            StoreUnavailable: the database call failed
        """
        quiz = Quiz(question=question, answer=answer)
        errors = quiz.validate()
        if errors:
            raise ValidationFailure(errors)

        async with self._scope() as session:
            session.add(quiz)
            await session.flush()
            record = QuizRecord.from_model(quiz)
        logger.info("Created quiz {}", record.id)
        return record

    async def destroy(self, quiz_id: int) -> int:
        """Delete the quiz with ``quiz_id``; returns the number of rows removed (0 or 1)."""
        if not 0 < quiz_id <= _MAX_ID:
            return 0
        async with self._scope() as session:
            result = await session.execute(delete(Quiz).where(Quiz.id == quiz_id))
            deleted = result.rowcount or 0
        if deleted:
            logger.info("Deleted quiz {}", quiz_id)
        return deleted

    async def save(self, record: QuizRecord) -> QuizRecord:
        """
        Write the question and answer of an already-fetched record.

        Raises:
            ValidationFailure: question or answer is empty
            NotFound: the quiz was deleted since it was fetched
        """
        errors = Quiz(question=record.question, answer=record.answer).validate()
        if errors:
            raise ValidationFailure(errors)

        async with self._scope() as session:
            quiz = await session.get(Quiz, record.id)
            if quiz is None:
                raise NotFound(record.id)
            quiz.question = record.question
            quiz.answer = record.answer
            await session.flush()
            saved = QuizRecord.from_model(quiz)
        logger.info("Updated quiz {}", saved.id)
        return saved

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()


async def seed_quizzes(store: QuizStore) -> int:
    """Insert the default quizzes into an empty store; returns how many were added."""
    if await store.count():
        return 0
    for question, answer in DEFAULT_QUIZZES:
        await store.create(question=question, answer=answer)
    logger.info("Seeded {} default quizzes", len(DEFAULT_QUIZZES))
    return len(DEFAULT_QUIZZES)
