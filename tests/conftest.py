"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests:
an in-memory quiz store, fake client streams and scripted randomness.
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from quiz_server.db.database import init_db
from quiz_server.db.store import QuizStore
from quiz_server.session import Channel, LinePrompt, Session

PROMPT = "quiz > "


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (open local sockets)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


class FakeWriter:
    """Stand-in for ``asyncio.StreamWriter`` that records everything written."""

    def __init__(self):
        self.buffer = bytearray()
        self.closed = False

    def write(self, data: bytes) -> None:
        self.buffer.extend(data)

    async def drain(self) -> None:
        return None

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True

    def get_extra_info(self, name, default=None):
        if name == "peername":
            return ("127.0.0.1", 50000)
        return default

    @property
    def text(self) -> str:
        return self.buffer.decode("utf-8")


class ScriptedRandom:
    """Random source returning pre-chosen indexes."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.calls = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        index = self.draws.pop(0)
        assert 0 <= index < stop
        return index


def make_session(store, inputs=(), *, rng=None, terminal=False, eof=True):
    """
    Build a session whose client already typed ``inputs``.

    Returns:
        Tuple of (session, writer)
    """
    reader = asyncio.StreamReader()
    for line in inputs:
        reader.feed_data(f"{line}\n".encode("utf-8"))
    if eof:
        reader.feed_eof()
    writer = FakeWriter()
    channel = Channel(writer)
    rl = LinePrompt(reader, channel, prompt=PROMPT, terminal=terminal)
    session = Session(channel, rl, store, rng=rng, color=False)
    return session, writer


@pytest_asyncio.fixture
async def store():
    """Empty in-memory quiz store."""
    quiz_store = QuizStore.from_url("sqlite+aiosqlite://")
    await init_db(quiz_store.engine)
    yield quiz_store
    await quiz_store.close()


@pytest_asyncio.fixture
async def capitals_store(store):
    """Store holding two quizzes (ids 1 and 2)."""
    await store.create(question="Capital of Italy", answer="Rome")
    await store.create(question="Capital of France", answer="Paris")
    return store


@pytest.fixture
def session_factory():
    """Factory building sessions over fake streams (see ``make_session``)."""
    return make_session


@pytest.fixture
def scripted_random():
    """Factory for random sources with forced draws."""
    return ScriptedRandom
