"""
Asyncio TCP server: one independent ``Session`` per client connection.

Sessions share nothing but the quiz store; each runs in the connection task
asyncio creates for it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from loguru import logger

from quiz_server.config import Settings, get_settings
from quiz_server.db.store import QuizStore
from quiz_server.presentation import biglog
from quiz_server.session import RandomSource, Session


class QuizServer:
    """Accept clients and run a quiz session for each."""

    def __init__(
        self,
        store: QuizStore,
        settings: Settings | None = None,
        rng_factory: Callable[[], RandomSource] | None = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self._rng_factory = rng_factory
        self._server: asyncio.Server | None = None
        self._sessions: set[Session] = set()

    @property
    def sessions(self) -> frozenset[Session]:
        return frozenset(self._sessions)

    @property
    def address(self) -> tuple[str, int]:
        """Bound (host, port); useful when started on port 0."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Server is not started")
        host, port = self._server.sockets[0].getsockname()[:2]
        return host, port

    async def start(self, host: str | None = None, port: int | None = None) -> None:
        default_host, default_port = self.settings.get_server_address()
        self._server = await asyncio.start_server(
            self._handle_client,
            host or default_host,
            default_port if port is None else port,
        )
        logger.info("Quiz server listening on {}:{}", *self.address)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        """Stop accepting clients and close every open session."""
        if self._server is None:
            return
        self._server.close()
        for session in list(self._sessions):
            session.close()
        await self._server.wait_closed()
        logger.info("Quiz server stopped")

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        rng = self._rng_factory() if self._rng_factory else None
        session = Session.from_streams(reader, writer, self.store, self.settings, rng=rng)
        peer = session.channel.peer
        self._sessions.add(session)
        logger.info("Client connected: {} (session {})", peer, session.id)
        try:
            biglog(session, "Quiz", "green")
            await session.run()
        except Exception:
            logger.exception("Session {} crashed", session.id)
        finally:
            self._sessions.discard(session)
            session.close()
            logger.info("Client disconnected: {} (session {})", peer, session.id)
