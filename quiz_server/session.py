"""
Per-client session: channel, line prompt and the command read loop.

A ``Session`` owns no quiz state. Command handlers keep their transient
variables (play score, remaining pool) in their own locals.
"""

from __future__ import annotations

import asyncio
import random
import uuid
from typing import Protocol

from loguru import logger

from quiz_server.commands import dispatch
from quiz_server.config import Settings
from quiz_server.db.store import QuizStore
from quiz_server.errors import SessionClosed


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


class Channel:
    """Text wrapper around a client's ``StreamWriter``."""

    def __init__(self, writer: asyncio.StreamWriter):
        self._writer = writer
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed or self._writer.is_closing()

    @property
    def peer(self) -> str:
        peername = self._writer.get_extra_info("peername")
        if isinstance(peername, tuple) and len(peername) >= 2:
            return f"{peername[0]}:{peername[1]}"
        return str(peername) if peername else "unknown"

    def write(self, text: str) -> None:
        if self.closed:
            return
        self._writer.write(text.encode("utf-8"))

    async def drain(self) -> None:
        if self.closed:
            return
        try:
            await self._writer.drain()
        except ConnectionError:
            logger.debug("Channel {} dropped while draining", self.peer)
            self._closed = True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()


class LinePrompt:
    """
    Line-oriented prompt over a channel.

    At most one ``question`` may be pending at a time. When the channel is
    closed the pending question raises ``SessionClosed`` and nothing else is
    written.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        channel: Channel,
        prompt: str = "quiz > ",
        terminal: bool = False,
    ):
        self._reader = reader
        self._channel = channel
        self._prompt = prompt
        self.terminal = terminal
        self._closed = False
        self._pending = False
        self._prefill: str | None = None

    @property
    def closed(self) -> bool:
        return self._closed or self._channel.closed

    def prompt(self) -> None:
        """Show the prompt marker; the session is ready for a command."""
        if not self.closed:
            self._channel.write(self._prompt)

    def write(self, text: str) -> None:
        """Pre-fill the next question with editable default text (terminal mode only)."""
        if self.terminal and not self.closed:
            self._prefill = text

    async def readline(self) -> str | None:
        """Return the next input line without its line ending, or None on disconnect."""
        if self.closed:
            return None
        try:
            data = await self._read_line_bytes()
        except ConnectionError:
            data = b""
        if data is None:
            return ""
        if not data:
            self.close()
            return None
        return data.decode("utf-8", errors="replace").rstrip("\r\n")

    async def _read_line_bytes(self) -> bytes | None:
        """
        Read one raw line including its newline.

        A line longer than the reader limit is discarded up to and including
        its newline and reported as None. Empty bytes mean EOF.
        """
        overlong = False
        while True:
            try:
                data = await self._reader.readuntil(b"\n")
            except asyncio.IncompleteReadError as exc:
                return b"" if overlong else exc.partial
            except asyncio.LimitOverrunError as exc:
                await self._reader.readexactly(exc.consumed)
                overlong = True
                continue
            return None if overlong else data

    async def question(self, query: str) -> str:
        if self._pending:
            raise RuntimeError("A prompt is already pending on this session")
        if self.closed:
            raise SessionClosed()

        default, self._prefill = self._prefill, None
        self._pending = True
        try:
            self._channel.write(query)
            if default is not None:
                self._channel.write(f"[{default}] ")
            line = await self.readline()
        finally:
            self._pending = False

        if line is None:
            raise SessionClosed()
        if default is not None and not line.strip():
            return default
        return line

    def close(self) -> None:
        self._closed = True


class Session:
    """One client's independent command loop."""

    def __init__(
        self,
        channel: Channel,
        rl: LinePrompt,
        store: QuizStore,
        *,
        rng: RandomSource | None = None,
        color: bool = True,
        banner_font: str = "standard",
    ):
        self.id = uuid.uuid4().hex[:8]
        self.channel = channel
        self.rl = rl
        self.store = store
        self.rng = rng or random.Random()
        self.color = color
        self.banner_font = banner_font

    @classmethod
    def from_streams(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        store: QuizStore,
        settings: Settings,
        rng: RandomSource | None = None,
    ) -> Session:
        channel = Channel(writer)
        rl = LinePrompt(
            reader,
            channel,
            prompt=settings.prompt,
            terminal=settings.terminal_prefill,
        )
        return cls(
            channel,
            rl,
            store,
            rng=rng,
            color=settings.ansi_colors,
            banner_font=settings.banner_font,
        )

    @property
    def closed(self) -> bool:
        return self.rl.closed

    async def run(self) -> None:
        """Dispatch one command per input line until quit or disconnect."""
        self.rl.prompt()
        while not self.closed:
            line = await self.rl.readline()
            if line is None:
                break
            try:
                await dispatch(self, line)
            except SessionClosed:
                logger.debug("Session {} closed during a prompt", self.id)
                break
            await self.channel.drain()
        self.close()

    def close(self) -> None:
        self.rl.close()
        self.channel.close()
