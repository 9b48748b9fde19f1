"""
Unit tests for the line prompt, the prompt engine and the session read loop.

Run: pytest tests/unit/test_session.py -v
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from quiz_server.errors import SessionClosed
from quiz_server.prompt import answers_match, ask

PROMPT = "quiz > "


class TestAnswersMatch:
    def test_case_and_whitespace_insensitive(self):
        assert answers_match(" Paris ", "paris")
        assert answers_match("ROME", " rome")

    def test_exact_match_required(self):
        assert not answers_match("Pari", "Paris")
        assert not answers_match("Paris France", "Paris")


class TestAsk:
    @pytest.mark.asyncio
    async def test_returns_trimmed_line(self, session_factory):
        session, writer = session_factory(AsyncMock(), ["   Madrid  "])
        answer = await ask(session, "Capital of Spain? ")
        assert answer == "Madrid"
        assert writer.text == "Capital of Spain? "

    @pytest.mark.asyncio
    async def test_sequential_prompts(self, session_factory):
        session, writer = session_factory(AsyncMock(), ["first", "second"])
        assert await ask(session, "A: ") == "first"
        assert await ask(session, "B: ") == "second"
        assert writer.text == "A: B: "

    @pytest.mark.asyncio
    async def test_crlf_line_endings(self, session_factory):
        session, _ = session_factory(AsyncMock(), eof=False)
        session.rl._reader.feed_data(b"telnet\r\n")
        assert await ask(session, "? ") == "telnet"

    @pytest.mark.asyncio
    async def test_disconnect_aborts_prompt(self, session_factory):
        session, _ = session_factory(AsyncMock(), [])
        with pytest.raises(SessionClosed):
            await ask(session, "Question? ")
        assert session.closed

    @pytest.mark.asyncio
    async def test_only_one_pending_prompt(self, session_factory):
        session, _ = session_factory(AsyncMock(), eof=False)
        first = asyncio.create_task(ask(session, "1? "))
        await asyncio.sleep(0)
        with pytest.raises(RuntimeError):
            await ask(session, "2? ")
        session.rl._reader.feed_data(b"done\n")
        assert await first == "done"

    @pytest.mark.asyncio
    async def test_default_ignored_outside_terminal(self, session_factory):
        session, writer = session_factory(AsyncMock(), [""])
        assert await ask(session, "Q: ", default="old") == ""
        assert "old" not in writer.text

    @pytest.mark.asyncio
    async def test_default_prefilled_in_terminal(self, session_factory):
        session, writer = session_factory(AsyncMock(), ["", "new"], terminal=True)
        assert await ask(session, "Q: ", default="old") == "old"
        assert await ask(session, "A: ", default="keep") == "new"
        assert "[old]" in writer.text

    @pytest.mark.asyncio
    async def test_overlong_answer_is_discarded_through_newline(self, session_factory):
        session, _ = session_factory(AsyncMock(), eof=False)
        reader = session.rl._reader
        reader.feed_data(b"x" * 70000)
        pending = asyncio.create_task(ask(session, "Q: "))
        await asyncio.sleep(0)
        reader.feed_data(b"tail of the long line\nParis\n")
        assert await pending == ""
        assert await ask(session, "Q: ") == "Paris"


class TestSessionRun:
    @pytest.mark.asyncio
    async def test_help_then_quit(self, session_factory):
        session, writer = session_factory(AsyncMock(), ["help", "quit", "list"])
        await session.run()

        assert "Commands:" in writer.text
        assert writer.closed
        assert session.closed
        session.store.find_all.assert_not_called()

    @pytest.mark.asyncio
    async def test_prompt_rearmed_after_each_command(self, session_factory):
        session, writer = session_factory(AsyncMock(), ["credits", "", "h"])
        await session.run()
        # initial prompt + credits + empty line + help
        assert writer.text.count(PROMPT) == 4

    @pytest.mark.asyncio
    async def test_verbs_are_case_insensitive(self, session_factory):
        session, writer = session_factory(AsyncMock(), ["HELP"])
        await session.run()
        assert "Commands:" in writer.text

    @pytest.mark.asyncio
    async def test_unknown_command(self, session_factory):
        session, writer = session_factory(AsyncMock(), ["fly away"])
        await session.run()
        assert "Unknown command: 'fly'" in writer.text
        assert writer.text.endswith(PROMPT)

    @pytest.mark.asyncio
    async def test_disconnect_mid_command_is_silent(self, session_factory):
        """Closing the channel during add aborts it without output or store calls."""
        store = AsyncMock()
        session, writer = session_factory(store, ["add", "What is 2+2"])
        await session.run()

        store.create.assert_not_called()
        assert "Error" not in writer.text
        assert writer.text.endswith("Enter the answer: ")
        assert writer.closed

    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, session_factory):
        store = AsyncMock()
        first, first_writer = session_factory(store, ["quit"])
        second, second_writer = session_factory(store, ["help"])
        await asyncio.gather(first.run(), second.run())

        assert first_writer.closed
        assert "Commands:" in second_writer.text
        assert "Commands:" not in first_writer.text
        assert first.rng is not second.rng

    @pytest.mark.asyncio
    async def test_overlong_line_tail_is_not_a_command(self, session_factory):
        """The rest of a line that overran the reader limit is dropped, not dispatched."""
        store = AsyncMock()
        session, writer = session_factory(store, eof=False)
        reader = session.rl._reader
        reader.feed_data(b"x" * 70000)
        running = asyncio.create_task(session.run())
        await asyncio.sleep(0)
        reader.feed_data(b" delete 5\n")
        reader.feed_eof()
        await running

        store.destroy.assert_not_called()
        assert "Unknown command" not in writer.text
        # initial prompt + re-arm after the discarded line
        assert writer.text.count(PROMPT) == 2
