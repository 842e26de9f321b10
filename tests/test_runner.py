"""Tests for RoomRunner."""

import asyncio

import pytest

from wolfchat.broadcast import RecordingBroadcaster
from wolfchat.config import GameSettings
from wolfchat.engine.session import GameSession
from wolfchat.events.game_events import Phase
from wolfchat.runner import RoomRunner


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_runner():
    broadcaster = RecordingBroadcaster()
    clock = FakeClock()
    settings = GameSettings(night_seconds=60, day_seconds=30, vote_seconds=60, tick_interval=0.01)
    session = GameSession(broadcaster, settings=settings, clock=clock)
    for i in range(5):
        broadcaster.connect(f"u{i}", f"Player{i}")
    return RoomRunner(session), session, clock


class TestRoomRunner:
    """Tests for the asyncio driver."""

    @pytest.mark.asyncio
    async def test_submit_routes_commands(self):
        runner, session, _ = make_runner()
        for i in range(5):
            assert await runner.submit(f"u{i}", "/join")
        assert await runner.submit("u1", "just chatting") is None
        assert await runner.submit("u0", "/start")
        assert session.state.phase == Phase.NIGHT

    @pytest.mark.asyncio
    async def test_tick_loop_fires_deadlines(self):
        runner, session, clock = make_runner()
        for i in range(5):
            await runner.submit(f"u{i}", "/join")
        await runner.submit("u0", "/start")

        await runner.start()
        assert runner.running
        try:
            clock.advance(60)
            for _ in range(100):
                await asyncio.sleep(0.01)
                if session.state.phase == Phase.DAY:
                    break
        finally:
            await runner.stop()

        assert session.state.phase == Phase.DAY
        assert not runner.running

    @pytest.mark.asyncio
    async def test_concurrent_submissions_serialized(self):
        runner, session, _ = make_runner()
        await asyncio.gather(*(runner.submit(f"u{i}", "/join") for i in range(5)))
        assert len(session.state.players) == 5
        assert session.state.host is not None

    @pytest.mark.asyncio
    async def test_command_exception_logged(self, monkeypatch, caplog):
        runner, session, _ = make_runner()

        def boom(actor, name=None):
            raise RuntimeError("broken join")

        monkeypatch.setattr(session, "join", boom)
        assert await runner.submit("u0", "/join") is None
        assert "Command failed" in caplog.text

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        runner, _, _ = make_runner()
        await runner.stop()
        assert not runner.running
