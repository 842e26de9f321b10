"""Tests for command parsing and routing."""

import pytest

from wolfchat.broadcast import RecordingBroadcaster
from wolfchat.engine.commands import HELP_TEXT, CommandRouter, parse_command
from wolfchat.engine.session import GameSession
from wolfchat.events.game_events import ErrorCode, Phase
from wolfchat.events.messages import ErrorMessage, GameEventMessage, GameStateMessage


def make_router(count: int = 0):
    broadcaster = RecordingBroadcaster()
    session = GameSession(broadcaster)
    router = CommandRouter(session)
    for i in range(count):
        broadcaster.connect(f"u{i}", f"Player{i}")
        router.handle_line(f"u{i}", "/join")
    return router, session, broadcaster


class TestParseCommand:
    """Tests for tokenizing chat lines."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("/join", ("join", [])),
            ("/VOTE Alice", ("vote", ["Alice"])),
            ("  /kill  bob  ", ("kill", ["bob"])),
            ('/join "Big Al"', ("join", ["Big Al"])),
            ("/vote it's", ("vote", ["it's"])),
        ],
    )
    def test_commands(self, line, expected):
        assert parse_command(line) == expected

    @pytest.mark.parametrize("line", ["hello there", "", "/", "/   "])
    def test_not_commands(self, line):
        assert parse_command(line) is None


class TestRouter:
    """Tests for dispatching to the session."""

    def test_plain_chat_ignored(self):
        router, session, broadcaster = make_router()
        assert router.handle_line("u0", "good morning") is None

    def test_unknown_verb(self):
        router, session, broadcaster = make_router(count=1)
        result = router.handle_line("u0", "/dance")
        assert result.error == ErrorCode.UNKNOWN_COMMAND
        error = broadcaster.last_for("u0", ErrorMessage)
        assert error.code == ErrorCode.UNKNOWN_COMMAND
        assert "/dance" in error.message

    def test_join_with_quoted_name(self):
        router, session, broadcaster = make_router()
        broadcaster.connect("x", "x")
        router.handle_line("x", '/join "Big Al"')
        assert session.state.players["x"].name == "Big Al"

    def test_start_routes_to_session(self):
        router, session, _ = make_router(count=5)
        assert router.handle_line("u1", "/start").error == ErrorCode.NOT_HOST
        assert router.handle_line("u0", "/start")
        assert session.state.phase == Phase.NIGHT

    def test_night_verbs_registered(self):
        router, _, _ = make_router()
        for verb in ("kill", "check", "save", "poison", "skip", "vote", "shoot"):
            assert verb in router.verbs

    def test_multi_word_name(self):
        router, session, broadcaster = make_router()
        broadcaster.connect("x", "x")
        router.handle_line("x", "/join Big Al")
        assert session.state.players["x"].name == "Big Al"

    def test_help_and_status(self):
        router, _, broadcaster = make_router(count=1)
        broadcaster.clear()
        assert router.handle_line("u0", "/help")
        assert broadcaster.last_for("u0", GameEventMessage).text == HELP_TEXT
        assert router.handle_line("u0", "/status")
        assert broadcaster.last_for("u0", GameStateMessage).player_count == 1

    def test_leave(self):
        router, session, _ = make_router(count=2)
        assert router.handle_line("u1", "/leave")
        assert list(session.state.players) == ["u0"]
