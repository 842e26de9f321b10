"""Tests for GameState."""

from wolfchat.engine.game_state import GameState
from wolfchat.events.game_events import NightAction, NightVerb, Phase
from wolfchat.models.player import Role


def make_test_state(count: int = 3) -> GameState:
    state = GameState()
    for i in range(count):
        state.seat(f"u{i}", f"Player{i}")
    return state


class TestSeats:
    """Tests for seat and unseat."""

    def test_join_order_and_host(self):
        state = make_test_state()
        assert state.host == "u0"
        assert [p.joined_order for p in state.players.values()] == [0, 1, 2]

    def test_host_passes_to_earliest_joiner(self):
        state = make_test_state()
        state.unseat("u0")
        assert state.host == "u1"

    def test_unseat_unknown(self):
        state = make_test_state()
        assert state.unseat("ghost") is None
        assert state.host == "u0"

    def test_unseat_clears_references(self):
        state = make_test_state()
        state.votes = {"u1": "u2", "u2": "u1"}
        state.night.record("u2", NightAction(verb=NightVerb.KILL, target="u1"))
        state.night.kill_target = "u1"
        state.pending_hunter = "u1"

        state.unseat("u1")

        assert state.votes == {"u2": "u1"}
        assert state.night.kill_target is None
        assert state.night.has_submitted("u2")
        assert state.pending_hunter is None


class TestQueries:
    """Tests for lookups."""

    def test_find_player_by_identity_or_name(self):
        state = make_test_state()
        assert state.find_player("u1").name == "Player1"
        assert state.find_player("player2").identity == "u2"
        assert state.find_player("@Player0").identity == "u0"
        assert state.find_player("nobody") is None

    def test_is_playing(self):
        state = make_test_state()
        assert not state.is_playing
        for phase in (Phase.NIGHT, Phase.DAY, Phase.VOTE):
            state.phase = phase
            assert state.is_playing
        state.phase = Phase.ENDED
        assert not state.is_playing

    def test_living_and_werewolf_counts(self):
        state = make_test_state(4)
        for identity, role in zip(state.players, [Role.WEREWOLF, Role.WEREWOLF, Role.SEER, Role.WITCH]):
            state.players[identity].role = role
        state.kill("u1")
        assert [p.identity for p in state.living_with_role(Role.WEREWOLF)] == ["u0"]
        assert [p.identity for p in state.living_players()] == ["u0", "u2", "u3"]
        assert state.is_werewolf("u1")
        assert not state.is_alive("u1")

    def test_kill_twice(self):
        state = make_test_state()
        assert state.kill("u0")
        assert not state.kill("u0")
        assert not state.kill("ghost")

    def test_display_name_fallback(self):
        state = make_test_state()
        assert state.display_name("u0") == "Player0"
        assert state.display_name("ghost") == "ghost"


class TestFlags:
    """Tests for per-phase flags."""

    def test_reset_flags_only_for_living(self):
        state = make_test_state()
        for player in state.players.values():
            player.has_acted = True
            player.has_voted = True
        state.kill("u2")
        state.reset_acted()
        state.reset_voted()
        assert not state.players["u0"].has_acted
        assert not state.players["u0"].has_voted
        assert state.players["u2"].has_acted
