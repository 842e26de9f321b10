"""Tests for NightActionResolver."""

from wolfchat.engine.game_state import GameState
from wolfchat.engine.night_action_resolver import NightActionResolver
from wolfchat.events.game_events import DeathCause, Phase
from wolfchat.models.player import Role

STANDARD_ROLES = [Role.WEREWOLF, Role.WEREWOLF, Role.SEER, Role.WITCH, Role.HUNTER]


def make_test_state(roles=None) -> GameState:
    """Seat u0..uN with the given roles, in the night phase."""
    state = GameState(phase=Phase.NIGHT)
    for i, role in enumerate(roles or STANDARD_ROLES):
        state.seat(f"u{i}", f"Player{i}").role = role
    return state


class TestSave:
    """Tests for the witch's save."""

    def test_save_cancels_kill(self):
        """Saving the werewolf victim prevents the death."""
        state = make_test_state()
        state.night.kill_target = "u2"
        state.night.save_target = "u2"

        outcome = NightActionResolver().resolve(state, state.night)

        assert outcome.deaths == {}
        assert outcome.saved

    def test_unsaved_kill(self):
        """Without a save the victim dies of the werewolf kill."""
        state = make_test_state()
        state.night.kill_target = "u2"

        outcome = NightActionResolver().resolve(state, state.night)

        assert outcome.deaths == {"u2": DeathCause.WEREWOLF_KILL}
        assert not outcome.saved


class TestPoison:
    """Tests for the witch's poison."""

    def test_poison_alongside_kill(self):
        """Poison and kill on different players both land."""
        state = make_test_state()
        state.night.kill_target = "u2"
        state.night.poison_target = "u0"

        outcome = NightActionResolver().resolve(state, state.night)

        assert outcome.deaths == {"u2": DeathCause.WEREWOLF_KILL, "u0": DeathCause.POISON}

    def test_poison_same_target_as_kill(self):
        """A player both poisoned and attacked dies once, of poison."""
        state = make_test_state()
        state.night.kill_target = "u4"
        state.night.poison_target = "u4"

        outcome = NightActionResolver().resolve(state, state.night)

        assert outcome.deaths == {"u4": DeathCause.POISON}


class TestDeadTargets:
    """Targets that died or left before resolution are skipped."""

    def test_dead_kill_target_skipped(self):
        state = make_test_state()
        state.night.kill_target = "u2"
        state.players["u2"].is_alive = False

        assert NightActionResolver().resolve(state, state.night).deaths == {}

    def test_missing_poison_target_skipped(self):
        state = make_test_state()
        state.night.poison_target = "ghost"

        assert NightActionResolver().resolve(state, state.night).deaths == {}

    def test_no_actions(self):
        """A quiet night kills no one."""
        state = make_test_state()
        outcome = NightActionResolver().resolve(state, state.night)
        assert outcome.deaths == {}
        assert outcome.day == 1
