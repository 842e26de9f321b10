"""Tests for NightResolutionEngine validation, recording and completion."""

import pytest

from wolfchat.engine.game_state import GameState
from wolfchat.engine.night_engine import NightResolutionEngine
from wolfchat.events.game_events import ErrorCode, NightVerb, Phase
from wolfchat.models.player import Role

# u0, u1 werewolves; u2 seer; u3 witch; u4 hunter; u5 villager
ROLES = [Role.WEREWOLF, Role.WEREWOLF, Role.SEER, Role.WITCH, Role.HUNTER, Role.VILLAGER]


def make_test_state(phase: Phase = Phase.NIGHT) -> GameState:
    state = GameState(phase=phase)
    for i, role in enumerate(ROLES):
        state.seat(f"u{i}", f"Player{i}").role = role
    return state


@pytest.fixture
def engine():
    return NightResolutionEngine()


class TestValidation:
    """Each rejection rule, in order."""

    def test_unseated_actor(self, engine):
        state = make_test_state()
        assert engine.submit(state, "nobody", NightVerb.KILL, "u2").error == ErrorCode.NOT_YOUR_TURN

    def test_wrong_phase(self, engine):
        state = make_test_state(Phase.DAY)
        assert engine.submit(state, "u0", NightVerb.KILL, "u2").error == ErrorCode.INVALID_PHASE

    def test_dead_actor(self, engine):
        state = make_test_state()
        state.players["u0"].is_alive = False
        assert engine.submit(state, "u0", NightVerb.KILL, "u2").error == ErrorCode.ACTOR_DEAD

    def test_verb_not_held_by_role(self, engine):
        """A villager cannot kill, a seer cannot poison."""
        state = make_test_state()
        assert engine.submit(state, "u5", NightVerb.KILL, "u2").error == ErrorCode.NOT_YOUR_TURN
        assert engine.submit(state, "u2", NightVerb.POISON, "u0").error == ErrorCode.NOT_YOUR_TURN

    def test_already_acted(self, engine):
        state = make_test_state()
        assert engine.submit(state, "u2", NightVerb.CHECK, "u0")
        assert engine.submit(state, "u2", NightVerb.CHECK, "u1").error == ErrorCode.ALREADY_ACTED

    def test_unknown_target(self, engine):
        state = make_test_state()
        assert engine.submit(state, "u0", NightVerb.KILL, "ghost").error == ErrorCode.UNKNOWN_TARGET
        assert engine.submit(state, "u0", NightVerb.KILL, None).error == ErrorCode.UNKNOWN_TARGET

    def test_dead_target(self, engine):
        state = make_test_state()
        state.players["u4"].is_alive = False
        assert engine.submit(state, "u0", NightVerb.KILL, "u4").error == ErrorCode.DEAD_TARGET

    def test_werewolf_cannot_target_werewolf(self, engine):
        state = make_test_state()
        assert engine.submit(state, "u0", NightVerb.KILL, "u1").error == ErrorCode.FORBIDDEN_TARGET

    def test_save_requires_kill_target(self, engine):
        """Witch may only save the standing kill target."""
        state = make_test_state()
        assert engine.submit(state, "u3", NightVerb.SAVE, "u2").error == ErrorCode.NO_ONE_TO_SAVE

        engine.submit(state, "u0", NightVerb.KILL, "u4")
        assert engine.submit(state, "u3", NightVerb.SAVE, "u2").error == ErrorCode.NO_ONE_TO_SAVE
        assert engine.submit(state, "u3", NightVerb.SAVE, "u4")
        assert state.night.save_target == "u4"

    def test_rejection_leaves_state_untouched(self, engine):
        state = make_test_state()
        engine.submit(state, "u0", NightVerb.KILL, "u1")
        assert state.night.actions == {}
        assert not state.players["u0"].has_acted

    def test_skip_needs_no_target(self, engine):
        state = make_test_state()
        assert engine.submit(state, "u3", NightVerb.SKIP)
        assert state.players["u3"].has_acted


class TestRecording:
    """Tests for recorded targets."""

    def test_last_werewolf_submission_wins(self, engine):
        """The second werewolf's choice replaces the first."""
        state = make_test_state()
        engine.submit(state, "u0", NightVerb.KILL, "u2")
        engine.submit(state, "u1", NightVerb.KILL, "u5")
        assert state.night.kill_target == "u5"

    def test_check_recorded(self, engine):
        state = make_test_state()
        engine.submit(state, "u2", NightVerb.CHECK, "u1")
        assert state.night.checked_target == "u1"
        assert state.night.has_submitted("u2")


class TestCompletion:
    """Tests for night completion."""

    def test_incomplete_while_witch_pending(self, engine):
        """Werewolves and seer done, witch still pending."""
        state = make_test_state()
        engine.submit(state, "u0", NightVerb.KILL, "u2")
        engine.submit(state, "u1", NightVerb.KILL, "u2")
        engine.submit(state, "u2", NightVerb.CHECK, "u0")
        assert not engine.is_complete(state)
        assert [p.identity for p in engine.pending_actors(state)] == ["u3"]

        engine.submit(state, "u3", NightVerb.SKIP)
        assert engine.is_complete(state)

    def test_dead_roles_not_required(self, engine):
        """A dead seer does not hold up the night."""
        state = make_test_state()
        state.players["u2"].is_alive = False
        for wolf in ("u0", "u1"):
            engine.submit(state, wolf, NightVerb.KILL, "u5")
        engine.submit(state, "u3", NightVerb.SKIP)
        assert engine.is_complete(state)

    def test_mark_timeouts(self, engine):
        """Pending actors are marked as passed."""
        state = make_test_state()
        engine.submit(state, "u0", NightVerb.KILL, "u2")
        marked = engine.mark_timeouts(state)
        assert marked == ["u1", "u2", "u3"]
        assert engine.is_complete(state)

    def test_resolve_uses_recorded_targets(self, engine):
        state = make_test_state()
        engine.submit(state, "u0", NightVerb.KILL, "u5")
        engine.submit(state, "u3", NightVerb.POISON, "u0")
        outcome = engine.resolve(state)
        assert set(outcome.deaths) == {"u5", "u0"}


class TestEligibleTargets:
    """Tests for request target lists."""

    def test_kill_excludes_werewolves(self, engine):
        state = make_test_state()
        targets = engine.eligible_targets(state, state.players["u0"], NightVerb.KILL)
        assert targets == ["Player2", "Player3", "Player4", "Player5"]

    def test_save_lists_only_kill_target(self, engine):
        state = make_test_state()
        witch = state.players["u3"]
        assert engine.eligible_targets(state, witch, NightVerb.SAVE) == []
        state.night.kill_target = "u4"
        assert engine.eligible_targets(state, witch, NightVerb.SAVE) == ["Player4"]

    def test_verbs_for_roles(self, engine):
        assert engine.verbs_for(Role.WITCH) == (NightVerb.SAVE, NightVerb.POISON, NightVerb.SKIP)
        assert engine.verbs_for(Role.HUNTER) == ()
        assert engine.verbs_for(None) == ()
