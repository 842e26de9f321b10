"""NightResolutionEngine - validates, records and completes night submissions.

Verbs by role:
- Werewolf: kill <living non-werewolf>. The latest werewolf submission is the
  standing kill target for the whole pack.
- Seer: check <living player>. Read-only; the caller reveals the result.
- Witch: save <standing kill target> | poison <living player> | skip.
- Hunter, Villager: none.

Each role holder acts at most once per night. The night is complete when every
living werewolf, the living seer and the living witch have acted.
"""

from typing import Optional

from wolfchat.engine.errors import CommandResult
from wolfchat.engine.game_state import GameState
from wolfchat.engine.night_action_resolver import NightActionResolver
from wolfchat.events.game_events import (
    ErrorCode,
    NightAction,
    NightOutcome,
    NightVerb,
    Phase,
)
from wolfchat.models.player import Player, Role
from wolfchat.models.roles import get_definition


# Verbs that need a target argument
TARGETED_VERBS = {NightVerb.KILL, NightVerb.CHECK, NightVerb.SAVE, NightVerb.POISON}


class NightResolutionEngine:
    """Night state machine nested inside the NIGHT phase."""

    def __init__(self, resolver: Optional[NightActionResolver] = None):
        self._resolver = resolver or NightActionResolver()

    # ------------------------------------------------------------------
    # Role helpers
    # ------------------------------------------------------------------

    @staticmethod
    def verbs_for(role: Optional[Role]) -> tuple[NightVerb, ...]:
        if role is None:
            return ()
        return tuple(NightVerb(v) for v in get_definition(role).night_verbs)

    def night_actors(self, state: GameState) -> list[Player]:
        """Living players whose role has a night verb."""
        return [p for p in state.living_players() if self.verbs_for(p.role)]

    def pending_actors(self, state: GameState) -> list[Player]:
        return [p for p in self.night_actors(state) if not p.has_acted]

    def eligible_targets(self, state: GameState, player: Player, verb: NightVerb) -> list[str]:
        """Display names a player may name with a verb right now."""
        if verb == NightVerb.SKIP:
            return []
        if verb == NightVerb.SAVE:
            kill_target = state.night.kill_target
            if kill_target is None or not state.is_alive(kill_target):
                return []
            return [state.display_name(kill_target)]
        living = state.living_players()
        if verb == NightVerb.KILL:
            return [p.name for p in living if p.role != Role.WEREWOLF]
        return [p.name for p in living]

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def validate(
        self,
        state: GameState,
        actor: str,
        verb: NightVerb,
        target: Optional[str],
    ) -> CommandResult:
        """Check a submission against phase, role, and target rules.

        Args:
            state: Current game state.
            actor: Identity of the submitting player.
            verb: Requested night verb.
            target: Target identity (already resolved from the argument) or None.

        Returns:
            Accepted result, or a rejection carrying the first violated rule.
        """
        player = state.get_player(actor)
        if player is None:
            return CommandResult.reject(ErrorCode.NOT_YOUR_TURN, "You are not seated in this game.")
        if state.phase != Phase.NIGHT:
            return CommandResult.reject(ErrorCode.INVALID_PHASE, "Night actions are only allowed at night.")
        if not player.is_alive:
            return CommandResult.reject(ErrorCode.ACTOR_DEAD)
        if verb not in self.verbs_for(player.role):
            return CommandResult.reject(ErrorCode.NOT_YOUR_TURN)
        if player.has_acted or state.night.has_submitted(actor):
            return CommandResult.reject(ErrorCode.ALREADY_ACTED)

        if verb not in TARGETED_VERBS:
            return CommandResult.accept()

        target_player = state.get_player(target) if target is not None else None
        if target_player is None:
            return CommandResult.reject(ErrorCode.UNKNOWN_TARGET)
        if not target_player.is_alive:
            return CommandResult.reject(ErrorCode.DEAD_TARGET)
        if verb == NightVerb.KILL and target_player.role == Role.WEREWOLF:
            return CommandResult.reject(ErrorCode.FORBIDDEN_TARGET)
        if verb == NightVerb.SAVE and target_player.identity != state.night.kill_target:
            return CommandResult.reject(ErrorCode.NO_ONE_TO_SAVE)
        return CommandResult.accept()

    def submit(
        self,
        state: GameState,
        actor: str,
        verb: NightVerb,
        target: Optional[str] = None,
    ) -> CommandResult:
        """Validate and record a night submission. No state change on rejection."""
        result = self.validate(state, actor, verb, target)
        if not result:
            return result

        store = state.night
        if verb not in TARGETED_VERBS:
            target = None
        store.record(actor, NightAction(verb=verb, target=target))

        if verb == NightVerb.KILL:
            store.kill_target = target
        elif verb == NightVerb.SAVE:
            store.save_target = target
        elif verb == NightVerb.POISON:
            store.poison_target = target
        elif verb == NightVerb.CHECK:
            store.checked_target = target

        state.players[actor].has_acted = True
        return CommandResult.accept()

    # ------------------------------------------------------------------
    # Completion and resolution
    # ------------------------------------------------------------------

    def is_complete(self, state: GameState) -> bool:
        """True once every living werewolf, seer and witch has acted."""
        return not self.pending_actors(state)

    def mark_timeouts(self, state: GameState) -> list[str]:
        """Implicit pass for every night actor who has not acted.

        Returns:
            Identities that were marked.
        """
        marked = []
        for player in self.pending_actors(state):
            player.has_acted = True
            marked.append(player.identity)
        return marked

    def resolve(self, state: GameState) -> NightOutcome:
        """Compute the night's deaths from the recorded targets."""
        return self._resolver.resolve(state, state.night)
