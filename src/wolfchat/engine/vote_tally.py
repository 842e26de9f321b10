"""Vote tally for the VOTE phase.

Key rules:
- One vote per living player per day, no revotes
- Target must be a living player
- Strict unique maximum is eliminated; a tie at the maximum eliminates no one
- Players who never voted abstain
"""

from collections import Counter

from wolfchat.engine.errors import CommandResult
from wolfchat.engine.game_state import GameState
from wolfchat.events.game_events import ErrorCode, Phase, VoteOutcome


class VoteTally:
    """Records votes and decides elimination or tie."""

    def cast(self, state: GameState, voter: str, target: str | None) -> CommandResult:
        """Validate and record one vote. No state change on rejection."""
        player = state.get_player(voter)
        if player is None:
            return CommandResult.reject(ErrorCode.NOT_YOUR_TURN, "You are not seated in this game.")
        if state.phase != Phase.VOTE:
            return CommandResult.reject(ErrorCode.INVALID_PHASE, "Voting is only open during the vote phase.")
        if not player.is_alive:
            return CommandResult.reject(ErrorCode.ACTOR_DEAD)
        if player.has_voted or voter in state.votes:
            return CommandResult.reject(ErrorCode.ALREADY_VOTED)

        target_player = state.get_player(target) if target is not None else None
        if target_player is None:
            return CommandResult.reject(ErrorCode.UNKNOWN_TARGET)
        if not target_player.is_alive:
            return CommandResult.reject(ErrorCode.DEAD_TARGET)

        state.votes[voter] = target_player.identity
        player.has_voted = True
        return CommandResult.accept()

    def is_complete(self, state: GameState) -> bool:
        """True once every living player has voted (or abstained)."""
        return all(p.has_voted for p in state.living_players())

    def mark_abstentions(self, state: GameState) -> list[str]:
        marked = []
        for player in state.living_players():
            if not player.has_voted:
                player.has_voted = True
                marked.append(player.identity)
        return marked

    def tally(self, state: GameState) -> VoteOutcome:
        """Count votes per target and find the strict maximum.

        Votes naming a player who has since left or died (e.g. shot by the
        hunter mid-vote) are ignored.
        """
        counts = Counter(
            target for target in state.votes.values() if state.is_alive(target)
        )
        if not counts:
            return VoteOutcome(day=state.day)

        top = max(counts.values())
        leaders = sorted(target for target, count in counts.items() if count == top)
        if len(leaders) == 1:
            return VoteOutcome(day=state.day, votes=dict(counts), eliminated=leaders[0])
        return VoteOutcome(day=state.day, votes=dict(counts), tied_players=leaders)
