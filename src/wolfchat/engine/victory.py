"""Win condition evaluation."""

from wolfchat.engine.game_state import GameState
from wolfchat.events.game_events import VictoryOutcome
from wolfchat.models.player import Faction
from wolfchat.models.roles import faction_of


class WinEvaluator:
    """Checks terminal conditions after any event that can change who is alive.

    - No one alive: game over, no winner
    - No werewolves alive: villagers win
    - Werewolves at least equal to everyone else alive: werewolves win
    """

    def evaluate(self, state: GameState) -> VictoryOutcome:
        living = state.living_players()
        alive_total = len(living)
        alive_wolves = sum(
            1 for p in living
            if p.role is not None and faction_of(p.role) == Faction.WEREWOLF
        )

        outcome = VictoryOutcome(alive_total=alive_total, alive_wolves=alive_wolves)
        if alive_total == 0:
            outcome.is_game_over = True
        elif alive_wolves == 0:
            outcome.is_game_over = True
            outcome.winner = Faction.VILLAGER
        elif alive_wolves >= alive_total - alive_wolves:
            outcome.is_game_over = True
            outcome.winner = Faction.WEREWOLF
        return outcome
