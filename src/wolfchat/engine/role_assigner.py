"""Role dealing at game start."""

import random
from typing import Optional

from wolfchat.engine.errors import CommandResult
from wolfchat.engine.game_state import GameState
from wolfchat.events.game_events import ErrorCode
from wolfchat.models.player import Role
from wolfchat.models.roles import build_role_deck


class RoleAssigner:
    """Deals a shuffled role multiset onto seated players.

    The deck is {werewolf x2, seer, witch, hunter} padded with villagers,
    shuffled with random.Random.shuffle (Fisher-Yates) and assigned by seat
    order. Passing the same seed and seat order reproduces the deal.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        min_players: int = 5,
        max_players: int = 8,
        role_counts: Optional[dict[Role, int]] = None,
    ):
        self._rng = rng or random.Random()
        self.min_players = min_players
        self.max_players = max_players
        self.role_counts = role_counts

    def check_seat_count(self, count: int) -> CommandResult:
        if not self.min_players <= count <= self.max_players:
            return CommandResult.reject(
                ErrorCode.INSUFFICIENT_PLAYERS,
                f"Need {self.min_players}-{self.max_players} players to start, have {count}.",
            )
        return CommandResult.accept()

    def assign(self, identities: list[str]) -> dict[str, Role]:
        """Create shuffled role assignments for the given seat order.

        Args:
            identities: Seated player identities in seat order.

        Returns:
            Dict mapping identity -> Role.

        Raises:
            ValueError: If the seat count is outside the allowed range.
        """
        if not self.check_seat_count(len(identities)):
            raise ValueError(f"cannot deal roles to {len(identities)} players")

        roles = build_role_deck(len(identities), self.role_counts)
        self._rng.shuffle(roles)
        return dict(zip(identities, roles))

    def deal(self, state: GameState) -> dict[str, Role]:
        """Assign roles to every seated player and reset their flags."""
        assignments = self.assign(list(state.players.keys()))
        for identity, role in assignments.items():
            player = state.players[identity]
            player.role = role
            player.is_alive = True
            player.has_acted = False
            player.has_voted = False
        return assignments

    @staticmethod
    def werewolf_peers(state: GameState) -> dict[str, list[str]]:
        """Map each werewolf identity to its teammates' display names."""
        wolves = [p for p in state.players.values() if p.role == Role.WEREWOLF]
        return {
            wolf.identity: [other.name for other in wolves if other.identity != wolf.identity]
            for wolf in wolves
        }
