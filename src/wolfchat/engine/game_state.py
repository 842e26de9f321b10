"""Game state management for a single room."""

from typing import Optional
from pydantic import BaseModel, Field

from wolfchat.engine.night_action_store import NightActionStore
from wolfchat.events.game_events import Phase
from wolfchat.models.player import Player, Role, Faction


class GameState(BaseModel):
    """Represents the current state of the room's game.

    Players are keyed by identity and kept in join order. Only GameSession
    mutates an instance; everyone else reads snapshots built from it.
    """

    phase: Phase = Phase.WAITING
    day: int = 1  # current day number
    host: Optional[str] = None  # identity of the host
    players: dict[str, Player] = Field(default_factory=dict)  # identity -> Player
    votes: dict[str, str] = Field(default_factory=dict)  # voter -> target
    night: NightActionStore = Field(default_factory=NightActionStore)
    pending_hunter: Optional[str] = None  # hunter holding an unused shot
    winner: Optional[Faction] = None
    resolved_epoch: int = -1  # last epoch a night/vote resolution ran under
    next_join_order: int = 0

    # ------------------------------------------------------------------
    # Seats
    # ------------------------------------------------------------------

    def seat(self, identity: str, name: str) -> Player:
        """Add a player; the first seated player becomes host."""
        player = Player(identity=identity, name=name, joined_order=self.next_join_order)
        self.next_join_order += 1
        self.players[identity] = player
        if self.host is None:
            self.host = identity
        return player

    def unseat(self, identity: str) -> Optional[Player]:
        """Remove a player, transferring host to the earliest joiner left."""
        player = self.players.pop(identity, None)
        if player is None:
            return None
        self.votes.pop(identity, None)
        self.night.forget_player(identity)
        if self.pending_hunter == identity:
            self.pending_hunter = None
        if self.host == identity:
            remaining = sorted(self.players.values(), key=lambda p: p.joined_order)
            self.host = remaining[0].identity if remaining else None
        return player

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self.phase in (Phase.NIGHT, Phase.DAY, Phase.VOTE)

    def get_player(self, identity: str) -> Optional[Player]:
        return self.players.get(identity)

    def is_alive(self, identity: str) -> bool:
        player = self.players.get(identity)
        return player is not None and player.is_alive

    def is_werewolf(self, identity: str) -> bool:
        player = self.players.get(identity)
        return player is not None and player.role == Role.WEREWOLF

    def living_players(self) -> list[Player]:
        return [p for p in self.players.values() if p.is_alive]

    def living_with_role(self, role: Role) -> list[Player]:
        return [p for p in self.players.values() if p.is_alive and p.role == role]

    def find_player(self, token: str) -> Optional[Player]:
        """Resolve a command argument to a player.

        Matches identity first, then display name case-insensitively.
        """
        if token in self.players:
            return self.players[token]
        wanted = token.strip().lstrip("@").casefold()
        for player in self.players.values():
            if player.name.casefold() == wanted:
                return player
        return None

    def display_name(self, identity: Optional[str]) -> str:
        player = self.players.get(identity) if identity is not None else None
        return player.name if player else str(identity)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def kill(self, identity: str) -> bool:
        """Mark a player dead. Returns False when there was no one to kill."""
        player = self.players.get(identity)
        if player is None or not player.is_alive:
            return False
        player.is_alive = False
        return True

    def reset_acted(self) -> None:
        for player in self.living_players():
            player.has_acted = False

    def reset_voted(self) -> None:
        for player in self.living_players():
            player.has_voted = False
