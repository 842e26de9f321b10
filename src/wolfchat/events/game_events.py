"""Game enums and resolution outcome records."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from wolfchat.models.player import Faction


class Phase(str, Enum):
    """Phases the scheduler advances through."""

    WAITING = "waiting"
    NIGHT = "night"
    DAY = "day"
    VOTE = "vote"
    ENDED = "ended"


class NightVerb(str, Enum):
    """Night action verbs."""

    KILL = "kill"
    CHECK = "check"
    SAVE = "save"
    POISON = "poison"
    SKIP = "skip"


class DeathCause(str, Enum):
    """Cause of death."""

    WEREWOLF_KILL = "WEREWOLF_KILL"
    POISON = "POISON"
    VOTE = "VOTE"
    HUNTER_SHOT = "HUNTER_SHOT"


class ErrorCode(str, Enum):
    """Rejection reasons delivered privately to the acting player."""

    INVALID_PHASE = "InvalidPhase"
    NOT_YOUR_TURN = "NotYourTurn"
    ACTOR_DEAD = "ActorDead"
    ALREADY_ACTED = "AlreadyActed"
    ALREADY_VOTED = "AlreadyVoted"
    UNKNOWN_TARGET = "UnknownTarget"
    DEAD_TARGET = "DeadTarget"
    FORBIDDEN_TARGET = "ForbiddenTarget"
    NO_ONE_TO_SAVE = "NoOneToSave"
    INSUFFICIENT_PLAYERS = "InsufficientPlayers"
    NOT_HOST = "NotHost"
    GAME_ALREADY_RUNNING = "GameAlreadyRunning"
    ALREADY_SEATED = "AlreadySeated"
    SEATS_FULL = "SeatsFull"
    UNKNOWN_COMMAND = "UnknownCommand"


class NightAction(BaseModel):
    """A single recorded night submission. Target None = skip."""

    verb: NightVerb
    target: Optional[str] = None


class NightOutcome(BaseModel):
    """Night phase has resolved with all deaths calculated."""

    day: int = 1
    deaths: dict[str, DeathCause] = Field(default_factory=dict)  # identity -> cause
    saved: bool = False

    def __str__(self) -> str:
        if not self.deaths:
            return "NightOutcome(no deaths)"
        death_strs = [f"{who}({cause.value})" for who, cause in sorted(self.deaths.items())]
        return f"NightOutcome(deaths={death_strs})"


class VoteOutcome(BaseModel):
    """Voting has resolved in an elimination, a tie, or nothing."""

    day: int = 1
    votes: dict[str, int] = Field(default_factory=dict)  # target -> vote count
    tied_players: list[str] = Field(default_factory=list)  # non-empty means no elimination
    eliminated: Optional[str] = None

    @property
    def top_count(self) -> int:
        return max(self.votes.values(), default=0)

    def __str__(self) -> str:
        if self.eliminated is not None:
            return f"VoteOutcome(eliminated={self.eliminated}, votes={self.top_count})"
        if self.tied_players:
            return f"VoteOutcome(tie={self.tied_players})"
        return "VoteOutcome(no votes)"


class VictoryOutcome(BaseModel):
    """Result of a win check. winner None with is_game_over means no survivors."""

    is_game_over: bool = False
    winner: Optional[Faction] = None
    alive_total: int = 0
    alive_wolves: int = 0

    def __str__(self) -> str:
        if not self.is_game_over:
            return "VictoryOutcome(ongoing)"
        if self.winner is None:
            return "VictoryOutcome(no survivors)"
        return f"VictoryOutcome({self.winner.value} wins)"
