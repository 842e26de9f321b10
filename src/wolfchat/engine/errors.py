"""Typed results for session operations."""

from typing import Optional
from pydantic import BaseModel

from wolfchat.events.game_events import ErrorCode


DEFAULT_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_PHASE: "That can't be done in the current phase.",
    ErrorCode.NOT_YOUR_TURN: "You have no such action right now.",
    ErrorCode.ACTOR_DEAD: "Dead players can't act.",
    ErrorCode.ALREADY_ACTED: "You have already acted tonight.",
    ErrorCode.ALREADY_VOTED: "You have already voted today.",
    ErrorCode.UNKNOWN_TARGET: "No such player.",
    ErrorCode.DEAD_TARGET: "That player is already dead.",
    ErrorCode.FORBIDDEN_TARGET: "You can't target a fellow werewolf.",
    ErrorCode.NO_ONE_TO_SAVE: "That player is not the werewolves' victim.",
    ErrorCode.INSUFFICIENT_PLAYERS: "Not enough (or too many) players to start.",
    ErrorCode.NOT_HOST: "Only the host can do that.",
    ErrorCode.GAME_ALREADY_RUNNING: "A game is already running.",
    ErrorCode.ALREADY_SEATED: "You are already seated.",
    ErrorCode.SEATS_FULL: "All seats are taken.",
    ErrorCode.UNKNOWN_COMMAND: "Unknown command. Try /help.",
}


class CommandResult(BaseModel):
    """Outcome of a single session operation.

    A rejected result carries the error code and never implies a state change.
    """

    ok: bool = True
    error: Optional[ErrorCode] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def accept(cls, message: str = "") -> "CommandResult":
        return cls(ok=True, message=message)

    @classmethod
    def reject(cls, code: ErrorCode, message: Optional[str] = None) -> "CommandResult":
        return cls(ok=False, error=code, message=message or DEFAULT_MESSAGES[code])
