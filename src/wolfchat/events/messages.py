"""Outbound message shapes handed to the chat substrate.

Only the field set is fixed here. Wire encoding belongs to the substrate; a
JSON transport would typically call ``message.model_dump(by_alias=True)``
which yields camelCase keys plus a ``type`` discriminator.
"""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel

from wolfchat.events.game_events import Phase, ErrorCode
from wolfchat.models.player import Role, Faction


class CamelModel(BaseModel):
    """Dumps with camelCase aliases, accepts snake_case names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OutboundMessage(CamelModel):
    """Base class for every message sent to players."""

    type: str

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# ============================================================================
# Private messages
# ============================================================================


class YourRole(OutboundMessage):
    """Sent once per player at game start."""

    type: Literal["yourRole"] = "yourRole"
    role: Role
    description: str
    teammates: list[str] = Field(default_factory=list)  # werewolves only


class NightActionRequest(OutboundMessage):
    """Tells a role holder which verb they may use and on whom."""

    type: Literal["nightActionRequest"] = "nightActionRequest"
    verb: str
    eligible_targets: list[str] = Field(default_factory=list)


class ActionConfirm(OutboundMessage):
    type: Literal["actionConfirm"] = "actionConfirm"


class ErrorMessage(OutboundMessage):
    type: Literal["error"] = "error"
    code: ErrorCode
    message: str = ""


class SeerResultMessage(OutboundMessage):
    type: Literal["seerResult"] = "seerResult"
    target_name: str
    is_werewolf: bool


# ============================================================================
# Broadcast messages
# ============================================================================


class GameEventMessage(OutboundMessage):
    """Narrative line (deaths, votes, ties, joins)."""

    type: Literal["gameEvent"] = "gameEvent"
    text: str


class PhaseChange(OutboundMessage):
    type: Literal["phaseChange"] = "phaseChange"
    phase: Phase
    day_count: int


class PhaseTimer(OutboundMessage):
    type: Literal["phaseTimer"] = "phaseTimer"
    phase: Phase
    remaining_seconds: int


class PlayerView(CamelModel):
    """Public view of one seat. Role only filled once the game has ended."""

    name: str
    is_alive: bool
    has_voted: bool
    has_acted: bool
    role: Optional[Role] = None

    @model_serializer(mode="wrap")
    def omit_hidden_role(self, handler: SerializerFunctionWrapHandler) -> dict:
        data = handler(self)
        if self.role is None:
            data.pop("role", None)
        return data


class GameStateMessage(OutboundMessage):
    type: Literal["gameState"] = "gameState"
    is_playing: bool
    phase: Phase
    day_count: int
    host_identity: Optional[str] = None
    player_count: int
    players: list[PlayerView] = Field(default_factory=list)


class FinalPlayer(CamelModel):
    name: str
    role: Optional[Role] = None
    is_alive: bool


class GameEnd(OutboundMessage):
    """Broadcast once. winning_faction None means no survivors."""

    type: Literal["gameEnd"] = "gameEnd"
    winning_faction: Optional[Faction] = None
    players: list[FinalPlayer] = Field(default_factory=list)
