"""Events package."""

from wolfchat.events.game_events import (
    # Enums
    Phase,
    NightVerb,
    DeathCause,
    ErrorCode,
    # Records
    NightAction,
    NightOutcome,
    VoteOutcome,
    VictoryOutcome,
)
from wolfchat.events.messages import (
    OutboundMessage,
    YourRole,
    NightActionRequest,
    ActionConfirm,
    ErrorMessage,
    SeerResultMessage,
    GameEventMessage,
    PhaseChange,
    PhaseTimer,
    PlayerView,
    GameStateMessage,
    FinalPlayer,
    GameEnd,
)

__all__ = [
    "Phase",
    "NightVerb",
    "DeathCause",
    "ErrorCode",
    "NightAction",
    "NightOutcome",
    "VoteOutcome",
    "VictoryOutcome",
    "OutboundMessage",
    "YourRole",
    "NightActionRequest",
    "ActionConfirm",
    "ErrorMessage",
    "SeerResultMessage",
    "GameEventMessage",
    "PhaseChange",
    "PhaseTimer",
    "PlayerView",
    "GameStateMessage",
    "FinalPlayer",
    "GameEnd",
]
