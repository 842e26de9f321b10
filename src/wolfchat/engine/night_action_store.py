"""Night action storage for the active night."""

from typing import Optional
from pydantic import BaseModel, Field

from wolfchat.events.game_events import NightAction


class NightActionStore(BaseModel):
    """Tracks submissions and pending effects for one night.

    Everything here is ephemeral and cleared when the next night begins:
    - actions: actor identity -> submitted NightAction
    - kill_target: standing werewolf victim (last werewolf submission wins)
    - save_target: witch's save target
    - poison_target: witch's poison target
    - checked_target: seer's checked player
    """

    actions: dict[str, NightAction] = Field(default_factory=dict)
    kill_target: Optional[str] = None
    save_target: Optional[str] = None
    poison_target: Optional[str] = None
    checked_target: Optional[str] = None

    def record(self, actor: str, action: NightAction) -> None:
        self.actions[actor] = action

    def has_submitted(self, actor: str) -> bool:
        return actor in self.actions

    def forget_player(self, identity: str) -> None:
        """Drop every reference to a player who left their seat."""
        self.actions.pop(identity, None)
        for field in ("kill_target", "save_target", "poison_target", "checked_target"):
            if getattr(self, field) == identity:
                setattr(self, field, None)

    def reset_for_new_night(self) -> None:
        """Clear all submissions and targets."""
        self.actions = {}
        self.kill_target = None
        self.save_target = None
        self.poison_target = None
        self.checked_target = None
