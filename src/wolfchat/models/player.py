"""Player and Role models."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class Role(str, Enum):
    """Player roles in the game."""

    WEREWOLF = "WEREWOLF"
    SEER = "SEER"
    WITCH = "WITCH"
    HUNTER = "HUNTER"
    VILLAGER = "VILLAGER"


class Faction(str, Enum):
    """Factions for victory conditions."""

    WEREWOLF = "WEREWOLF"
    VILLAGER = "VILLAGER"


class Player(BaseModel):
    """Represents a seated player.

    Uses identity (the substrate's connection-independent id) as primary key.
    Name is stored for display purposes. Role stays None until the game starts.
    """

    identity: str
    name: str
    role: Optional[Role] = None
    is_alive: bool = True
    has_acted: bool = False
    has_voted: bool = False
    joined_order: int = 0  # host succession order
