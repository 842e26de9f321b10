"""Models package."""

from wolfchat.models.player import (
    Role,
    Faction,
    Player,
)
from wolfchat.models.roles import (
    RoleDefinition,
    ROLE_CATALOG,
    get_definition,
    faction_of,
    build_role_deck,
)

__all__ = [
    "Role",
    "Faction",
    "Player",
    "RoleDefinition",
    "ROLE_CATALOG",
    "get_definition",
    "faction_of",
    "build_role_deck",
]
