"""Role catalog: static definitions for every role in the game."""

from pydantic import BaseModel, ConfigDict

from wolfchat.models.player import Role, Faction


class RoleDefinition(BaseModel):
    """Static definition of a role."""

    role: Role
    fixed_count: int = 0  # 0 = fills the remaining seats
    acts_at_night: bool = False
    night_verbs: tuple[str, ...] = ()
    faction: Faction = Faction.VILLAGER
    description: str = ""

    model_config = ConfigDict(frozen=True)


ROLE_CATALOG: dict[Role, RoleDefinition] = {
    Role.WEREWOLF: RoleDefinition(
        role=Role.WEREWOLF,
        fixed_count=2,
        acts_at_night=True,
        night_verbs=("kill",),
        faction=Faction.WEREWOLF,
        description="Each night, agree with your pack on one villager to kill (/kill <name>).",
    ),
    Role.SEER: RoleDefinition(
        role=Role.SEER,
        fixed_count=1,
        acts_at_night=True,
        night_verbs=("check",),
        description="Each night, learn whether one player is a werewolf (/check <name>).",
    ),
    Role.WITCH: RoleDefinition(
        role=Role.WITCH,
        fixed_count=1,
        acts_at_night=True,
        night_verbs=("save", "poison", "skip"),
        description=(
            "Each night, either save the werewolves' victim (/save <name>), "
            "poison someone (/poison <name>), or do nothing (/skip)."
        ),
    ),
    Role.HUNTER: RoleDefinition(
        role=Role.HUNTER,
        fixed_count=1,
        description="If the village votes you out, take one last shot (/shoot <name>).",
    ),
    Role.VILLAGER: RoleDefinition(
        role=Role.VILLAGER,
        description="Find the werewolves and vote them out during the day.",
    ),
}


def get_definition(role: Role) -> RoleDefinition:
    return ROLE_CATALOG[role]


def faction_of(role: Role) -> Faction:
    return ROLE_CATALOG[role].faction


def build_role_deck(
    player_count: int,
    role_counts: dict[Role, int] | None = None,
) -> list[Role]:
    """Build the unshuffled role multiset for a game.

    Fixed-count roles come first; villagers fill every remaining seat.

    Args:
        player_count: Number of seated players.
        role_counts: Optional override of fixed counts per role. Defaults to
            the catalog's fixed counts.

    Returns:
        List of roles with exactly player_count entries.

    Raises:
        ValueError: If the fixed roles do not fit in player_count seats.
    """
    if role_counts is None:
        role_counts = {
            role: definition.fixed_count
            for role, definition in ROLE_CATALOG.items()
            if definition.fixed_count > 0
        }

    deck: list[Role] = []
    for role, count in role_counts.items():
        deck.extend([role] * count)

    if len(deck) > player_count:
        raise ValueError(
            f"{len(deck)} fixed roles do not fit in {player_count} seats"
        )

    deck.extend([Role.VILLAGER] * (player_count - len(deck)))
    return deck
