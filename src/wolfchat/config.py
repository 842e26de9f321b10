"""Room settings: phase durations, seat bounds and role roster.

Values come from defaults, then ``WOLFCHAT_*`` environment variables or a
``.env`` file, e.g. ``WOLFCHAT_NIGHT_SECONDS=45``.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wolfchat.events.game_events import Phase
from wolfchat.models.player import Role


class GameSettings(BaseSettings):
    night_seconds: float = Field(default=60.0, gt=0)
    day_seconds: float = Field(default=120.0, gt=0)
    vote_seconds: float = Field(default=60.0, gt=0)
    # Pause between the last night action and resolution
    resolution_delay: float = Field(default=3.0, ge=0)
    tick_interval: float = Field(default=1.0, gt=0)
    min_players: int = Field(default=5, ge=1)
    max_players: int = Field(default=8, ge=1)
    role_counts: dict[Role, int] = Field(
        default_factory=lambda: {
            Role.WEREWOLF: 2,
            Role.SEER: 1,
            Role.WITCH: 1,
            Role.HUNTER: 1,
        }
    )

    model_config = SettingsConfigDict(
        env_prefix="WOLFCHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "GameSettings":
        if self.min_players > self.max_players:
            raise ValueError(
                f"min_players ({self.min_players}) exceeds max_players ({self.max_players})"
            )
        fixed = sum(self.role_counts.values())
        if fixed > self.min_players:
            raise ValueError(
                f"{fixed} fixed roles do not fit in min_players ({self.min_players})"
            )
        if self.role_counts.get(Role.WEREWOLF, 0) < 1:
            raise ValueError("at least one werewolf is required")
        return self

    def phase_seconds(self, phase: Phase) -> float:
        """Duration for a timed phase (night, day or vote)."""
        return {
            Phase.NIGHT: self.night_seconds,
            Phase.DAY: self.day_seconds,
            Phase.VOTE: self.vote_seconds,
        }[Phase(phase)]
