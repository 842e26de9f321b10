"""Bot players for simulated rooms."""

from wolfchat.ai.stub_ai import (
    StubPlayer,
    create_stub_player,
)

__all__ = [
    "StubPlayer",
    "create_stub_player",
]
