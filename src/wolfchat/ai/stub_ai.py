"""Stub bot players for simulations and integration tests.

A StubPlayer reads only what a real client would see: its own private
messages and the public gameState. It answers with a chat command line,
always picking from the targets the server offered, so it never needs to
know game rules beyond the verb names.
"""

import random
from typing import Optional

from wolfchat.events.game_events import Phase
from wolfchat.events.messages import (
    GameStateMessage,
    NightActionRequest,
    OutboundMessage,
    YourRole,
)
from wolfchat.models.player import Role


class StubPlayer:
    """A bot seat that generates valid random commands."""

    def __init__(self, identity: str, name: str, seed: Optional[int] = None):
        self.identity = identity
        self.name = name
        self.role: Optional[Role] = None
        self.teammates: list[str] = []
        self._rng = random.Random(seed)
        self._requests: dict[str, list[str]] = {}  # verb -> eligible targets
        self._seen = 0

    def observe(self, messages: list[OutboundMessage]) -> None:
        """Consume new private/broadcast messages (the full inbox is fine)."""
        for message in messages[self._seen:]:
            if isinstance(message, YourRole):
                self.role = message.role
                self.teammates = list(message.teammates)
                self._requests = {}
            elif isinstance(message, NightActionRequest):
                self._requests[message.verb] = list(message.eligible_targets)
        self._seen = len(messages)

    def decide(self, view: GameStateMessage) -> Optional[str]:
        """Return a command line for the current phase, or None to stay quiet."""
        me = next((p for p in view.players if p.name == self.name), None)
        if me is None:
            return None

        if "shoot" in self._requests and not me.is_alive:
            targets = self._requests.pop("shoot")
            living = {p.name for p in view.players if p.is_alive}
            targets = [t for t in targets if t in living]
            if targets:
                return f"/shoot {self._rng.choice(targets)}"

        if not me.is_alive:
            return None
        if view.phase == Phase.NIGHT and not me.has_acted:
            return self._night_command(view)
        if view.phase == Phase.VOTE and not me.has_voted:
            candidates = [p.name for p in view.players if p.is_alive and p.name != self.name]
            if self.role == Role.WEREWOLF:
                candidates = [c for c in candidates if c not in self.teammates] or candidates
            if candidates:
                return f"/vote {self._rng.choice(candidates)}"
        return None

    def _night_command(self, view: GameStateMessage) -> Optional[str]:
        living = {p.name for p in view.players if p.is_alive}

        def pick(verb: str) -> Optional[str]:
            targets = [t for t in self._requests.get(verb, []) if t in living]
            return self._rng.choice(targets) if targets else None

        if self.role == Role.WEREWOLF:
            target = pick("kill")
            return f"/kill {target}" if target else None
        if self.role == Role.SEER:
            candidates = [t for t in self._requests.get("check", []) if t in living and t != self.name]
            return f"/check {self._rng.choice(candidates)}" if candidates else None
        if self.role == Role.WITCH:
            save = pick("save")
            if save and save != self.name and self._rng.random() < 0.5:
                return f"/save {save}"
            if self._rng.random() < 0.25:
                target = pick("poison")
                if target and target != self.name:
                    return f"/poison {target}"
            return "/skip"
        return None


def create_stub_player(identity: str, name: str, seed: Optional[int] = None) -> StubPlayer:
    """Create a stub bot seat."""
    return StubPlayer(identity=identity, name=name, seed=seed)
