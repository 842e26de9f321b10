"""Broadcaster boundary between the game session and the chat substrate.

The substrate owns connections. The session only ever calls the three methods
of the Broadcaster protocol; delivery is fire-and-forget and best effort.
"""

from typing import Callable, Optional, Protocol

from rich.console import Console

from wolfchat.events.messages import (
    OutboundMessage,
    ErrorMessage,
    GameEventMessage,
    GameEnd,
    PhaseChange,
    PhaseTimer,
    SeerResultMessage,
    YourRole,
    NightActionRequest,
)


RosterPredicate = Callable[[str], bool]


class Broadcaster(Protocol):
    """What the session consumes from the chat substrate."""

    def deliver_to_identity(self, identity: str, message: OutboundMessage) -> None:
        """Private, at-most-once best-effort send."""
        ...

    def deliver_to_roster(self, predicate: RosterPredicate, message: OutboundMessage) -> None:
        """Send to every connected identity matching predicate."""
        ...

    def roster_snapshot(self) -> dict[str, str]:
        """Connected identities mapped to display names."""
        ...


def everyone(identity: str) -> bool:
    return True


class RecordingBroadcaster:
    """In-memory substrate that records every delivery.

    Used by tests and by the simulated room in ``wolfchat.play``.
    """

    def __init__(self, roster: Optional[dict[str, str]] = None):
        self.roster: dict[str, str] = dict(roster or {})
        self.inbox: dict[str, list[OutboundMessage]] = {}
        self.log: list[tuple[str, OutboundMessage]] = []  # (recipient, message)

    def connect(self, identity: str, name: str) -> None:
        self.roster[identity] = name

    def disconnect(self, identity: str) -> None:
        self.roster.pop(identity, None)

    def deliver_to_identity(self, identity: str, message: OutboundMessage) -> None:
        if identity not in self.roster:
            return
        self.inbox.setdefault(identity, []).append(message)
        self.log.append((identity, message))

    def deliver_to_roster(self, predicate: RosterPredicate, message: OutboundMessage) -> None:
        for identity in list(self.roster):
            if predicate(identity):
                self.deliver_to_identity(identity, message)

    def roster_snapshot(self) -> dict[str, str]:
        return dict(self.roster)

    def messages_for(self, identity: str, message_type: Optional[type] = None) -> list[OutboundMessage]:
        messages = self.inbox.get(identity, [])
        if message_type is None:
            return list(messages)
        return [m for m in messages if isinstance(m, message_type)]

    def last_for(self, identity: str, message_type: Optional[type] = None) -> Optional[OutboundMessage]:
        messages = self.messages_for(identity, message_type)
        return messages[-1] if messages else None

    def clear(self) -> None:
        self.inbox = {}
        self.log = []


class ConsoleBroadcaster(RecordingBroadcaster):
    """Recording broadcaster that also renders traffic with rich.

    Each broadcast is printed once, no matter how many recipients it reaches.
    Private messages are prefixed with their recipient.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        roster: Optional[dict[str, str]] = None,
        show_private: bool = True,
        show_timers: bool = False,
    ):
        super().__init__(roster)
        self.console = console or Console()
        self.show_private = show_private
        self.show_timers = show_timers

    def deliver_to_identity(self, identity: str, message: OutboundMessage) -> None:
        super().deliver_to_identity(identity, message)
        if self.show_private:
            text = self._format(message)
            if text:
                name = self.roster.get(identity, identity)
                self.console.print(f"[dim]  -> {name}:[/dim] {text}")

    def deliver_to_roster(self, predicate: RosterPredicate, message: OutboundMessage) -> None:
        for identity in list(self.roster):
            if predicate(identity):
                RecordingBroadcaster.deliver_to_identity(self, identity, message)
        text = self._format(message)
        if text:
            self.console.print(text)

    def _format(self, message: OutboundMessage) -> str:
        if isinstance(message, GameEventMessage):
            return f"[bold]{message.text}[/bold]"
        if isinstance(message, PhaseChange):
            return f"[cyan]=== {message.phase.value.upper()} (day {message.day_count}) ===[/cyan]"
        if isinstance(message, PhaseTimer):
            if self.show_timers:
                return f"[dim]{message.phase.value}: {message.remaining_seconds}s left[/dim]"
            return ""
        if isinstance(message, YourRole):
            mates = f" Teammates: {', '.join(message.teammates)}." if message.teammates else ""
            return f"[magenta]You are the {message.role.value}.[/magenta] {message.description}{mates}"
        if isinstance(message, NightActionRequest):
            targets = ", ".join(message.eligible_targets) or "-"
            return f"[yellow]/{message.verb}[/yellow] available: {targets}"
        if isinstance(message, SeerResultMessage):
            verdict = "a werewolf" if message.is_werewolf else "not a werewolf"
            return f"[magenta]{message.target_name} is {verdict}.[/magenta]"
        if isinstance(message, ErrorMessage):
            return f"[red]{message.code.value}[/red]: {message.message}"
        if isinstance(message, GameEnd):
            winner = message.winning_faction.value if message.winning_faction else "nobody"
            lines = [f"[green bold]Game over - {winner} wins[/green bold]"]
            for player in message.players:
                status = "alive" if player.is_alive else "dead"
                role = player.role.value if player.role else "?"
                lines.append(f"  {player.name}: {role} ({status})")
            return "\n".join(lines)
        return ""
