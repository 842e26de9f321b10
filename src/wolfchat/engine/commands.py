"""Command router: turns ``/verb arg...`` chat lines into session operations."""

import logging
import shlex
from typing import Callable, Optional

from wolfchat.engine.errors import CommandResult
from wolfchat.engine.session import GameSession
from wolfchat.events.game_events import ErrorCode, NightVerb

logger = logging.getLogger(__name__)


HELP_TEXT = """Commands:
  /join [name]      take a seat (before the game starts)
  /leave            give up your seat
  /start            deal roles and begin (host only)
  /reset            reopen the room after a game ends (host only)
  /kill <name>      werewolf: choose tonight's victim
  /check <name>     seer: learn whether a player is a werewolf
  /save <name>      witch: save the werewolves' victim
  /poison <name>    witch: poison a player
  /skip             witch: do nothing tonight
  /vote <name>      vote a player out during the vote phase
  /shoot <name>     hunter: final shot after being voted out
  /role             show your role again
  /status           show the game state"""


def parse_command(line: str) -> Optional[tuple[str, list[str]]]:
    """Tokenize a chat line.

    Returns:
        (verb, args) for lines starting with "/", None for plain chat.
    """
    line = line.strip()
    if not line.startswith("/") or len(line) == 1:
        return None
    try:
        tokens = shlex.split(line[1:])
    except ValueError:
        tokens = line[1:].split()
    if not tokens:
        return None
    return tokens[0].lower(), tokens[1:]


class CommandRouter:
    """Dispatches parsed commands to a GameSession.

    Unknown verbs are answered privately with an UnknownCommand error and
    never reach the session.
    """

    def __init__(self, session: GameSession):
        self._session = session
        self._handlers: dict[str, Callable[[str, list[str]], CommandResult]] = {
            "join": self._join,
            "leave": self._leave,
            "start": self._start,
            "reset": self._reset,
            "vote": self._vote,
            "shoot": self._shoot,
            "role": self._role,
            "status": self._status,
            "help": self._help,
        }
        for verb in NightVerb:
            self._handlers[verb.value] = self._night_handler(verb)

    @property
    def verbs(self) -> list[str]:
        return sorted(self._handlers)

    def handle_line(self, actor: str, line: str) -> Optional[CommandResult]:
        """Route a raw chat line. Returns None when the line is not a command."""
        parsed = parse_command(line)
        if parsed is None:
            return None
        verb, args = parsed
        return self.dispatch(actor, verb, args)

    def dispatch(self, actor: str, verb: str, args: list[str]) -> CommandResult:
        verb = verb.lower().lstrip("/")
        handler = self._handlers.get(verb)
        if handler is None:
            return self._session.reject(
                actor, CommandResult.reject(ErrorCode.UNKNOWN_COMMAND, f"Unknown command /{verb}. Try /help.")
            )
        logger.debug("Dispatch | actor=%s verb=%s args=%s", actor, verb, args)
        return handler(actor, args)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    @staticmethod
    def _target(args: list[str]) -> Optional[str]:
        return " ".join(args) if args else None

    def _join(self, actor: str, args: list[str]) -> CommandResult:
        return self._session.join(actor, self._target(args))

    def _leave(self, actor: str, args: list[str]) -> CommandResult:
        return self._session.leave(actor)

    def _start(self, actor: str, args: list[str]) -> CommandResult:
        return self._session.start(actor)

    def _reset(self, actor: str, args: list[str]) -> CommandResult:
        return self._session.reset(actor)

    def _night_handler(self, verb: NightVerb) -> Callable[[str, list[str]], CommandResult]:
        def handler(actor: str, args: list[str]) -> CommandResult:
            return self._session.night_action(actor, verb, self._target(args))
        return handler

    def _vote(self, actor: str, args: list[str]) -> CommandResult:
        return self._session.vote(actor, self._target(args))

    def _shoot(self, actor: str, args: list[str]) -> CommandResult:
        return self._session.shoot(actor, self._target(args))

    def _role(self, actor: str, args: list[str]) -> CommandResult:
        return self._session.remind_role(actor)

    def _status(self, actor: str, args: list[str]) -> CommandResult:
        self._session.send_state(actor)
        return CommandResult.accept()

    def _help(self, actor: str, args: list[str]) -> CommandResult:
        self._session.tell(actor, HELP_TEXT)
        return CommandResult.accept()
