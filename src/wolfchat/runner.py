"""RoomRunner - asyncio owner that serializes commands and ticks for one room."""

import asyncio
import logging
from typing import Optional

from wolfchat.engine.commands import CommandRouter
from wolfchat.engine.errors import CommandResult
from wolfchat.engine.session import GameSession

logger = logging.getLogger(__name__)


class RoomRunner:
    """Drives a GameSession from an event loop.

    Every command and every tick runs under one asyncio.Lock, so the session
    only ever sees one operation at a time. The tick task calls
    session.tick() every ``settings.tick_interval`` seconds.

    Usage:
        runner = RoomRunner(session)
        await runner.start()
        await runner.submit("alice", "/join Alice")
        ...
        await runner.stop()
    """

    def __init__(self, session: GameSession, router: Optional[CommandRouter] = None):
        self.session = session
        self.router = router or CommandRouter(session)
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._stopping.clear()
        self._task = asyncio.create_task(self._tick_loop())

    async def stop(self) -> None:
        self._stopping.set()
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def submit(self, actor: str, line: str) -> Optional[CommandResult]:
        """Handle one chat line from a player. Plain chat returns None."""
        async with self._lock:
            try:
                return self.router.handle_line(actor, line)
            except Exception:
                logger.exception("Command failed | actor=%s line=%r", actor, line)
                return None

    async def dispatch(self, actor: str, verb: str, args: list[str]) -> Optional[CommandResult]:
        async with self._lock:
            try:
                return self.router.dispatch(actor, verb, args)
            except Exception:
                logger.exception("Command failed | actor=%s verb=%s", actor, verb)
                return None

    async def tick(self) -> None:
        async with self._lock:
            self.session.tick()

    async def _tick_loop(self) -> None:
        interval = self.session.settings.tick_interval
        while not self._stopping.is_set():
            await asyncio.sleep(interval)
            await self.tick()
