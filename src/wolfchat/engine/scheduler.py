"""PhaseScheduler - phase deadline, epoch token, and delayed resolutions.

The scheduler owns no game rules. It answers three questions for the session:
which phase instance is current (epoch), when that instance times out
(deadline), and whether a delayed resolution scheduled earlier is due and
still belongs to the current instance.

Time comes from an injectable clock so the session can be driven by a real
loop (RoomRunner) or by tests advancing a fake clock.
"""

import math
import time
from typing import Callable, Optional

from pydantic import BaseModel


Clock = Callable[[], float]


class PendingResolution(BaseModel):
    """A resolution scheduled to run later, tagged with its epoch."""

    kind: str  # "night" or "vote"
    due: float
    epoch: int


class PhaseScheduler:
    """Single active deadline plus a monotonically increasing epoch.

    Entering a phase bumps the epoch and replaces the deadline. Anything
    scheduled under an older epoch is stale and never handed back.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._clock: Clock = clock or time.monotonic
        self._epoch = 0
        self._deadline: Optional[float] = None
        self._pending: Optional[PendingResolution] = None

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    def now(self) -> float:
        return self._clock()

    def enter_phase(self, duration: Optional[float] = None) -> int:
        """Start a new phase instance.

        Cancels the previous deadline and any pending resolution, bumps the
        epoch and, when a duration is given, arms a new deadline.

        Returns:
            The new epoch.
        """
        self._epoch += 1
        self._pending = None
        self._deadline = None
        if duration is not None:
            self.schedule_deadline(duration)
        return self._epoch

    def schedule_deadline(self, duration: float) -> float:
        self._deadline = self._clock() + duration
        return self._deadline

    def cancel(self) -> None:
        """Disarm the deadline and drop any pending resolution."""
        self._deadline = None
        self._pending = None

    def remaining_seconds(self) -> Optional[int]:
        if self._deadline is None:
            return None
        return max(0, math.ceil(self._deadline - self._clock()))

    def is_expired(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    def owns(self, epoch: int) -> bool:
        return epoch == self._epoch

    def schedule_resolution(self, kind: str, delay: float) -> PendingResolution:
        """Schedule a resolution under the current epoch.

        A second call for the same epoch keeps the earlier due time.
        """
        if self._pending is not None and self._pending.epoch == self._epoch:
            return self._pending
        self._pending = PendingResolution(kind=kind, due=self._clock() + delay, epoch=self._epoch)
        return self._pending

    @property
    def pending_resolution(self) -> Optional[PendingResolution]:
        return self._pending

    def pop_due_resolution(self) -> Optional[PendingResolution]:
        """Hand back the pending resolution once due, if it is still current."""
        pending = self._pending
        if pending is None:
            return None
        if not self.owns(pending.epoch):
            self._pending = None
            return None
        if self._clock() < pending.due:
            return None
        self._pending = None
        return pending
