"""Night action resolution - computes final deaths from accumulated night actions."""

import logging

from wolfchat.engine.game_state import GameState
from wolfchat.engine.night_action_store import NightActionStore
from wolfchat.events.game_events import DeathCause, NightOutcome

logger = logging.getLogger(__name__)


class NightActionResolver:
    """Computes final deaths from accumulated night actions.

    Resolution order:
    1. Save (cancels the werewolf kill when it names the kill target)
    2. Poison (kills regardless of save)
    3. Werewolf kill (unless cancelled)
    """

    def resolve(
        self,
        state: GameState,
        actions: NightActionStore,
    ) -> NightOutcome:
        """Compute final deaths from accumulated night actions.

        Does not mutate state; the caller applies the deaths.

        Args:
            state: Current game state with living/dead player information.
            actions: Night action store with kill, save and poison targets.

        Returns:
            NightOutcome mapping identity to DeathCause, plus whether a save happened.
        """
        deaths: dict[str, DeathCause] = {}

        saved = (
            actions.kill_target is not None
            and actions.save_target == actions.kill_target
        )

        if actions.poison_target is not None:
            if state.is_alive(actions.poison_target):
                deaths[actions.poison_target] = DeathCause.POISON
            else:
                logger.warning(
                    "Skipping poison on missing or dead player | target=%s",
                    actions.poison_target,
                )

        if actions.kill_target is not None and not saved:
            if state.is_alive(actions.kill_target):
                # Poison already claimed this player; the cause stays POISON
                deaths.setdefault(actions.kill_target, DeathCause.WEREWOLF_KILL)
            else:
                logger.warning(
                    "Skipping werewolf kill on missing or dead player | target=%s",
                    actions.kill_target,
                )

        return NightOutcome(day=state.day, deaths=deaths, saved=saved)
