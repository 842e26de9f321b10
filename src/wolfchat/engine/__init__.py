"""Engine package - game session components."""

from .errors import CommandResult
from .game_state import GameState
from .night_action_store import NightActionStore
from .night_action_resolver import NightActionResolver
from .role_assigner import RoleAssigner
from .night_engine import NightResolutionEngine
from .vote_tally import VoteTally
from .victory import WinEvaluator
from .scheduler import PhaseScheduler, PendingResolution
from .session import GameSession
from .commands import CommandRouter, parse_command

__all__ = [
    "CommandResult",
    "GameState",
    "NightActionStore",
    "NightActionResolver",
    "RoleAssigner",
    "NightResolutionEngine",
    "VoteTally",
    "WinEvaluator",
    "PhaseScheduler",
    "PendingResolution",
    "GameSession",
    "CommandRouter",
    "parse_command",
]
