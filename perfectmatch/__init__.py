"""
perfectmatch - deduction strategy for the perfect match puzzle

N contestants hide a secret perfect pairing. A strategy proposes full
pairings to a ceremony that only reports how many pairs are right, and may
check single pairs at the truth booth. The strategy must pin down the secret
pairing in as few queries as possible.

Components:
- PossibilityMap: symmetric record of who can still be paired with whom
- possible_pairing: backtracking search for one consistent full pairing
- SavedRound / RoundManager: probability estimates from ceremony counts
- BruteForceStrategy: the ceremony / truth booth cycle tying them together
"""

from .audit import AuditTrail, SolverEvent
from .contestant import Contestant, ContestantPair, gen_contestants
from .errors import InvariantViolation, KitError, SolverError
from .gamemaster import GameMaster
from .pairing import possible_pairing
from .possibilities import PossibilityMap
from .round import SavedRound
from .round_manager import RoundManager
from .runner import GameRunner, RunConfig, RunResult
from .spi import Correct, Feedback, GameStrategy, Oracle, Wrong
from .strategy import BruteForceStrategy, StrategyPhase

__all__ = [
    "AuditTrail",
    "SolverEvent",
    "Contestant",
    "ContestantPair",
    "gen_contestants",
    "InvariantViolation",
    "KitError",
    "SolverError",
    "GameMaster",
    "possible_pairing",
    "PossibilityMap",
    "SavedRound",
    "RoundManager",
    "GameRunner",
    "RunConfig",
    "RunResult",
    "Correct",
    "Feedback",
    "GameStrategy",
    "Oracle",
    "Wrong",
    "BruteForceStrategy",
    "StrategyPhase",
]
