"""Game engine components."""

from .cards import Deck
from .evaluator import HandEvaluator, evaluate
from .ledger import RewardLedger
from .manager import GameSessionManager
from .records import CompletedGameRegistry
from .session import GameSession, SessionState
from .store import SessionStore
from .supervisor import TimeoutSupervisor

__all__ = [
    "Deck",
    "HandEvaluator",
    "evaluate",
    "RewardLedger",
    "GameSessionManager",
    "CompletedGameRegistry",
    "GameSession",
    "SessionState",
    "SessionStore",
    "TimeoutSupervisor",
]
