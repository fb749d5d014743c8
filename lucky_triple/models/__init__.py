"""Pydantic models for game state and API payloads."""

from .game import (
    Suit,
    Rank,
    Card,
    Combination,
    DEFAULT_REWARD_TIERS,
    GameOutcome,
    PayoutStatus,
    HandResult,
    GameConfig,
    GameSnapshot,
    DrawResult,
    HoldResult,
    CheckResult,
    TimeStatus,
    CompletedGameRecord,
    LedgerEntry,
)
from .api import (
    StartGameRequest,
    GameStartedResponse,
    HoldRequest,
    GameActionRequest,
    TimedOutResponse,
    ServerStateResponse,
    HealthResponse,
)

__all__ = [
    # Game models
    "Suit",
    "Rank",
    "Card",
    "Combination",
    "DEFAULT_REWARD_TIERS",
    "GameOutcome",
    "PayoutStatus",
    "HandResult",
    "GameConfig",
    "GameSnapshot",
    "DrawResult",
    "HoldResult",
    "CheckResult",
    "TimeStatus",
    "CompletedGameRecord",
    "LedgerEntry",
    # API
    "StartGameRequest",
    "GameStartedResponse",
    "HoldRequest",
    "GameActionRequest",
    "TimedOutResponse",
    "ServerStateResponse",
    "HealthResponse",
]
