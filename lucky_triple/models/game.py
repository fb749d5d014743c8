"""Game state models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Suit(str, Enum):
    """Card suit."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


class Rank(str, Enum):
    """Card rank. Ace is low only."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"

    @property
    def order(self) -> int:
        """Position in the A..6 sequence, starting at 1."""
        return RANK_ORDER[self]


RANK_ORDER = {rank: idx for idx, rank in enumerate(Rank, start=1)}


class Card(BaseModel):
    """Playing card."""

    model_config = ConfigDict(frozen=True)

    suit: Suit
    rank: Rank

    def __str__(self) -> str:
        return f"{self.rank.value}{SUIT_SYMBOLS[self.suit]}"


class Combination(str, Enum):
    """Categorical rank of a 3-card hand."""

    LUCKY_TRIPLE = "Lucky Triple"
    STRAIGHT_FLUSH = "Straight Flush"
    TRIPLE = "Triple"
    STRAIGHT = "Straight"
    FLUSH = "Flush"
    NONE = "None"


DEFAULT_REWARD_TIERS: dict[Combination, int] = {
    Combination.LUCKY_TRIPLE: 15,
    Combination.STRAIGHT_FLUSH: 12,
    Combination.TRIPLE: 9,
    Combination.STRAIGHT: 6,
    Combination.FLUSH: 5,
    Combination.NONE: 0,
}


class GameOutcome(str, Enum):
    """Terminal outcome of a game."""

    WIN = "win"
    LOSS = "loss"
    TIMEOUT = "timeout"


class PayoutStatus(str, Enum):
    """Reward ledger entry status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class HandResult(BaseModel):
    """Evaluated hand."""

    combination: Combination
    reward: int


class GameConfig(BaseModel):
    """Per-game configuration."""

    max_rounds: int = Field(default=3, ge=1)
    session_timeout_seconds: float = Field(default=60.0, gt=0)
    reward_tiers: dict[Combination, int] = Field(
        default_factory=lambda: dict(DEFAULT_REWARD_TIERS)
    )

    @classmethod
    def from_settings(cls, settings) -> "GameConfig":
        """Build a game config from application settings."""
        return cls(
            max_rounds=settings.max_rounds,
            session_timeout_seconds=settings.session_timeout_seconds,
            reward_tiers=settings.reward_tiers,
        )


class GameSnapshot(BaseModel):
    """Outward-facing view of a session."""

    game_id: str
    player_id: str
    cards: list[Card]
    held_cards: list[int]
    combination: Combination
    reward: int
    rounds_played: int
    rounds_left: int
    max_rounds: int
    remaining_cards: int
    is_ended: bool
    timed_out: bool
    reward_paid: bool
    time_remaining: int
    server_time: float


class DrawResult(BaseModel):
    """Result of a draw."""

    game_id: str
    player_id: str
    cards: list[Card]
    combination: Combination
    reward: int
    rounds_left: int
    remaining_cards: int
    is_ended: bool
    previously_held: list[int]
    reward_paid: bool
    time_remaining: int
    server_time: float


class HoldResult(BaseModel):
    """Result of a hold."""

    success: bool = True
    held_cards: list[int]


class CheckResult(BaseModel):
    """Final result of a game."""

    game_id: str
    player_id: str
    combination: Combination
    reward: int
    outcome: GameOutcome
    is_win: bool
    is_ended: bool = True
    rounds_played: int
    reward_paid: bool
    time_remaining: int = 0
    message: str


class TimeStatus(BaseModel):
    """Remaining time for a session."""

    time_remaining: int
    is_timed_out: bool
    is_ended: bool
    server_time: float


class CompletedGameRecord(BaseModel):
    """Audit record written once when a game reaches a terminal state."""

    game_id: str
    player_id: str
    outcome: GameOutcome
    ended_at: float
    payout_processed: bool = False


class LedgerEntry(BaseModel):
    """Idempotency record for one (player, game) payout."""

    player_id: str
    game_id: str
    amount: int
    status: PayoutStatus
    created_at: float
    updated_at: float
    signature: Optional[str] = None
    error: Optional[str] = None
