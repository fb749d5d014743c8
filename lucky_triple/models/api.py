"""API request/response models."""

from typing import Optional

from pydantic import BaseModel, Field

from .game import CompletedGameRecord, GameSnapshot, LedgerEntry


class StartGameRequest(BaseModel):
    """Request to start (or reset) a game for a player."""

    player_id: str = Field(min_length=1)
    entry_fee_paid: bool = False


class GameStartedResponse(BaseModel):
    """Response after creating a game."""

    game: GameSnapshot
    entry_fee: int
    message: str


class HoldRequest(BaseModel):
    """Request to hold card positions for the next draw."""

    game_id: str
    card_indexes: list[int]


class GameActionRequest(BaseModel):
    """Request addressed to a single game."""

    game_id: str


class TimedOutResponse(BaseModel):
    """Body returned when an action hits an expired game."""

    error: str = "Game has timed out"
    time_remaining: int = 0
    is_timed_out: bool = True
    is_ended: bool = True
    server_time: Optional[float] = None


class ServerStateResponse(BaseModel):
    """Debug view of the in-memory registries."""

    active_players: list[str]
    active_player_count: int
    completed_games: list[CompletedGameRecord]
    completed_game_count: int
    paid_rewards: list[LedgerEntry]
    paid_rewards_count: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    active_sessions: int
    payouts_enabled: bool
