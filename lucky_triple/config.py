"""Server configuration."""

from typing import Optional

from pydantic_settings import BaseSettings

from .models.game import DEFAULT_REWARD_TIERS, Combination


class Settings(BaseSettings):
    """Application settings."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3004
    debug: bool = True

    # Game rules
    max_rounds: int = 3
    session_timeout_seconds: float = 60.0
    reward_tiers: dict[Combination, int] = dict(DEFAULT_REWARD_TIERS)
    entry_fee: int = 3
    require_entry_fee: bool = True

    # Retention
    ended_session_grace_seconds: float = 5.0
    inactivity_ceiling_seconds: float = 60 * 60
    completed_game_retention_seconds: float = 24 * 60 * 60
    ledger_retention_seconds: float = 7 * 24 * 60 * 60

    # Sweeps
    expiry_sweep_interval_seconds: float = 5.0
    housekeeping_interval_seconds: float = 30 * 60

    # Payout service
    payout_endpoint: Optional[str] = None
    payout_timeout: float = 30.0

    class Config:
        env_prefix = "LUCKY_TRIPLE_"


settings = Settings()
