"""Root conftest for path setup and shared fixtures.

This file is loaded first by pytest and ensures the project root
is on sys.path before any test modules are imported.
"""

import sys
from pathlib import Path

# Add project root to path IMMEDIATELY
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import random

import pytest

from lucky_triple.config import Settings
from lucky_triple.game import GameSessionManager
from lucky_triple.models.game import GameConfig

from helpers import FakeClock, StubGateway


# =============================================================================
# Time and Randomness Fixtures
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at a fixed instant, advanced by hand."""
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible shuffles."""
    return random.Random(1234)


# =============================================================================
# Game Fixtures
# =============================================================================


@pytest.fixture
def game_config() -> GameConfig:
    """Default game rules: 3 rounds, 60 second budget."""
    return GameConfig(max_rounds=3, session_timeout_seconds=60)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with the default windows and no entry fee gate."""
    return Settings(
        max_rounds=3,
        session_timeout_seconds=60,
        ended_session_grace_seconds=5,
        inactivity_ceiling_seconds=3600,
        completed_game_retention_seconds=24 * 60 * 60,
        ledger_retention_seconds=7 * 24 * 60 * 60,
        require_entry_fee=False,
        debug=True,
    )


@pytest.fixture
def gateway() -> StubGateway:
    """Payout gateway that records calls and succeeds."""
    return StubGateway()


@pytest.fixture
def manager(gateway, test_settings, clock, rng) -> GameSessionManager:
    """Session manager wired to the stub gateway and fake clock."""
    return GameSessionManager.from_settings(gateway, test_settings, clock=clock, rng=rng)
