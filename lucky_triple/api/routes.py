"""REST API routes."""

from contextlib import contextmanager

from fastapi import APIRouter, HTTPException

from ..config import settings
from ..errors import GameTimedOut, IllegalState, InvalidArgument, NotFound
from ..game import GameSessionManager
from ..models.api import (
    GameActionRequest,
    GameStartedResponse,
    HealthResponse,
    HoldRequest,
    ServerStateResponse,
    StartGameRequest,
    TimedOutResponse,
)
from ..models.game import (
    CheckResult,
    DrawResult,
    GameSnapshot,
    HoldResult,
    TimeStatus,
)

router = APIRouter()

# Global session manager (will be initialized in main.py)
session_manager: GameSessionManager = None


def init_dependencies(sm: GameSessionManager):
    """Initialize route dependencies."""
    global session_manager
    session_manager = sm


def _manager() -> GameSessionManager:
    if session_manager is None:
        raise HTTPException(status_code=500, detail="Server not initialized")
    return session_manager


@contextmanager
def _game_errors():
    """Translate game errors into HTTP responses."""
    try:
        yield
    except GameTimedOut as e:
        detail = TimedOutResponse(server_time=e.server_time).model_dump()
        raise HTTPException(status_code=400, detail=detail) from e
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message) from e
    except (IllegalState, InvalidArgument) as e:
        raise HTTPException(status_code=400, detail=e.message) from e


@router.post("/lucky-triple/start", response_model=GameStartedResponse)
async def start_game(request: StartGameRequest):
    """Start a new game, replacing any existing game for the player."""
    manager = _manager()
    with _game_errors():
        game = await manager.start_game(request.player_id, request.entry_fee_paid)
    return GameStartedResponse(
        game=game,
        entry_fee=settings.entry_fee,
        message="Press 'draw' to start the game and receive your first cards",
    )


@router.post("/lucky-triple/reset", response_model=GameStartedResponse)
async def reset_game(request: StartGameRequest):
    """Discard the player's current game and start a new one."""
    manager = _manager()
    with _game_errors():
        game = await manager.reset_game(request.player_id, request.entry_fee_paid)
    return GameStartedResponse(
        game=game,
        entry_fee=settings.entry_fee,
        message="Game reset. Press 'draw' to start the game and receive your first cards",
    )


@router.post("/lucky-triple/hold", response_model=HoldResult)
async def hold_cards(request: HoldRequest):
    """Hold up to two card positions for the next draw."""
    manager = _manager()
    with _game_errors():
        return await manager.hold(request.game_id, request.card_indexes)


@router.post("/lucky-triple/draw", response_model=DrawResult)
async def draw_cards(request: GameActionRequest):
    """Deal the next round."""
    manager = _manager()
    with _game_errors():
        return await manager.draw(request.game_id)


@router.post("/lucky-triple/check", response_model=CheckResult)
async def check_game(request: GameActionRequest):
    """End the game with the current hand."""
    manager = _manager()
    with _game_errors():
        return await manager.check(request.game_id)


@router.get("/lucky-triple/status/{game_id}", response_model=GameSnapshot)
async def get_status(game_id: str):
    """Get current game state."""
    manager = _manager()
    with _game_errors():
        return await manager.status(game_id)


@router.get("/lucky-triple/time/{game_id}", response_model=TimeStatus)
async def get_time(game_id: str):
    """Get remaining time for a game."""
    manager = _manager()
    with _game_errors():
        return await manager.time_status(game_id)


@router.get("/lucky-triple/debug/server-state", response_model=ServerStateResponse)
async def server_state():
    """Dump in-memory registries (debug only)."""
    if not settings.debug:
        raise HTTPException(status_code=404, detail="Endpoint not found")
    return _manager().server_state()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    active_sessions = session_manager.active_session_count if session_manager else 0
    payouts_enabled = session_manager.ledger.payouts_enabled if session_manager else False

    return HealthResponse(
        status="healthy",
        active_sessions=active_sessions,
        payouts_enabled=payouts_enabled,
    )
