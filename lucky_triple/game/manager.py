"""Game session management."""

import asyncio
import logging
import random
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

from ..config import Settings, settings
from ..errors import EntryFeeRequired, GameNotFound, GameTimedOut
from ..models.api import ServerStateResponse
from ..models.game import (
    CheckResult,
    DrawResult,
    GameConfig,
    GameOutcome,
    GameSnapshot,
    HoldResult,
    PayoutStatus,
    TimeStatus,
)
from ..payout.gateway import PayoutGateway
from .clock import Clock, GameIdGenerator, SystemClock
from .ledger import RewardLedger
from .records import CompletedGameRegistry
from .session import GameSession
from .store import SessionStore
from .supervisor import TimeoutSupervisor

logger = logging.getLogger(__name__)


class GameSessionManager:
    """Runs player actions against the live session registry.

    Each action resolves the session, takes the player's lock, applies lazy
    expiry, then performs the transition. Games that end with a reward get
    exactly one payout dispatched in the background.
    """

    def __init__(
        self,
        store: SessionStore,
        records: CompletedGameRegistry,
        ledger: RewardLedger,
        supervisor: TimeoutSupervisor,
        config: Optional[GameConfig] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[GameIdGenerator] = None,
        rng: Optional[random.Random] = None,
        require_entry_fee: bool = False,
    ):
        self.store = store
        self.records = records
        self.ledger = ledger
        self.supervisor = supervisor
        self.config = config or GameConfig()
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or GameIdGenerator(self.clock)
        self.rng = rng
        self.require_entry_fee = require_entry_fee
        self._payout_tasks: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls,
        gateway: PayoutGateway,
        app_settings: Settings = settings,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> "GameSessionManager":
        """Wire a manager and its collaborators from application settings."""
        clock = clock or SystemClock()
        store = SessionStore()
        records = CompletedGameRegistry()
        ledger = RewardLedger(gateway, clock)
        supervisor = TimeoutSupervisor(
            store,
            records,
            ledger,
            clock,
            ended_grace_seconds=app_settings.ended_session_grace_seconds,
            inactivity_ceiling_seconds=app_settings.inactivity_ceiling_seconds,
            completed_game_retention_seconds=app_settings.completed_game_retention_seconds,
            ledger_retention_seconds=app_settings.ledger_retention_seconds,
            expiry_interval_seconds=app_settings.expiry_sweep_interval_seconds,
            housekeeping_interval_seconds=app_settings.housekeeping_interval_seconds,
        )
        return cls(
            store,
            records,
            ledger,
            supervisor,
            config=GameConfig.from_settings(app_settings),
            clock=clock,
            rng=rng,
            require_entry_fee=app_settings.require_entry_fee,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start background sweeps."""
        await self.supervisor.start()

    async def shutdown(self) -> None:
        """Stop sweeps and wait for in-flight payouts."""
        await self.supervisor.stop()
        await self.wait_for_payouts()

    async def wait_for_payouts(self) -> None:
        if self._payout_tasks:
            await asyncio.gather(*list(self._payout_tasks), return_exceptions=True)

    @property
    def active_session_count(self) -> int:
        """Number of resident sessions."""
        return len(self.store)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def start_game(self, player_id: str, entry_fee_paid: bool = True) -> GameSnapshot:
        """Create a game for a player, replacing any existing one."""
        return await self._create(player_id, entry_fee_paid, reset=False)

    async def reset_game(self, player_id: str, entry_fee_paid: bool = True) -> GameSnapshot:
        """Discard the player's current game, ended or not, and create a new one."""
        return await self._create(player_id, entry_fee_paid, reset=True)

    async def _create(self, player_id: str, entry_fee_paid: bool, reset: bool) -> GameSnapshot:
        if self.require_entry_fee and not entry_fee_paid:
            raise EntryFeeRequired("Entry fee must be paid before creating a game")

        async with self.store.lock(player_id):
            now = self.clock.now()
            session = GameSession(
                self.id_generator.new_game_id(),
                player_id,
                self.config,
                now,
                rng=self.rng,
            )
            previous = self.store.replace(session)
            if previous is not None:
                logger.info(
                    "%s existing game %s for player %s",
                    "Reset discarded" if reset else "Replaced",
                    previous.game_id,
                    player_id,
                )
            logger.info("New game created: %s for player: %s", session.game_id, player_id)
            return session.snapshot(now)

    async def hold(self, game_id: str, positions: Iterable[int]) -> HoldResult:
        """Mark card positions to keep for the next draw."""
        async with self._locked_game(game_id) as session:
            now = self.clock.now()
            self._ensure_fresh(session, now)
            held = session.hold(positions, now)
            return HoldResult(held_cards=held)

    async def draw(self, game_id: str) -> DrawResult:
        """Deal the next round."""
        async with self._locked_game(game_id) as session:
            now = self.clock.now()
            self._ensure_fresh(session, now)
            previously_held = session.draw(now)

            logger.info(
                "Game %s - Round %d/%d: held %s, table %s, %s (%d CARDS)",
                session.game_id,
                session.rounds_played,
                session.max_rounds,
                previously_held or "none",
                " ".join(str(card) for card in session.cards),
                session.current_combination.value,
                session.current_reward,
            )
            if session.is_ended:
                self._complete(session, now)
            return session.draw_result(previously_held, now)

    async def check(self, game_id: str) -> CheckResult:
        """End the game with the current hand, or report how it already ended."""
        async with self._locked_game(game_id) as session:
            now = self.clock.now()
            self._ensure_fresh(session, now)
            if session.is_ended:
                record = self.records.get(game_id)
                outcome = record.outcome if record else session.outcome
                return session.check_result(outcome)

            outcome = session.finish(now)
            self._complete(session, now)
            return session.check_result(outcome)

    async def status(self, game_id: str) -> GameSnapshot:
        """Current snapshot. Never dispatches a reward."""
        async with self._locked_game(game_id) as session:
            now = self.clock.now()
            self.supervisor.expire_if_due(session, now)
            return session.snapshot(now)

    async def time_status(self, game_id: str) -> TimeStatus:
        """Remaining time, applying the same lazy expiry as ``status``."""
        async with self._locked_game(game_id) as session:
            now = self.clock.now()
            self.supervisor.expire_if_due(session, now)
            return session.time_status(now)

    def server_state(self) -> ServerStateResponse:
        """Debug view of the registries."""
        players = self.store.player_ids()
        completed = self.records.records()
        payouts = self.ledger.entries()
        return ServerStateResponse(
            active_players=players,
            active_player_count=len(players),
            completed_games=completed,
            completed_game_count=len(completed),
            paid_rewards=payouts,
            paid_rewards_count=len(payouts),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _locked_game(self, game_id: str) -> AsyncIterator[GameSession]:
        player_id = self.store.find_player(game_id)
        if player_id is None:
            raise GameNotFound(game_id)
        async with self.store.lock(player_id):
            session = self.store.get(player_id)
            # The player may have started a new game while we waited.
            if session is None or session.game_id != game_id:
                raise GameNotFound(game_id)
            yield session

    def _ensure_fresh(self, session: GameSession, now: float) -> None:
        if self.supervisor.expire_if_due(session, now) or session.timed_out:
            raise GameTimedOut(session.game_id, now)

    def _complete(self, session: GameSession, now: float) -> None:
        """Record the terminal outcome and dispatch the reward for a win."""
        won = session.outcome is GameOutcome.WIN
        recorded = self.records.add(
            session.game_id,
            session.player_id,
            session.outcome,
            now,
            payout_processed=not won,
        )
        logger.info(
            "Game %s completed after %d rounds: %s, %s (%d CARDS)",
            session.game_id,
            session.rounds_played,
            session.outcome.value,
            session.current_combination.value,
            session.current_reward,
        )
        if recorded and won:
            self._dispatch_reward(session)

    def _dispatch_reward(self, session: GameSession) -> None:
        task = asyncio.create_task(self._pay_reward(session))
        self._payout_tasks.add(task)
        task.add_done_callback(self._payout_tasks.discard)

    async def _pay_reward(self, session: GameSession) -> None:
        status = await self.ledger.request_payout(
            session.player_id, session.game_id, session.current_reward
        )
        async with self.store.lock(session.player_id):
            if status is PayoutStatus.COMPLETED:
                session.reward_paid = True
            if status is not PayoutStatus.PENDING:
                self.records.mark_payout_processed(session.game_id)
