"""Session expiry and housekeeping."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..config import settings
from ..models.game import GameOutcome
from .clock import Clock, SystemClock
from .ledger import RewardLedger
from .records import CompletedGameRegistry
from .session import GameSession
from .store import SessionStore

logger = logging.getLogger(__name__)


class TimeoutSupervisor:
    """Expires sessions past their lifetime and reclaims stale state.

    Expiry is lazy (``expire_if_due`` on every access) and active (two
    periodic sweeps started by ``start``). Sweeps take the same per-player
    lock as request handlers before touching a session.
    """

    def __init__(
        self,
        store: SessionStore,
        records: CompletedGameRegistry,
        ledger: RewardLedger,
        clock: Optional[Clock] = None,
        ended_grace_seconds: float = settings.ended_session_grace_seconds,
        inactivity_ceiling_seconds: float = settings.inactivity_ceiling_seconds,
        completed_game_retention_seconds: float = settings.completed_game_retention_seconds,
        ledger_retention_seconds: float = settings.ledger_retention_seconds,
        expiry_interval_seconds: float = settings.expiry_sweep_interval_seconds,
        housekeeping_interval_seconds: float = settings.housekeeping_interval_seconds,
    ):
        self.store = store
        self.records = records
        self.ledger = ledger
        self.clock = clock or SystemClock()
        self.ended_grace_seconds = ended_grace_seconds
        self.inactivity_ceiling_seconds = inactivity_ceiling_seconds
        self.completed_game_retention_seconds = completed_game_retention_seconds
        self.ledger_retention_seconds = ledger_retention_seconds
        self.expiry_interval_seconds = expiry_interval_seconds
        self.housekeeping_interval_seconds = housekeeping_interval_seconds

        self._expiry_task: Optional[asyncio.Task] = None
        self._housekeeping_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Lazy expiry
    # ------------------------------------------------------------------

    def expire_if_due(self, session: GameSession, now: float) -> bool:
        """Flip ``session`` to Ended{timeout} if overdue.

        The caller must hold the player's lock.
        """
        if not session.expire(now):
            return False
        self.records.add(
            session.game_id,
            session.player_id,
            GameOutcome.TIMEOUT,
            now,
            payout_processed=True,
        )
        logger.info("Game %s for player %s timed out", session.game_id, session.player_id)
        return True

    # ------------------------------------------------------------------
    # Sweeps
    # ------------------------------------------------------------------

    async def _sweep(self, visit: Callable[[GameSession, float], bool]) -> int:
        count = 0
        for session in self.store.sessions():
            async with self.store.lock(session.player_id):
                if self.store.get(session.player_id) is not session:
                    continue
                if visit(session, self.clock.now()):
                    count += 1
        return count

    async def sweep_expired(self) -> int:
        """Time out sessions nobody has touched since their deadline."""
        return await self._sweep(self.expire_if_due)

    async def sweep_ended(self) -> int:
        """Remove ended sessions whose grace window has passed."""

        def visit(session: GameSession, now: float) -> bool:
            if not session.is_ended or session.ended_at is None:
                return False
            if now - session.ended_at < self.ended_grace_seconds:
                return False
            return self.store.remove(session)

        removed = await self._sweep(visit)
        if removed:
            logger.debug("Removed %d ended sessions. Remaining: %d", removed, len(self.store))
        return removed

    async def sweep_inactive(self) -> int:
        """Remove sessions idle past the inactivity ceiling, ended or not."""

        def visit(session: GameSession, now: float) -> bool:
            if now - session.last_action_at < self.inactivity_ceiling_seconds:
                return False
            logger.info("Removing inactive game session for player %s", session.player_id)
            return self.store.remove(session)

        removed = await self._sweep(visit)
        if removed:
            logger.info("Cleanup: removed %d inactive sessions. Remaining: %d", removed, len(self.store))
        self.store.prune_locks()
        return removed

    async def prune_history(self) -> tuple[int, int]:
        """Drop completed-game records and ledger entries past retention."""
        now = self.clock.now()
        records = self.records.prune(now - self.completed_game_retention_seconds)
        entries = await self.ledger.prune(now - self.ledger_retention_seconds)
        if records or entries:
            logger.info(
                "Memory cleanup: removed %d completed games and %d payout records",
                records,
                entries,
            )
        return records, entries

    async def run_expiry_pass(self) -> None:
        await self.sweep_expired()
        await self.sweep_ended()

    async def run_housekeeping_pass(self) -> None:
        await self.sweep_inactive()
        await self.prune_history()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start both periodic sweeps."""
        if self.is_running:
            return
        self._expiry_task = asyncio.create_task(
            self._run_every(self.expiry_interval_seconds, self.run_expiry_pass)
        )
        self._housekeeping_task = asyncio.create_task(
            self._run_every(self.housekeeping_interval_seconds, self.run_housekeeping_pass)
        )

    async def stop(self) -> None:
        """Cancel the periodic sweeps."""
        for task in (self._expiry_task, self._housekeeping_task):
            if task:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass
        self._expiry_task = None
        self._housekeeping_task = None

    async def _run_every(self, interval: float, job: Callable[[], Awaitable[None]]) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await job()
            except Exception:
                logger.exception("Session sweep %s failed", job.__name__)

    @property
    def is_running(self) -> bool:
        return self._expiry_task is not None and not self._expiry_task.done()
