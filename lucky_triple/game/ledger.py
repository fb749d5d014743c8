"""Reward payout ledger."""

import asyncio
import logging
from typing import Optional

from ..models.game import LedgerEntry, PayoutStatus
from ..payout.gateway import PayoutGateway
from .clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class RewardLedger:
    """Idempotency guard around payout submission.

    Each ``(player_id, game_id)`` key reaches the gateway at most once. The
    entry is written as ``pending`` before the gateway is called, so a second
    requester arriving while the transfer is in flight sees the entry and
    backs off. Failed entries are terminal and never retried.
    """

    def __init__(self, gateway: PayoutGateway, clock: Optional[Clock] = None):
        self.gateway = gateway
        self.clock = clock or SystemClock()
        self._entries: dict[tuple[str, str], LedgerEntry] = {}
        self._lock = asyncio.Lock()

    @property
    def payouts_enabled(self) -> bool:
        return getattr(self.gateway, "enabled", True)

    async def request_payout(self, player_id: str, game_id: str, amount: int) -> PayoutStatus:
        """Submit a payout unless one was already requested for this game."""
        key = (player_id, game_id)
        async with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                logger.info(
                    "Payout for game %s to %s already %s, skipping duplicate",
                    game_id,
                    player_id,
                    existing.status.value,
                )
                return existing.status
            now = self.clock.now()
            entry = LedgerEntry(
                player_id=player_id,
                game_id=game_id,
                amount=amount,
                status=PayoutStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            self._entries[key] = entry

        logger.info("Submitting payout of %d CARDS to %s for game %s", amount, player_id, game_id)
        try:
            receipt = await self.gateway.submit(player_id, game_id, amount)
        except Exception as e:
            entry.status = PayoutStatus.FAILED
            entry.error = str(e)
            entry.updated_at = self.clock.now()
            logger.exception("Failed to send %d CARDS to %s for game %s", amount, player_id, game_id)
            return entry.status

        entry.status = PayoutStatus.COMPLETED
        entry.signature = receipt.signature
        entry.updated_at = self.clock.now()
        logger.info(
            "Sent %d CARDS to %s for game %s, signature: %s",
            amount,
            player_id,
            game_id,
            receipt.signature,
        )
        return entry.status

    def get(self, player_id: str, game_id: str) -> Optional[LedgerEntry]:
        return self._entries.get((player_id, game_id))

    def entries(self) -> list[LedgerEntry]:
        return list(self._entries.values())

    async def prune(self, older_than: float) -> int:
        """Forget settled entries created before ``older_than``."""
        async with self._lock:
            stale = [
                key
                for key, entry in self._entries.items()
                if entry.created_at < older_than and entry.status is not PayoutStatus.PENDING
            ]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._entries)
