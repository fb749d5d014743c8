"""Audit trail of finished games."""

from typing import Optional

from ..models.game import CompletedGameRecord, GameOutcome


class CompletedGameRegistry:
    """Write-once records of terminal game outcomes, keyed by game id."""

    def __init__(self):
        self._records: dict[str, CompletedGameRecord] = {}

    def add(
        self,
        game_id: str,
        player_id: str,
        outcome: GameOutcome,
        ended_at: float,
        payout_processed: bool = False,
    ) -> bool:
        """Record a terminal outcome. The first record for a game wins."""
        if game_id in self._records:
            return False
        self._records[game_id] = CompletedGameRecord(
            game_id=game_id,
            player_id=player_id,
            outcome=outcome,
            ended_at=ended_at,
            payout_processed=payout_processed,
        )
        return True

    def get(self, game_id: str) -> Optional[CompletedGameRecord]:
        return self._records.get(game_id)

    def mark_payout_processed(self, game_id: str) -> None:
        record = self._records.get(game_id)
        if record is not None:
            record.payout_processed = True

    def prune(self, older_than: float) -> int:
        """Remove records of games that ended before ``older_than``."""
        stale = [
            game_id
            for game_id, record in self._records.items()
            if record.ended_at < older_than
        ]
        for game_id in stale:
            del self._records[game_id]
        return len(stale)

    def records(self) -> list[CompletedGameRecord]:
        return list(self._records.values())

    def __len__(self) -> int:
        return len(self._records)
