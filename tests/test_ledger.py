"""Tests for RewardLedger idempotency."""

import asyncio

import pytest

from lucky_triple.errors import AccountNotReady
from lucky_triple.game.ledger import RewardLedger
from lucky_triple.models.game import PayoutStatus

from helpers import StubGateway


class TestRewardLedger:
    """Tests for payout request handling."""

    @pytest.mark.asyncio
    async def test_successful_payout(self, gateway, clock):
        """A first request reaches the gateway and completes."""
        ledger = RewardLedger(gateway, clock)

        status = await ledger.request_payout("alice", "g1", 15)

        assert status == PayoutStatus.COMPLETED
        assert gateway.calls == [("alice", "g1", 15)]
        entry = ledger.get("alice", "g1")
        assert entry.status == PayoutStatus.COMPLETED
        assert entry.signature == "sig-g1"
        assert entry.amount == 15

    @pytest.mark.asyncio
    async def test_repeat_request_is_noop(self, gateway, clock):
        """Any later request for the same key returns the stored status."""
        ledger = RewardLedger(gateway, clock)
        await ledger.request_payout("alice", "g1", 15)

        status = await ledger.request_payout("alice", "g1", 99)

        assert status == PayoutStatus.COMPLETED
        assert len(gateway.calls) == 1
        assert ledger.get("alice", "g1").amount == 15

    @pytest.mark.asyncio
    async def test_concurrent_requests_reach_gateway_once(self, clock):
        """Pending is written before the gateway call."""
        gateway = StubGateway(delay=0.01)
        ledger = RewardLedger(gateway, clock)

        results = await asyncio.gather(
            ledger.request_payout("alice", "g1", 15),
            ledger.request_payout("alice", "g1", 15),
            ledger.request_payout("alice", "g1", 12),
        )

        assert len(gateway.calls) == 1
        assert results[0] == PayoutStatus.COMPLETED
        assert results[1:] == [PayoutStatus.PENDING, PayoutStatus.PENDING]

    @pytest.mark.asyncio
    async def test_different_games_are_separate_keys(self, gateway, clock):
        """The key is (player, game)."""
        ledger = RewardLedger(gateway, clock)
        await ledger.request_payout("alice", "g1", 5)
        await ledger.request_payout("alice", "g2", 6)
        await ledger.request_payout("bob", "g1", 7)
        assert len(gateway.calls) == 3
        assert len(ledger) == 3

    @pytest.mark.asyncio
    async def test_failure_is_terminal(self, clock):
        """Failed payouts are recorded and never retried."""
        gateway = StubGateway(fail_with=AccountNotReady("no token account"))
        ledger = RewardLedger(gateway, clock)

        assert await ledger.request_payout("alice", "g1", 15) == PayoutStatus.FAILED
        assert await ledger.request_payout("alice", "g1", 15) == PayoutStatus.FAILED

        assert len(gateway.calls) == 1
        entry = ledger.get("alice", "g1")
        assert entry.status == PayoutStatus.FAILED
        assert "no token account" in entry.error

    @pytest.mark.asyncio
    async def test_unexpected_gateway_error_is_failure(self, clock):
        """Any gateway exception counts as failed."""
        ledger = RewardLedger(StubGateway(fail_with=RuntimeError("boom")), clock)
        assert await ledger.request_payout("alice", "g1", 15) == PayoutStatus.FAILED

    @pytest.mark.asyncio
    async def test_prune_removes_only_old_settled_entries(self, gateway, clock):
        """Retention is measured from entry creation."""
        ledger = RewardLedger(gateway, clock)
        await ledger.request_payout("alice", "old", 5)
        clock.advance(100)
        await ledger.request_payout("alice", "new", 5)

        removed = await ledger.prune(older_than=clock.now() - 50)

        assert removed == 1
        assert ledger.get("alice", "old") is None
        assert ledger.get("alice", "new") is not None

    def test_payouts_enabled_follows_gateway(self, gateway, clock):
        """Test the gateway flag passthrough."""
        assert RewardLedger(gateway, clock).payouts_enabled is True
