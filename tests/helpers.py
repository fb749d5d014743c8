"""Shared test doubles and card builders."""

import asyncio
from typing import Optional

from lucky_triple.game.cards import Deck
from lucky_triple.models.game import Card, Rank, Suit
from lucky_triple.payout.gateway import PayoutReceipt

SUIT_LETTERS = {
    "h": Suit.HEARTS,
    "d": Suit.DIAMONDS,
    "c": Suit.CLUBS,
    "s": Suit.SPADES,
}


def card(label: str) -> Card:
    """Build a card from a label like 'Ah' or '6s'."""
    return Card(rank=Rank(label[0].upper()), suit=SUIT_LETTERS[label[1].lower()])


def cards(*labels: str) -> list[Card]:
    return [card(label) for label in labels]


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class StubGateway:
    """Payout gateway that records submissions."""

    enabled = True

    def __init__(self, fail_with: Optional[Exception] = None, delay: float = 0.0):
        self.calls: list[tuple[str, str, int]] = []
        self.fail_with = fail_with
        self.delay = delay

    async def submit(self, recipient: str, game_id: str, amount: int) -> PayoutReceipt:
        self.calls.append((recipient, game_id, amount))
        await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with
        return PayoutReceipt(signature=f"sig-{game_id}")


def stacked_deck(*labels: str) -> Deck:
    """Deck that deals ``labels`` in the given order."""
    return Deck(list(reversed(cards(*labels))))
