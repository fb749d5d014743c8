"""Lucky Triple deck: 4 suits x ranks A..6."""

import random
from typing import Optional, Sequence

from ..models.game import Card, Rank, Suit

DECK_SIZE = len(Suit) * len(Rank)


def build_cards() -> list[Card]:
    """All 24 distinct cards in suit/rank order."""
    return [Card(suit=suit, rank=rank) for suit in Suit for rank in Rank]


class Deck:
    """Shuffled card set consumed from the top."""

    def __init__(self, cards: Sequence[Card]):
        self._cards = list(cards)

    @classmethod
    def new_shuffled(cls, rng: Optional[random.Random] = None) -> "Deck":
        """Build the full card set and apply a uniform random permutation."""
        cards = build_cards()
        (rng or random.SystemRandom()).shuffle(cards)
        return cls(cards)

    def draw(self, count: int) -> list[Card]:
        """Remove and return ``count`` cards from the top of the deck."""
        if count < 0:
            raise ValueError("Cannot draw a negative number of cards")
        if len(self._cards) < count:
            raise ValueError("Not enough cards left in deck")
        return [self._cards.pop() for _ in range(count)]

    def size(self) -> int:
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    @property
    def cards(self) -> list[Card]:
        """Remaining cards, top of the deck last."""
        return list(self._cards)
