"""Three-card hand evaluation.

Combinations are decided by an ordered rule table. The first rule whose
predicate matches wins. The table is ordered by descending default reward, so
a higher-paying combination is never shadowed by a lower one.
"""

from typing import Callable, Mapping, Optional, Sequence

from ..models.game import (
    Card,
    Combination,
    DEFAULT_REWARD_TIERS,
    HandResult,
)

HAND_SIZE = 3


def _same_suit(cards: Sequence[Card]) -> bool:
    return len({card.suit for card in cards}) == 1


def _same_rank(cards: Sequence[Card]) -> bool:
    return len({card.rank for card in cards}) == 1


def _consecutive(cards: Sequence[Card]) -> bool:
    # Ace is low only: A-2-3 is a straight, 5-6-A is not.
    orders = sorted(card.rank.order for card in cards)
    return all(high - low == 1 for low, high in zip(orders, orders[1:]))


HandRule = tuple[Combination, Callable[[Sequence[Card]], bool]]

RULES: list[HandRule] = [
    (Combination.LUCKY_TRIPLE, lambda c: _same_rank(c) and _same_suit(c)),
    (Combination.STRAIGHT_FLUSH, lambda c: _consecutive(c) and _same_suit(c)),
    (Combination.TRIPLE, _same_rank),
    (Combination.STRAIGHT, _consecutive),
    (Combination.FLUSH, _same_suit),
]


def classify(hand: Sequence[Card]) -> Combination:
    """Return the combination label of a 3-card hand."""
    if len(hand) != HAND_SIZE:
        return Combination.NONE
    for combination, matches in RULES:
        if matches(hand):
            return combination
    return Combination.NONE


class HandEvaluator:
    """Maps hands to combinations and reward tiers."""

    def __init__(self, reward_tiers: Optional[Mapping[Combination, int]] = None):
        self.reward_tiers = dict(DEFAULT_REWARD_TIERS)
        if reward_tiers:
            self.reward_tiers.update(reward_tiers)

    def evaluate(self, hand: Sequence[Card]) -> HandResult:
        combination = classify(hand)
        return HandResult(
            combination=combination,
            reward=self.reward_tiers.get(combination, 0),
        )


def evaluate(hand: Sequence[Card]) -> HandResult:
    """Evaluate a hand with the default reward tiers."""
    return HandEvaluator().evaluate(hand)
