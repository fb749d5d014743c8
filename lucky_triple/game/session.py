"""Game session state machine."""

import math
import random
from enum import Enum
from typing import Iterable, Optional

from ..errors import (
    GameAlreadyEnded,
    IllegalStateForHold,
    InvalidHoldCount,
    InvalidHoldPosition,
    MaxRoundsReached,
)
from ..models.game import (
    Card,
    CheckResult,
    Combination,
    DrawResult,
    GameConfig,
    GameOutcome,
    GameSnapshot,
    TimeStatus,
)
from .cards import Deck
from .evaluator import HAND_SIZE, HandEvaluator

MAX_HELD_CARDS = 2


class SessionState(str, Enum):
    """Lifecycle state of a session."""

    AWAITING_FIRST_DRAW = "awaiting_first_draw"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


class GameSession:
    """A single player's Lucky Triple game.

    Transitions are synchronous and bounded. Callers serialize access per
    player (see ``SessionStore.lock``) and pass the current time in, so the
    session never reads a clock itself.
    """

    def __init__(
        self,
        game_id: str,
        player_id: str,
        config: GameConfig,
        now: float,
        rng: Optional[random.Random] = None,
        deck: Optional[Deck] = None,
    ):
        self.game_id = game_id
        self.player_id = player_id
        self.config = config
        self._rng = rng
        self._evaluator = HandEvaluator(config.reward_tiers)

        self.deck = deck if deck is not None else Deck.new_shuffled(rng)
        self.cards: list[Card] = []
        self.held_cards: list[int] = []
        self.rounds_played = 0
        self.current_combination = Combination.NONE
        self.current_reward = 0

        self.is_ended = False
        self.timed_out = False
        self.reward_paid = False
        self.outcome: Optional[GameOutcome] = None

        self.created_at = now
        self.last_action_at = now
        self.ended_at: Optional[float] = None

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def max_rounds(self) -> int:
        return self.config.max_rounds

    @property
    def rounds_left(self) -> int:
        return self.max_rounds - self.rounds_played

    @property
    def state(self) -> SessionState:
        if self.is_ended:
            return SessionState.ENDED
        if self.rounds_played == 0:
            return SessionState.AWAITING_FIRST_DRAW
        return SessionState.IN_PROGRESS

    @property
    def deadline(self) -> float:
        """Lifetime is measured from creation; actions do not extend it."""
        return self.created_at + self.config.session_timeout_seconds

    def is_overdue(self, now: float) -> bool:
        return not self.is_ended and now - self.created_at >= self.config.session_timeout_seconds

    def time_remaining(self, now: float) -> int:
        """Whole seconds left, rounded up. 0 once the game has ended."""
        if self.is_ended:
            return 0
        return max(0, math.ceil(self.deadline - now))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def expire(self, now: float) -> bool:
        """Move to Ended{timeout} if the lifetime budget is spent.

        Returns True only on the call that performs the flip. A timed out
        game never pays, so the reward is cleared.
        """
        if not self.is_overdue(now):
            return False
        self.timed_out = True
        self.current_reward = 0
        self._end(GameOutcome.TIMEOUT, now)
        return True

    def hold(self, positions: Iterable[int], now: float) -> list[int]:
        """Replace the set of positions carried into the next draw."""
        positions = list(positions)
        if len(positions) > MAX_HELD_CARDS:
            raise InvalidHoldCount(f"Cannot hold more than {MAX_HELD_CARDS} cards")
        if len(set(positions)) != len(positions):
            raise InvalidHoldPosition("Held positions must be distinct")
        for position in positions:
            if isinstance(position, bool) or position not in range(HAND_SIZE):
                raise InvalidHoldPosition(f"Invalid card position: {position}")
        if self.is_ended or not 0 < self.rounds_played < self.max_rounds:
            raise IllegalStateForHold(
                "Can only hold cards between the first and the last round"
            )

        self.held_cards = sorted(positions)
        self.last_action_at = now
        return list(self.held_cards)

    def draw(self, now: float) -> list[int]:
        """Deal the next hand and return the positions that were held into it."""
        if self.rounds_played >= self.max_rounds:
            self.is_ended = True
            if self.ended_at is None:
                self.ended_at = now
            raise MaxRoundsReached("Maximum rounds reached for this game")
        if self.is_ended:
            raise GameAlreadyEnded("Game has already ended")

        if len(self.deck) < HAND_SIZE:
            self.deck = Deck.new_shuffled(self._rng)

        previously_held = list(self.held_cards)
        if self.rounds_played == 0:
            cards = self.deck.draw(HAND_SIZE)
        else:
            cards = [
                self.cards[i] if i in previously_held else self.deck.draw(1)[0]
                for i in range(HAND_SIZE)
            ]

        result = self._evaluator.evaluate(cards)
        self.cards = cards
        self.current_combination = result.combination
        self.current_reward = result.reward
        self.rounds_played += 1
        self.held_cards = []
        self.last_action_at = now

        if self.rounds_played >= self.max_rounds:
            self._end(self.scored_outcome, now)
        return previously_held

    def finish(self, now: float) -> GameOutcome:
        """End the game now with the current hand. No-op once ended."""
        if not self.is_ended:
            self._end(self.scored_outcome, now)
        return self.outcome

    @property
    def scored_outcome(self) -> GameOutcome:
        return GameOutcome.WIN if self.current_reward > 0 else GameOutcome.LOSS

    def _end(self, outcome: GameOutcome, now: float) -> None:
        self.is_ended = True
        self.outcome = outcome
        self.ended_at = now
        self.last_action_at = now
        self.held_cards = []

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def snapshot(self, now: float) -> GameSnapshot:
        return GameSnapshot(
            game_id=self.game_id,
            player_id=self.player_id,
            cards=list(self.cards),
            held_cards=list(self.held_cards),
            combination=self.current_combination,
            reward=self.current_reward,
            rounds_played=self.rounds_played,
            rounds_left=self.rounds_left,
            max_rounds=self.max_rounds,
            remaining_cards=len(self.deck),
            is_ended=self.is_ended,
            timed_out=self.timed_out,
            reward_paid=self.reward_paid,
            time_remaining=self.time_remaining(now),
            server_time=now,
        )

    def draw_result(self, previously_held: list[int], now: float) -> DrawResult:
        return DrawResult(
            game_id=self.game_id,
            player_id=self.player_id,
            cards=list(self.cards),
            combination=self.current_combination,
            reward=self.current_reward,
            rounds_left=self.rounds_left,
            remaining_cards=len(self.deck),
            is_ended=self.is_ended,
            previously_held=previously_held,
            reward_paid=self.reward_paid,
            time_remaining=self.time_remaining(now),
            server_time=now,
        )

    def check_result(self, outcome: GameOutcome) -> CheckResult:
        is_win = outcome is GameOutcome.WIN
        if is_win:
            message = (
                f"Congratulations! You won {self.current_reward} CARDS "
                f"with a {self.current_combination.value} hand!"
            )
        else:
            message = f"Game over. Your final hand was {self.current_combination.value}."
        return CheckResult(
            game_id=self.game_id,
            player_id=self.player_id,
            combination=self.current_combination,
            reward=self.current_reward,
            outcome=outcome,
            is_win=is_win,
            rounds_played=self.rounds_played,
            reward_paid=self.reward_paid,
            message=message,
        )

    def time_status(self, now: float) -> TimeStatus:
        return TimeStatus(
            time_remaining=self.time_remaining(now),
            is_timed_out=self.timed_out,
            is_ended=self.is_ended,
            server_time=now,
        )
