"""Error taxonomy for game and payout failures."""


class LuckyTripleError(Exception):
    """Base exception for game-related errors."""

    code = "internal_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"[{self.code}] {message}")


# Unknown game or player
class NotFound(LuckyTripleError):
    code = "not_found"


class GameNotFound(NotFound):
    code = "game_not_found"

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__("Game not found")


# Action not valid for the current round or end state
class IllegalState(LuckyTripleError):
    code = "illegal_state"


class IllegalStateForHold(IllegalState):
    code = "illegal_state_for_hold"


class MaxRoundsReached(IllegalState):
    code = "max_rounds_reached"


class GameAlreadyEnded(IllegalState):
    code = "game_already_ended"


# Malformed input
class InvalidArgument(LuckyTripleError):
    code = "invalid_argument"


class InvalidHoldCount(InvalidArgument):
    code = "invalid_hold_count"


class InvalidHoldPosition(InvalidArgument):
    code = "invalid_hold_position"


class EntryFeeRequired(InvalidArgument):
    code = "entry_fee_required"


class GameTimedOut(LuckyTripleError):
    """Raised when lazy expiry rejects an in-flight action."""

    code = "game_timed_out"

    def __init__(self, game_id: str, server_time: float):
        self.game_id = game_id
        self.server_time = server_time
        super().__init__("Game has timed out")


# Payout gateway failures, recorded as `failed` in the ledger
class PayoutFailure(LuckyTripleError):
    code = "payout_failure"


class InvalidRecipient(PayoutFailure):
    code = "invalid_recipient"


class AccountNotReady(PayoutFailure):
    code = "account_not_ready"


class TransferFailed(PayoutFailure):
    code = "transfer_failed"
