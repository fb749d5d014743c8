"""Reward payout collaborators."""

from .gateway import (
    DisabledPayoutGateway,
    HttpPayoutGateway,
    PayoutGateway,
    PayoutReceipt,
)

__all__ = [
    "DisabledPayoutGateway",
    "HttpPayoutGateway",
    "PayoutGateway",
    "PayoutReceipt",
]
