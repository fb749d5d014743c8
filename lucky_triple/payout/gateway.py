"""Payout gateway: hands reward transfers to the token-transfer service."""

import logging
from typing import Optional, Protocol

import httpx
from pydantic import BaseModel

from ..config import settings
from ..errors import AccountNotReady, InvalidRecipient, TransferFailed

logger = logging.getLogger(__name__)


class PayoutReceipt(BaseModel):
    """Proof that a transfer was accepted."""

    signature: str


class PayoutGateway(Protocol):
    """Submits a reward transfer.

    Implementations raise a ``PayoutFailure`` subclass when the transfer
    cannot be made.
    """

    enabled: bool

    async def submit(self, recipient: str, game_id: str, amount: int) -> PayoutReceipt: ...


class HttpPayoutGateway:
    """Async client for the token-transfer service."""

    enabled = True

    def __init__(
        self,
        endpoint: Optional[str] = settings.payout_endpoint,
        timeout: float = settings.payout_timeout,
    ):
        if not endpoint:
            raise ValueError("Payout endpoint is required")
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    async def check_connection(self) -> bool:
        """Check if the transfer service is reachable."""
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(f"{self.endpoint}/health")
                return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def submit(self, recipient: str, game_id: str, amount: int) -> PayoutReceipt:
        """
        Request a transfer of ``amount`` CARDS to ``recipient``.

        Args:
            recipient: Player wallet address
            game_id: Game the reward was won in
            amount: Whole CARDS tokens

        Returns:
            Receipt carrying the transaction signature
        """
        payload = {"recipient": recipient, "game_id": game_id, "amount": amount}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(f"{self.endpoint}/transfers", json=payload)
        except httpx.HTTPError as e:
            raise TransferFailed(f"Transfer request failed: {e}") from e

        if response.status_code in (400, 422):
            raise InvalidRecipient(f"Invalid recipient: {recipient}")
        if response.status_code == 409:
            raise AccountNotReady(f"Recipient {recipient} has no token account")
        if not response.is_success:
            raise TransferFailed(f"Transfer service returned {response.status_code}")

        try:
            signature = response.json().get("signature")
        except ValueError as e:
            raise TransferFailed("Transfer service returned invalid JSON") from e
        if not signature:
            raise TransferFailed("Transfer service response has no signature")
        return PayoutReceipt(signature=signature)


class DisabledPayoutGateway:
    """Gateway used when no transfer service is configured."""

    enabled = False

    async def submit(self, recipient: str, game_id: str, amount: int) -> PayoutReceipt:
        raise TransferFailed("Payouts are disabled: no payout endpoint configured")
