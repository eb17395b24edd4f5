"""Faucet client for test networks."""

from __future__ import annotations

import logging

from aptos_sdk.account_address import AccountAddress

from .base import FaucetApi
from .exceptions import DecodingError, ValidationError
from .node.poller import ConfirmationPoller
from .node.transport import NodeTransport
from .types import PollOptions
from .utils import to_address

logger = logging.getLogger(__name__)


class FaucetClient(FaucetApi):
    """Mint test coins into an account and wait for the mint to commit."""

    def __init__(
        self,
        transport: NodeTransport,
        poller: ConfirmationPoller,
        faucet_url: str,
        poll_options: PollOptions | None = None,
    ) -> None:
        if not faucet_url:
            raise ValidationError("A faucet URL is required", field="faucet_url")
        self._transport = transport
        self._poller = poller
        self._url = faucet_url.rstrip("/")
        self._poll_options = poll_options

    @property
    def url(self) -> str:
        return self._url

    def fund(self, address: AccountAddress | str, amount: int) -> list[str]:
        """Fund ``address`` with ``amount`` octas, creating the account if needed.

        Returns the mint transaction hashes once they have all committed.
        """

        account = to_address(address, field="address")
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("Amount must be a positive integer", field="amount", value=amount)

        response = self._transport.request_url(
            "POST",
            f"{self._url}/mint",
            params={"amount": amount, "address": str(account)},
        )
        try:
            hashes = response.json()
        except ValueError as exc:
            raise DecodingError("Faucet response is not valid JSON", field="mint") from exc
        if not isinstance(hashes, list) or not all(isinstance(h, str) for h in hashes):
            raise DecodingError("Faucet must return a list of transaction hashes", field="mint")

        logger.info("Faucet minted %s octas to %s in %d transaction(s)", amount, account, len(hashes))
        self._poller.poll_for_transactions(hashes, self._poll_options)
        return hashes
