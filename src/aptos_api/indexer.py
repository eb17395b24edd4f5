"""GraphQL indexer client."""

from __future__ import annotations

import logging
from typing import Any

from aptos_sdk.account_address import AccountAddress

from .base import IndexerApi
from .exceptions import DecodingError, NetworkError, ValidationError
from .node.transport import NodeTransport
from .types import CoinBalance
from .utils import to_address, to_u64

logger = logging.getLogger(__name__)

PROCESSOR_STATUS_QUERY = """
query ProcessorStatus($processor: String!) {
  processor_status(where: {processor: {_eq: $processor}}) {
    last_success_version
  }
}
"""

COIN_BALANCES_QUERY = """
query CoinBalances($address: String!) {
  current_fungible_asset_balances(where: {owner_address: {_eq: $address}}) {
    owner_address
    asset_type
    amount
  }
}
"""


class IndexerClient(IndexerApi):
    """Post GraphQL queries to an indexer, sharing the node client's HTTP session."""

    def __init__(self, transport: NodeTransport, indexer_url: str) -> None:
        if not indexer_url:
            raise ValidationError("An indexer URL is required", field="indexer_url")
        self._transport = transport
        self._url = indexer_url

    @property
    def url(self) -> str:
        return self._url

    def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run ``query`` and return its ``data`` object.

        GraphQL-level errors are raised as ``NetworkError`` with the error list in
        ``details``.
        """

        response = self._transport.request_url(
            "POST", self._url, json={"query": query, "variables": variables or {}}
        )
        try:
            body = response.json()
        except ValueError as exc:
            raise DecodingError("Indexer response is not valid JSON", field="indexer") from exc

        if not isinstance(body, dict):
            raise DecodingError("Indexer response must be an object", field="indexer")
        if body.get("errors"):
            logger.error("Indexer query failed: %s", body["errors"])
            raise NetworkError(
                "Indexer query failed",
                endpoint=self._url,
                status_code=response.status_code,
                details={"errors": body["errors"]},
            )

        data = body.get("data")
        if not isinstance(data, dict):
            raise DecodingError("Indexer response is missing 'data'", field="data")
        return data

    def get_processor_status(self, processor_name: str) -> int:
        """Return the ledger version up to which ``processor_name`` has processed."""

        data = self.query(PROCESSOR_STATUS_QUERY, {"processor": processor_name})
        rows = data.get("processor_status") or []
        if not rows:
            raise DecodingError(f"Unknown processor '{processor_name}'", field="processor_status")
        return to_u64(rows[0].get("last_success_version"), field="last_success_version")

    def get_coin_balances(self, address: AccountAddress | str) -> list[CoinBalance]:
        owner = to_address(address, field="address")
        data = self.query(COIN_BALANCES_QUERY, {"address": str(owner)})
        return [
            CoinBalance(
                coin_type=str(row.get("asset_type", "")),
                amount=to_u64(row.get("amount"), field="amount"),
                owner_address=row.get("owner_address"),
            )
            for row in data.get("current_fungible_asset_balances") or []
        ]
