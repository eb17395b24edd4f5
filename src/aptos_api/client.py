"""Aptos client facade combining the node, indexer and faucet clients."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import requests
from aptos_sdk.account_address import AccountAddress
from aptos_sdk.transactions import FeePayerRawTransaction, MultiAgentRawTransaction, RawTransaction

from .base import FaucetApi, IndexerApi
from .config import NetworkConfig
from .exceptions import UnconfiguredClientError
from .faucet import FaucetClient
from .indexer import IndexerClient
from .node.client import NodeClient
from .node.config import NodeClientConfig
from .payloads import TransactionPayloadLike, ViewPayload
from .types import (
    AccountInfo,
    AccountResourceRecord,
    BatchSubmitResponse,
    CoinBalance,
    Event,
    GasEstimate,
    HealthCheckResponse,
    NodeInfo,
    PollOptions,
    SignedTransactionLike,
    SimulateOptions,
    SubmitResponse,
    TransactionOptions,
    TransactionRecord,
    TransactionSigner,
)

logger = logging.getLogger(__name__)


class AptosClient:
    """One entry point for a network: node REST API, plus indexer and faucet when configured.

    The indexer and faucet are only built when the network has a URL for them;
    calling into a missing one raises ``UnconfiguredClientError``.
    """

    def __init__(
        self,
        network: NetworkConfig,
        session: requests.Session | None = None,
        *,
        node_config: NodeClientConfig | None = None,
    ) -> None:
        self._network = network
        config = node_config or NodeClientConfig(node_url=network.node_url, chain_id=network.chain_id)
        self._node = NodeClient(config, session)

        self._indexer: IndexerApi | None = None
        if network.indexer_url:
            self._indexer = IndexerClient(self._node.transport, network.indexer_url)

        self._faucet: FaucetApi | None = None
        if network.faucet_url:
            self._faucet = FaucetClient(self._node.transport, self._node.poller, network.faucet_url)

        logger.info("Aptos client configured for %s (%s)", network.name, config.resolved_node_url())

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------
    @property
    def network(self) -> NetworkConfig:
        return self._network

    @property
    def node(self) -> NodeClient:
        return self._node

    @property
    def indexer(self) -> IndexerApi:
        if self._indexer is None:
            raise UnconfiguredClientError("indexer")
        return self._indexer

    @property
    def faucet(self) -> FaucetApi:
        if self._faucet is None:
            raise UnconfiguredClientError("faucet")
        return self._faucet

    # ------------------------------------------------------------------
    # Transport settings
    # ------------------------------------------------------------------
    def set_timeout(self, timeout: float) -> None:
        self._node.set_timeout(timeout)

    def set_header(self, key: str, value: str) -> None:
        self._node.set_header(key, value)

    def remove_header(self, key: str) -> None:
        self._node.remove_header(key)

    # ------------------------------------------------------------------
    # Node reads
    # ------------------------------------------------------------------
    def info(self) -> NodeInfo:
        return self._node.info()

    def get_chain_id(self) -> int:
        return self._node.get_chain_id()

    def node_api_health_check(self, duration_secs: int | None = None) -> HealthCheckResponse:
        return self._node.node_api_health_check(duration_secs)

    def account(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> AccountInfo:
        return self._node.account(address, ledger_version)

    def account_resource(
        self,
        address: AccountAddress | str,
        resource_type: str,
        ledger_version: int | None = None,
    ) -> dict[str, Any]:
        return self._node.account_resource(address, resource_type, ledger_version)

    def account_resources(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> list[dict[str, Any]]:
        return self._node.account_resources(address, ledger_version)

    def account_resources_bcs(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> list[AccountResourceRecord]:
        return self._node.account_resources_bcs(address, ledger_version)

    def account_module(
        self,
        address: AccountAddress | str,
        module_name: str,
        ledger_version: int | None = None,
    ) -> dict[str, Any]:
        return self._node.account_module(address, module_name, ledger_version)

    def account_apt_balance(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> int:
        return self._node.account_apt_balance(address, ledger_version)

    def estimate_gas_price(self) -> GasEstimate:
        return self._node.estimate_gas_price()

    def transaction_by_hash(self, txn_hash: str) -> TransactionRecord:
        return self._node.transaction_by_hash(txn_hash)

    def transaction_by_version(self, version: int) -> TransactionRecord:
        return self._node.transaction_by_version(version)

    def transactions(
        self, start: int | None = None, limit: int | None = None
    ) -> list[TransactionRecord]:
        return self._node.transactions(start, limit)

    def account_transactions(
        self,
        address: AccountAddress | str,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[TransactionRecord]:
        return self._node.account_transactions(address, start, limit)

    def block_by_height(self, height: int, with_transactions: bool = False) -> dict[str, Any]:
        return self._node.block_by_height(height, with_transactions)

    def block_by_version(self, version: int, with_transactions: bool = False) -> dict[str, Any]:
        return self._node.block_by_version(version, with_transactions)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------
    def build_transaction(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> RawTransaction:
        return self._node.build_transaction(sender, payload, options)

    def build_transaction_multi_agent(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> MultiAgentRawTransaction | FeePayerRawTransaction:
        return self._node.build_transaction_multi_agent(sender, payload, options)

    def submit_transaction(self, signed: SignedTransactionLike) -> SubmitResponse:
        return self._node.submit_transaction(signed)

    def batch_submit_transaction(
        self, signed_transactions: Sequence[SignedTransactionLike]
    ) -> BatchSubmitResponse:
        return self._node.batch_submit_transaction(signed_transactions)

    def simulate_transaction(
        self,
        raw_transaction: RawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        return self._node.simulate_transaction(raw_transaction, signer, options)

    def simulate_transaction_multi_agent(
        self,
        raw_transaction: MultiAgentRawTransaction | FeePayerRawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        return self._node.simulate_transaction_multi_agent(raw_transaction, signer, options)

    def build_sign_and_submit_transaction(
        self,
        signer: TransactionSigner,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> SubmitResponse:
        return self._node.build_sign_and_submit_transaction(signer, payload, options)

    def poll_for_transaction(
        self, txn_hash: str, options: PollOptions | None = None
    ) -> TransactionRecord:
        return self._node.poll_for_transaction(txn_hash, options)

    def poll_for_transactions(
        self, hashes: Sequence[str], options: PollOptions | None = None
    ) -> None:
        self._node.poll_for_transactions(hashes, options)

    def wait_for_transaction(self, txn_hash: str) -> TransactionRecord:
        return self._node.wait_for_transaction(txn_hash)

    def wait_transaction_by_hash(self, txn_hash: str) -> TransactionRecord:
        return self._node.wait_transaction_by_hash(txn_hash)

    # ------------------------------------------------------------------
    # Events and views
    # ------------------------------------------------------------------
    def events_by_handle(
        self,
        account: AccountAddress | str,
        event_handle: str,
        field_name: str,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        return self._node.events_by_handle(account, event_handle, field_name, start, limit)

    def events_by_creation_number(
        self,
        account: AccountAddress | str,
        creation_number: int,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        return self._node.events_by_creation_number(account, creation_number, start, limit)

    def view(self, payload: ViewPayload, ledger_version: int | None = None) -> list[Any]:
        return self._node.view(payload, ledger_version)

    def view_json(
        self,
        function_id: str,
        type_arguments: Sequence[str] = (),
        arguments: Sequence[Any] = (),
        ledger_version: int | None = None,
    ) -> list[Any]:
        return self._node.view_json(function_id, type_arguments, arguments, ledger_version)

    def view_as(
        self,
        payload: ViewPayload,
        decoders: Sequence[Callable[[Any], Any]],
        ledger_version: int | None = None,
    ) -> list[Any]:
        return self._node.view_as(payload, decoders, ledger_version)

    # ------------------------------------------------------------------
    # Faucet and indexer
    # ------------------------------------------------------------------
    def fund(self, address: AccountAddress | str, amount: int) -> list[str]:
        return self.faucet.fund(address, amount)

    def query_indexer(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        return self.indexer.query(query, variables)

    def get_processor_status(self, processor_name: str) -> int:
        return self.indexer.get_processor_status(processor_name)

    def get_coin_balances(self, address: AccountAddress | str) -> list[CoinBalance]:
        return self.indexer.get_coin_balances(address)
