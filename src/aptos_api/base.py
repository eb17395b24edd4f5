"""Capability interfaces for the node, indexer and faucet collaborators."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.transactions import FeePayerRawTransaction, MultiAgentRawTransaction, RawTransaction

from .payloads import TransactionPayloadLike, ViewPayload
from .types import (
    AccountInfo,
    AccountResourceRecord,
    BatchSubmitResponse,
    CoinBalance,
    Event,
    GasEstimate,
    NodeInfo,
    PollOptions,
    SignedTransactionLike,
    SimulateOptions,
    SubmitResponse,
    TransactionOptions,
    TransactionRecord,
    TransactionSigner,
)


class NodeApi(ABC):
    """Full node REST API."""

    @abstractmethod
    def info(self) -> NodeInfo:
        pass

    @abstractmethod
    def get_chain_id(self) -> int:
        pass

    @abstractmethod
    def account(self, address: AccountAddress | str) -> AccountInfo:
        pass

    @abstractmethod
    def account_module(self, address: AccountAddress | str, module_name: str) -> dict[str, Any]:
        pass

    @abstractmethod
    def account_resources_bcs(self, address: AccountAddress | str) -> list[AccountResourceRecord]:
        pass

    @abstractmethod
    def estimate_gas_price(self) -> GasEstimate:
        pass

    @abstractmethod
    def account_apt_balance(self, address: AccountAddress | str) -> int:
        pass

    @abstractmethod
    def build_transaction(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> RawTransaction:
        pass

    @abstractmethod
    def build_transaction_multi_agent(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> MultiAgentRawTransaction | FeePayerRawTransaction:
        pass

    @abstractmethod
    def submit_transaction(self, signed: SignedTransactionLike) -> SubmitResponse:
        pass

    @abstractmethod
    def batch_submit_transaction(
        self, signed_transactions: Sequence[SignedTransactionLike]
    ) -> BatchSubmitResponse:
        pass

    @abstractmethod
    def simulate_transaction(
        self,
        raw_transaction: RawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        pass

    @abstractmethod
    def simulate_transaction_multi_agent(
        self,
        raw_transaction: MultiAgentRawTransaction | FeePayerRawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        pass

    @abstractmethod
    def poll_for_transaction(
        self, txn_hash: str, options: PollOptions | None = None
    ) -> TransactionRecord:
        pass

    @abstractmethod
    def poll_for_transactions(
        self, hashes: Sequence[str], options: PollOptions | None = None
    ) -> None:
        pass

    @abstractmethod
    def wait_for_transaction(self, txn_hash: str) -> TransactionRecord:
        pass

    @abstractmethod
    def wait_transaction_by_hash(self, txn_hash: str) -> TransactionRecord:
        pass

    @abstractmethod
    def events_by_handle(
        self,
        account: AccountAddress | str,
        event_handle: str,
        field_name: str,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        pass

    @abstractmethod
    def events_by_creation_number(
        self,
        account: AccountAddress | str,
        creation_number: int,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        pass

    @abstractmethod
    def view(self, payload: ViewPayload, ledger_version: int | None = None) -> list[Any]:
        pass


class IndexerApi(ABC):
    """GraphQL indexer."""

    @abstractmethod
    def query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        pass

    @abstractmethod
    def get_processor_status(self, processor_name: str) -> int:
        pass

    @abstractmethod
    def get_coin_balances(self, address: AccountAddress | str) -> list[CoinBalance]:
        pass


class FaucetApi(ABC):
    """Test network faucet."""

    @abstractmethod
    def fund(self, address: AccountAddress | str, amount: int) -> list[str]:
        pass
