"""Aptos full node REST client."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import requests
from aptos_sdk.account_address import AccountAddress
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import (
    FeePayerRawTransaction,
    MultiAgentRawTransaction,
    RawTransaction,
    TransactionArgument,
)
from aptos_sdk.type_tag import StructTag, TypeTag

from ..base import NodeApi
from ..constants import APTOS_COIN_TYPE
from ..exceptions import DecodingError, ValidationError
from ..payloads import TransactionPayloadLike, ViewPayload
from ..types import (
    AccountInfo,
    AccountResourceRecord,
    BatchSubmitResponse,
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
from ..utils import as_u64, check_u64, to_address
from .builder import TransactionBuilder
from .chain import ChainIdCache
from .config import NodeClientConfig
from .defaults import GasDefaults
from .events import EventFetcher
from .poller import ConfirmationPoller
from .submission import SubmissionPipeline
from .transport import NodeTransport
from .view import ViewInvoker

logger = logging.getLogger(__name__)


class NodeClient(NodeApi):
    """Synchronous client for a single Aptos full node."""

    def __init__(self, config: NodeClientConfig, session: requests.Session | None = None) -> None:
        self._config = config
        self._transport = NodeTransport(config, session)
        self._chain_id = ChainIdCache(self._fetch_chain_id, configured=config.chain_id)
        self._builder = TransactionBuilder(self, GasDefaults.from_config(config))
        self._submission = SubmissionPipeline(self._transport, self._builder)
        self._poller = ConfirmationPoller(self._transport)
        self._events = EventFetcher(
            self._transport,
            page_size=config.events_page_size,
            max_workers=config.max_concurrent_page_requests,
        )
        self._view = ViewInvoker(self._transport)

    @property
    def config(self) -> NodeClientConfig:
        return self._config

    # ------------------------------------------------------------------
    # Transport settings
    # ------------------------------------------------------------------
    def set_timeout(self, timeout: float) -> None:
        self._transport.set_timeout(timeout)

    def set_header(self, key: str, value: str) -> None:
        self._transport.set_header(key, value)

    def remove_header(self, key: str) -> None:
        self._transport.remove_header(key)

    @property
    def transport(self) -> NodeTransport:
        return self._transport

    @property
    def poller(self) -> ConfirmationPoller:
        return self._poller

    # ------------------------------------------------------------------
    # Chain and account reads
    # ------------------------------------------------------------------
    def info(self) -> NodeInfo:
        return NodeInfo.from_dict(self._transport.get_json(""))

    def get_chain_id(self) -> int:
        return self._chain_id.get()

    def _fetch_chain_id(self) -> int:
        chain_id = self.info().chain_id
        logger.info("Node %s reports chain id %s", self._transport.base_url, chain_id)
        return chain_id

    def node_api_health_check(self, duration_secs: int | None = None) -> HealthCheckResponse:
        check_u64(duration_secs, "duration_secs")
        return HealthCheckResponse.from_dict(
            self._transport.get_json("-/healthy", params={"duration_secs": duration_secs})
        )

    def account(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> AccountInfo:
        account = to_address(address)
        return AccountInfo.from_dict(
            self._transport.get_json(
                f"accounts/{account}", params={"ledger_version": ledger_version}
            )
        )

    def account_resource(
        self,
        address: AccountAddress | str,
        resource_type: str,
        ledger_version: int | None = None,
    ) -> dict[str, Any]:
        account = to_address(address)
        if not resource_type:
            raise ValidationError("resource_type is required", field="resource_type")
        return self._transport.get_json(
            f"accounts/{account}/resource/{resource_type}",
            params={"ledger_version": ledger_version},
        )

    def account_resources(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> list[dict[str, Any]]:
        account = to_address(address)
        return _as_list(
            self._transport.get_json(
                f"accounts/{account}/resources", params={"ledger_version": ledger_version}
            ),
            "resources",
        )

    def account_resources_bcs(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> list[AccountResourceRecord]:
        """List resources as raw BCS values keyed by struct tag."""

        account = to_address(address)
        body = self._transport.get_bcs(
            f"accounts/{account}/resources", params={"ledger_version": ledger_version}
        )
        return AccountResourceRecord.list_from_bcs(body)

    def account_module(
        self,
        address: AccountAddress | str,
        module_name: str,
        ledger_version: int | None = None,
    ) -> dict[str, Any]:
        """Fetch a published module's bytecode and ABI."""

        account = to_address(address)
        if not module_name:
            raise ValidationError("module_name is required", field="module_name")
        data = self._transport.get_json(
            f"accounts/{account}/module/{module_name}",
            params={"ledger_version": ledger_version},
        )
        if not isinstance(data, dict):
            raise DecodingError(
                f"Expected a module object, got {type(data).__name__}", field="module"
            )
        return data

    def account_apt_balance(
        self, address: AccountAddress | str, ledger_version: int | None = None
    ) -> int:
        account = to_address(address)
        payload = ViewPayload.natural(
            "0x1::coin",
            "balance",
            [TypeTag(StructTag.from_str(APTOS_COIN_TYPE))],
            [TransactionArgument(account, Serializer.struct)],
        )
        (balance,) = self._view.view_as(payload, [as_u64], ledger_version)
        return balance

    def estimate_gas_price(self) -> GasEstimate:
        return GasEstimate.from_dict(self._transport.get_json("estimate_gas_price"))

    # ------------------------------------------------------------------
    # Transaction and block reads
    # ------------------------------------------------------------------
    def transaction_by_hash(self, txn_hash: str) -> TransactionRecord:
        return TransactionRecord.from_dict(
            self._transport.get_json(f"transactions/by_hash/{txn_hash}")
        )

    def transaction_by_version(self, version: int) -> TransactionRecord:
        check_u64(version, "version")
        return TransactionRecord.from_dict(
            self._transport.get_json(f"transactions/by_version/{version}")
        )

    def transactions(
        self, start: int | None = None, limit: int | None = None
    ) -> list[TransactionRecord]:
        check_u64(start, "start")
        check_u64(limit, "limit")
        data = self._transport.get_json("transactions", params={"start": start, "limit": limit})
        return [TransactionRecord.from_dict(entry) for entry in _as_list(data, "transactions")]

    def account_transactions(
        self,
        address: AccountAddress | str,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[TransactionRecord]:
        account = to_address(address)
        check_u64(start, "start")
        check_u64(limit, "limit")
        data = self._transport.get_json(
            f"accounts/{account}/transactions", params={"start": start, "limit": limit}
        )
        return [TransactionRecord.from_dict(entry) for entry in _as_list(data, "transactions")]

    def block_by_height(self, height: int, with_transactions: bool = False) -> dict[str, Any]:
        check_u64(height, "height")
        return self._transport.get_json(
            f"blocks/by_height/{height}",
            params={"with_transactions": _flag(with_transactions)},
        )

    def block_by_version(self, version: int, with_transactions: bool = False) -> dict[str, Any]:
        check_u64(version, "version")
        return self._transport.get_json(
            f"blocks/by_version/{version}",
            params={"with_transactions": _flag(with_transactions)},
        )

    # ------------------------------------------------------------------
    # Building and submission
    # ------------------------------------------------------------------
    def build_transaction(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> RawTransaction:
        return self._builder.build_transaction(sender, payload, options)

    def build_transaction_multi_agent(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> MultiAgentRawTransaction | FeePayerRawTransaction:
        return self._builder.build_transaction_multi_agent(sender, payload, options)

    def submit_transaction(self, signed: SignedTransactionLike) -> SubmitResponse:
        return self._submission.submit_transaction(signed)

    def batch_submit_transaction(
        self, signed_transactions: Sequence[SignedTransactionLike]
    ) -> BatchSubmitResponse:
        return self._submission.batch_submit_transaction(signed_transactions)

    def simulate_transaction(
        self,
        raw_transaction: RawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        return self._submission.simulate_transaction(raw_transaction, signer, options)

    def simulate_transaction_multi_agent(
        self,
        raw_transaction: MultiAgentRawTransaction | FeePayerRawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        return self._submission.simulate_transaction_multi_agent(raw_transaction, signer, options)

    def build_sign_and_submit_transaction(
        self,
        signer: TransactionSigner,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> SubmitResponse:
        return self._submission.build_sign_and_submit_transaction(signer, payload, options)

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------
    def poll_for_transaction(
        self, txn_hash: str, options: PollOptions | None = None
    ) -> TransactionRecord:
        return self._poller.poll_for_transaction(txn_hash, options)

    def poll_for_transactions(
        self, hashes: Sequence[str], options: PollOptions | None = None
    ) -> None:
        self._poller.poll_for_transactions(hashes, options)

    def wait_for_transaction(self, txn_hash: str) -> TransactionRecord:
        return self._poller.wait_for_transaction(txn_hash)

    def wait_transaction_by_hash(self, txn_hash: str) -> TransactionRecord:
        return self._poller.wait_transaction_by_hash(txn_hash)

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
        return self._events.events_by_handle(account, event_handle, field_name, start, limit)

    def events_by_creation_number(
        self,
        account: AccountAddress | str,
        creation_number: int,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        return self._events.events_by_creation_number(account, creation_number, start, limit)

    def view(self, payload: ViewPayload, ledger_version: int | None = None) -> list[Any]:
        return self._view.view(payload, ledger_version)

    def view_json(
        self,
        function_id: str,
        type_arguments: Sequence[str] = (),
        arguments: Sequence[Any] = (),
        ledger_version: int | None = None,
    ) -> list[Any]:
        return self._view.view_json(function_id, type_arguments, arguments, ledger_version)

    def view_as(
        self,
        payload: ViewPayload,
        decoders: Sequence[Callable[[Any], Any]],
        ledger_version: int | None = None,
    ) -> list[Any]:
        return self._view.view_as(payload, decoders, ledger_version)


def _flag(value: bool) -> str | None:
    return "true" if value else None


def _as_list(data: Any, what: str) -> list[Any]:
    if not isinstance(data, list):
        raise DecodingError(f"Expected a list of {what}, got {type(data).__name__}", field=what)
    return data
