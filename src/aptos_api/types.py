"""Type definitions and data models for the Aptos node API client."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.authenticator import AccountAuthenticator
from aptos_sdk.bcs import Deserializer
from aptos_sdk.type_tag import StructTag

from .constants import (
    DEFAULT_POLL_PERIOD,
    DEFAULT_POLL_TIMEOUT,
    U8_MAX,
    TransactionType,
)
from .exceptions import DecodingError, ValidationError
from .utils import check_u64, to_u64


class TransactionSigner(Protocol):
    """Anything that can sign for an account, e.g. ``aptos_sdk.account.Account``."""

    def address(self) -> AccountAddress: ...

    def sign_transaction(self, transaction: Any) -> AccountAuthenticator: ...

    def sign_simulated_transaction(self, transaction: Any) -> AccountAuthenticator: ...


class SignedTransactionLike(Protocol):
    """A signed transaction; only its BCS bytes are needed for submission."""

    def bytes(self) -> bytes: ...


# ----------------------------------------------------------------------
# Option bags
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class TransactionOptions:
    """Overrides applied on top of the defaults when building a transaction."""

    sequence_number: int | None = None
    max_gas_amount: int | None = None
    gas_unit_price: int | None = None
    expiration_seconds: int | None = None
    chain_id: int | None = None
    fee_payer: AccountAddress | None = None
    additional_signers: Sequence[AccountAddress] = ()
    estimate_gas_unit_price: bool = False
    estimate_max_gas_amount: bool = False
    estimate_prioritized_gas_unit_price: bool = False

    def __post_init__(self) -> None:
        check_u64(self.sequence_number, "sequence_number")
        check_u64(self.max_gas_amount, "max_gas_amount")
        check_u64(self.gas_unit_price, "gas_unit_price")
        check_u64(self.expiration_seconds, "expiration_seconds")

        if self.max_gas_amount == 0:
            raise ValidationError("'max_gas_amount' must be positive", field="max_gas_amount", value=0)
        if self.expiration_seconds == 0:
            raise ValidationError(
                "'expiration_seconds' must be positive", field="expiration_seconds", value=0
            )

        if self.chain_id is not None:
            if (
                isinstance(self.chain_id, bool)
                or not isinstance(self.chain_id, int)
                or not 1 <= self.chain_id <= U8_MAX
            ):
                raise ValidationError(
                    "'chain_id' must be an integer in 1..255", field="chain_id", value=self.chain_id
                )

        if self.fee_payer is not None and not isinstance(self.fee_payer, AccountAddress):
            raise ValidationError(
                "'fee_payer' must be an AccountAddress", field="fee_payer", value=self.fee_payer
            )

        signers = tuple(self.additional_signers)
        for signer in signers:
            if not isinstance(signer, AccountAddress):
                raise ValidationError(
                    "'additional_signers' must contain AccountAddress values",
                    field="additional_signers",
                    value=signer,
                )
        object.__setattr__(self, "additional_signers", signers)


@dataclass(frozen=True)
class PollOptions:
    """Period and timeout, in seconds, for confirmation polling."""

    poll_period: float = DEFAULT_POLL_PERIOD
    poll_timeout: float = DEFAULT_POLL_TIMEOUT

    def __post_init__(self) -> None:
        if self.poll_period <= 0:
            raise ValidationError(
                "'poll_period' must be positive", field="poll_period", value=self.poll_period
            )
        if self.poll_timeout <= 0:
            raise ValidationError(
                "'poll_timeout' must be positive", field="poll_timeout", value=self.poll_timeout
            )


@dataclass(frozen=True)
class SimulateOptions:
    """Options for transaction simulation.

    ``secondary_signers`` and ``fee_payer_signer`` only contribute their public
    identities; simulation never produces a real signature.
    """

    estimate_gas_unit_price: bool = False
    estimate_max_gas_amount: bool = False
    estimate_prioritized_gas_unit_price: bool = False
    secondary_signers: Sequence[TransactionSigner] = ()
    fee_payer_signer: TransactionSigner | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "secondary_signers", tuple(self.secondary_signers))

    def query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.estimate_gas_unit_price:
            params["estimate_gas_unit_price"] = "true"
        if self.estimate_max_gas_amount:
            params["estimate_max_gas_amount"] = "true"
        if self.estimate_prioritized_gas_unit_price:
            params["estimate_prioritized_gas_unit_price"] = "true"
        return params


# ----------------------------------------------------------------------
# Node records
# ----------------------------------------------------------------------
def _mapping(data: Any, record: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodingError(f"Expected an object for {record}, got {type(data).__name__}")
    return data


def _require(data: Mapping[str, Any], key: str, record: str) -> Any:
    if key not in data:
        raise DecodingError(f"{record} is missing '{key}'", field=key)
    return data[key]


def _optional_u64(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    return None if value is None else to_u64(value, field=key)


@dataclass(frozen=True)
class EventGuid:
    creation_number: int
    account_address: str


@dataclass(frozen=True)
class Event:
    """A single event from an account event stream."""

    type: str
    guid: EventGuid
    sequence_number: int
    data: Any

    @classmethod
    def from_dict(cls, data: Any) -> Event:
        payload = _mapping(data, "event")
        guid = _mapping(_require(payload, "guid", "event"), "event guid")
        return cls(
            type=str(_require(payload, "type", "event")),
            guid=EventGuid(
                creation_number=to_u64(
                    _require(guid, "creation_number", "event guid"), field="creation_number"
                ),
                account_address=str(_require(guid, "account_address", "event guid")),
            ),
            sequence_number=to_u64(
                _require(payload, "sequence_number", "event"), field="sequence_number"
            ),
            data=payload.get("data"),
        )


@dataclass(frozen=True)
class TransactionRecord:
    """A transaction as reported by the node, pending or committed."""

    type: str
    hash: str
    version: int | None = None
    success: bool | None = None
    vm_status: str | None = None
    sender: str | None = None
    sequence_number: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_pending(self) -> bool:
        return self.type == TransactionType.PENDING.value

    @property
    def is_committed(self) -> bool:
        return not self.is_pending

    @classmethod
    def from_dict(cls, data: Any) -> TransactionRecord:
        payload = _mapping(data, "transaction")
        success = payload.get("success")
        return cls(
            type=str(_require(payload, "type", "transaction")),
            hash=str(payload.get("hash", "")),
            version=_optional_u64(payload, "version"),
            success=success if isinstance(success, bool) else None,
            vm_status=payload.get("vm_status"),
            sender=payload.get("sender"),
            sequence_number=_optional_u64(payload, "sequence_number"),
            raw=dict(payload),
        )


@dataclass(frozen=True)
class SubmitResponse:
    hash: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> SubmitResponse:
        payload = _mapping(data, "submit response")
        return cls(hash=str(_require(payload, "hash", "submit response")), raw=dict(payload))


@dataclass(frozen=True)
class BatchSubmitFailure:
    """Why a single entry of a batch submission was rejected."""

    transaction_index: int
    message: str
    error_code: str | None = None
    vm_error_code: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> BatchSubmitFailure:
        payload = _mapping(data, "batch failure")
        error = _mapping(payload.get("error") or {}, "batch failure error")
        vm_error_code = error.get("vm_error_code")
        return cls(
            transaction_index=to_u64(
                _require(payload, "transaction_index", "batch failure"), field="transaction_index"
            ),
            message=str(error.get("message", "")),
            error_code=error.get("error_code"),
            vm_error_code=None if vm_error_code is None else int(vm_error_code),
        )


@dataclass(frozen=True)
class BatchSubmitResponse:
    """Per-transaction failures of a batch; an empty list means every entry was accepted."""

    failures: list[BatchSubmitFailure] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures

    @classmethod
    def from_dict(cls, data: Any) -> BatchSubmitResponse:
        payload = _mapping(data, "batch submit response")
        entries = payload.get("transaction_failures") or []
        if not isinstance(entries, list):
            raise DecodingError(
                "'transaction_failures' must be a list", field="transaction_failures"
            )
        return cls(failures=[BatchSubmitFailure.from_dict(entry) for entry in entries])


@dataclass(frozen=True)
class GasEstimate:
    gas_estimate: int
    deprioritized_gas_estimate: int | None = None
    prioritized_gas_estimate: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> GasEstimate:
        payload = _mapping(data, "gas estimate")
        return cls(
            gas_estimate=to_u64(_require(payload, "gas_estimate", "gas estimate"), "gas_estimate"),
            deprioritized_gas_estimate=_optional_u64(payload, "deprioritized_gas_estimate"),
            prioritized_gas_estimate=_optional_u64(payload, "prioritized_gas_estimate"),
        )


@dataclass(frozen=True)
class NodeInfo:
    """Ledger metadata returned by ``GET /``."""

    chain_id: int
    epoch: int | None = None
    ledger_version: int | None = None
    oldest_ledger_version: int | None = None
    ledger_timestamp: int | None = None
    block_height: int | None = None
    oldest_block_height: int | None = None
    node_role: str | None = None
    git_hash: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> NodeInfo:
        payload = _mapping(data, "node info")
        chain_id = to_u64(_require(payload, "chain_id", "node info"), field="chain_id")
        if not 1 <= chain_id <= U8_MAX:
            raise DecodingError(f"Node reported invalid chain id {chain_id}", field="chain_id")
        return cls(
            chain_id=chain_id,
            epoch=_optional_u64(payload, "epoch"),
            ledger_version=_optional_u64(payload, "ledger_version"),
            oldest_ledger_version=_optional_u64(payload, "oldest_ledger_version"),
            ledger_timestamp=_optional_u64(payload, "ledger_timestamp"),
            block_height=_optional_u64(payload, "block_height"),
            oldest_block_height=_optional_u64(payload, "oldest_block_height"),
            node_role=payload.get("node_role"),
            git_hash=payload.get("git_hash"),
        )


@dataclass(frozen=True)
class AccountInfo:
    sequence_number: int
    authentication_key: str

    @classmethod
    def from_dict(cls, data: Any) -> AccountInfo:
        payload = _mapping(data, "account")
        return cls(
            sequence_number=to_u64(
                _require(payload, "sequence_number", "account"), field="sequence_number"
            ),
            authentication_key=str(_require(payload, "authentication_key", "account")),
        )


@dataclass(frozen=True)
class AccountResourceRecord:
    """One resource from the BCS listing: its struct tag and raw BCS value."""

    tag: str
    data: bytes

    @classmethod
    def list_from_bcs(cls, body: bytes) -> list[AccountResourceRecord]:
        """Decode a BCS ``BTreeMap<StructTag, Vec<u8>>`` as returned by the node."""

        deserializer = Deserializer(body)
        try:
            count = deserializer.uleb128()
            records = [
                cls(tag=str(StructTag.deserialize(deserializer)), data=deserializer.to_bytes())
                for _ in range(count)
            ]
        except Exception as exc:
            # aptos_sdk reports truncated input with a bare Exception
            raise DecodingError(
                f"Malformed BCS resource listing: {exc}", field="resources"
            ) from exc
        if deserializer.remaining() != 0:
            raise DecodingError(
                f"{deserializer.remaining()} trailing byte(s) after BCS resource listing",
                field="resources",
            )
        return records


@dataclass(frozen=True)
class HealthCheckResponse:
    message: str

    @classmethod
    def from_dict(cls, data: Any) -> HealthCheckResponse:
        payload = _mapping(data, "health check")
        return cls(message=str(payload.get("message", "")))


@dataclass(frozen=True)
class CoinBalance:
    coin_type: str
    amount: int
    owner_address: str | None = None
