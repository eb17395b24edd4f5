"""Transaction and view payload shapes accepted by the client."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import (
    EntryFunction,
    ModuleId,
    Script,
    TransactionArgument,
    TransactionPayload,
)
from aptos_sdk.type_tag import TypeTag

from .exceptions import ValidationError


@dataclass(frozen=True)
class MultisigPayload:
    """Execute a transaction proposed to an on-chain multisig account.

    ``entry_function`` may be omitted when the payload was stored on chain with
    the proposal; only its hash is then checked by the multisig module.
    """

    # Variant index of ``TransactionPayload::Multisig``
    VARIANT = 3
    # Variant index of ``MultisigTransactionPayload::EntryFunction``
    ENTRY_FUNCTION = 0

    multisig_address: AccountAddress
    entry_function: EntryFunction | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.multisig_address, AccountAddress):
            raise ValidationError(
                "multisig_address must be an AccountAddress",
                field="multisig_address",
                value=self.multisig_address,
            )
        if self.entry_function is not None and not isinstance(self.entry_function, EntryFunction):
            raise ValidationError(
                "Multisig payloads can only carry an entry function",
                field="entry_function",
                value=type(self.entry_function).__name__,
            )

    def serialize(self, serializer: Serializer) -> None:
        serializer.uleb128(self.VARIANT)
        self.multisig_address.serialize(serializer)
        serializer.bool(self.entry_function is not None)
        if self.entry_function is not None:
            serializer.uleb128(self.ENTRY_FUNCTION)
            self.entry_function.serialize(serializer)


TransactionPayloadLike = TransactionPayload | EntryFunction | Script | MultisigPayload


@dataclass(frozen=True)
class ViewPayload:
    """A read-only Move function call with BCS-encoded arguments."""

    module: ModuleId
    function: str
    ty_args: Sequence[TypeTag] = ()
    args: Sequence[bytes] = ()

    @classmethod
    def natural(
        cls,
        module: str,
        function: str,
        ty_args: Sequence[TypeTag] = (),
        args: Sequence[TransactionArgument] = (),
    ) -> ViewPayload:
        """Build from ``"0x1::coin"`` style module ids and typed arguments."""
        return cls(
            module=ModuleId.from_str(module),
            function=function,
            ty_args=tuple(ty_args),
            args=tuple(arg.encode() for arg in args),
        )

    @property
    def function_id(self) -> str:
        return f"{self.module}::{self.function}"

    def to_bcs(self) -> bytes:
        # The view request body shares the entry function layout
        entry = EntryFunction(self.module, self.function, list(self.ty_args), list(self.args))
        serializer = Serializer()
        entry.serialize(serializer)
        return serializer.output()


def to_transaction_payload(payload: Any) -> TransactionPayload | MultisigPayload:
    """Normalise a payload into something ``RawTransaction`` can serialize.

    Entry functions and scripts are wrapped in ``TransactionPayload``. Multisig
    payloads serialize their own variant and are returned as is.
    """
    if isinstance(payload, TransactionPayload | MultisigPayload):
        return payload
    if isinstance(payload, EntryFunction | Script):
        return TransactionPayload(payload)
    if isinstance(payload, ViewPayload):
        raise ValidationError(
            "View payloads cannot be submitted as transactions; use view() instead",
            field="payload",
            value=payload.function_id,
        )
    raise ValidationError(
        f"Unsupported transaction payload type: {type(payload).__name__}",
        field="payload",
        value=payload,
    )
