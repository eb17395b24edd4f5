"""Raw transaction assembly."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.transactions import (
    FeePayerRawTransaction,
    MultiAgentRawTransaction,
    RawTransaction,
)

from ..exceptions import ValidationError
from ..payloads import TransactionPayloadLike, to_transaction_payload
from ..types import TransactionOptions
from ..utils import to_address
from .defaults import ChainLookups, GasDefaults, resolve_parameters

logger = logging.getLogger(__name__)


class TransactionBuilder:
    """Turn a payload plus options into a fully resolved raw transaction."""

    def __init__(
        self,
        lookups: ChainLookups,
        defaults: GasDefaults | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lookups = lookups
        self._defaults = defaults or GasDefaults()
        self._clock = clock

    def build_transaction(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> RawTransaction:
        """Build a single-signer raw transaction."""

        options = options or TransactionOptions()
        sender_address = to_address(sender, field="sender")
        transaction_payload = to_transaction_payload(payload)

        params = resolve_parameters(
            sender_address, options, self._lookups, self._defaults, self._clock
        )
        logger.debug(
            "Built transaction sender=%s seq=%s gas=%sx%s chain=%s",
            sender_address,
            params.sequence_number,
            params.max_gas_amount,
            params.gas_unit_price,
            params.chain_id,
        )

        return RawTransaction(
            sender_address,
            params.sequence_number,
            transaction_payload,
            params.max_gas_amount,
            params.gas_unit_price,
            params.expiration_timestamp_secs,
            params.chain_id,
        )

    def build_transaction_multi_agent(
        self,
        sender: AccountAddress | str,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> MultiAgentRawTransaction | FeePayerRawTransaction:
        """Build a multi-agent or fee-payer raw transaction.

        Requires ``additional_signers`` or ``fee_payer`` in ``options``; when a fee
        payer is given the result is a ``FeePayerRawTransaction``.
        """

        options = options or TransactionOptions()
        if not options.additional_signers and options.fee_payer is None:
            raise ValidationError(
                "Multi-agent transactions need additional_signers or a fee_payer",
                field="options",
            )

        raw_transaction = self.build_transaction(sender, payload, options)
        secondary_signers = list(options.additional_signers)

        if options.fee_payer is not None:
            return FeePayerRawTransaction(raw_transaction, secondary_signers, options.fee_payer)
        return MultiAgentRawTransaction(raw_transaction, secondary_signers)
