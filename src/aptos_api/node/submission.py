"""Submission, batch submission and simulation of signed transactions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from aptos_sdk.authenticator import (
    Authenticator,
    FeePayerAuthenticator,
    MultiAgentAuthenticator,
)
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import (
    FeePayerRawTransaction,
    MultiAgentRawTransaction,
    RawTransaction,
    SignedTransaction,
)

from ..constants import ContentType
from ..exceptions import DecodingError, ValidationError
from ..payloads import TransactionPayloadLike
from ..types import (
    BatchSubmitResponse,
    SignedTransactionLike,
    SimulateOptions,
    SubmitResponse,
    TransactionOptions,
    TransactionRecord,
    TransactionSigner,
)
from .builder import TransactionBuilder
from .transport import NodeTransport

logger = logging.getLogger(__name__)


class SubmissionPipeline:
    """Send signed transactions to the node and report what it accepted."""

    def __init__(self, transport: NodeTransport, builder: TransactionBuilder) -> None:
        self._transport = transport
        self._builder = builder

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def submit_transaction(self, signed: SignedTransactionLike) -> SubmitResponse:
        response = SubmitResponse.from_dict(
            self._transport.post_bcs(
                "transactions", signed.bytes(), ContentType.SIGNED_TRANSACTION_BCS
            )
        )
        logger.info("Submitted transaction %s", response.hash)
        return response

    def batch_submit_transaction(
        self, signed_transactions: Sequence[SignedTransactionLike]
    ) -> BatchSubmitResponse:
        """Submit several transactions in one request.

        Per-transaction rejections are reported in ``failures`` rather than raised.
        """

        if not signed_transactions:
            raise ValidationError("Batch must contain at least one transaction", field="batch")

        serializer = Serializer()
        serializer.uleb128(len(signed_transactions))
        for signed in signed_transactions:
            serializer.fixed_bytes(signed.bytes())

        response = BatchSubmitResponse.from_dict(
            self._transport.post_bcs(
                "transactions/batch", serializer.output(), ContentType.SIGNED_TRANSACTION_BCS
            )
        )
        if response.failures:
            logger.warning(
                "Batch submit: %d of %d transactions rejected",
                len(response.failures),
                len(signed_transactions),
            )
        else:
            logger.info("Batch submitted %d transactions", len(signed_transactions))
        return response

    def build_sign_and_submit_transaction(
        self,
        signer: TransactionSigner,
        payload: TransactionPayloadLike,
        options: TransactionOptions | None = None,
    ) -> SubmitResponse:
        options = options or TransactionOptions()
        if options.additional_signers or options.fee_payer is not None:
            raise ValidationError(
                "Multi-agent transactions need every signer; build and sign them explicitly",
                field="options",
            )

        raw_transaction = self._builder.build_transaction(signer.address(), payload, options)
        authenticator = signer.sign_transaction(raw_transaction)
        return self.submit_transaction(SignedTransaction(raw_transaction, authenticator))

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def simulate_transaction(
        self,
        raw_transaction: RawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        options = options or SimulateOptions()
        _check_signer(signer, raw_transaction.sender, "signer")

        authenticator = signer.sign_simulated_transaction(raw_transaction)
        return self._simulate(SignedTransaction(raw_transaction, authenticator), options)

    def simulate_transaction_multi_agent(
        self,
        raw_transaction: MultiAgentRawTransaction | FeePayerRawTransaction,
        signer: TransactionSigner,
        options: SimulateOptions | None = None,
    ) -> list[TransactionRecord]:
        """Simulate a multi-agent or fee-payer transaction with placeholder signatures.

        ``options.secondary_signers`` must line up with the transaction's secondary
        signer addresses, and fee-payer transactions also need ``options.fee_payer_signer``.
        """

        options = options or SimulateOptions()
        inner = raw_transaction.inner()
        _check_signer(signer, inner.sender, "signer")

        expected = list(raw_transaction.secondary_signers)
        if len(options.secondary_signers) != len(expected):
            raise ValidationError(
                f"Expected {len(expected)} secondary signers, got {len(options.secondary_signers)}",
                field="secondary_signers",
            )
        secondary = []
        for address, secondary_signer in zip(expected, options.secondary_signers):
            _check_signer(secondary_signer, address, "secondary_signers")
            secondary.append(
                (address, secondary_signer.sign_simulated_transaction(raw_transaction))
            )

        sender_authenticator = signer.sign_simulated_transaction(raw_transaction)
        if isinstance(raw_transaction, FeePayerRawTransaction):
            fee_payer_signer = options.fee_payer_signer
            if fee_payer_signer is None:
                raise ValidationError(
                    "Fee payer transactions need a fee_payer_signer to simulate",
                    field="fee_payer_signer",
                )
            _check_signer(fee_payer_signer, raw_transaction.fee_payer, "fee_payer_signer")
            authenticator = Authenticator(
                FeePayerAuthenticator(
                    sender_authenticator,
                    secondary,
                    (
                        raw_transaction.fee_payer,
                        fee_payer_signer.sign_simulated_transaction(raw_transaction),
                    ),
                )
            )
        else:
            authenticator = Authenticator(MultiAgentAuthenticator(sender_authenticator, secondary))

        return self._simulate(SignedTransaction(inner, authenticator), options)

    def _simulate(
        self, signed: SignedTransactionLike, options: SimulateOptions
    ) -> list[TransactionRecord]:
        result: Any = self._transport.post_bcs(
            "transactions/simulate",
            signed.bytes(),
            ContentType.SIGNED_TRANSACTION_BCS,
            params=options.query_params(),
        )
        if not isinstance(result, list):
            raise DecodingError(
                f"Expected a list of simulated transactions, got {type(result).__name__}",
                field="transactions/simulate",
            )
        return [TransactionRecord.from_dict(entry) for entry in result]


def _check_signer(signer: TransactionSigner, expected: Any, field: str) -> None:
    if signer.address() != expected:
        raise ValidationError(
            f"Signer {signer.address()} does not match {expected}",
            field=field,
            value=str(signer.address()),
        )
