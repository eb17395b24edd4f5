"""Confirmation polling for submitted transactions."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from ..exceptions import NetworkError, TransactionTimeoutError, ValidationError
from ..types import PollOptions, TransactionRecord
from .transport import NodeTransport

logger = logging.getLogger(__name__)


class ConfirmationPoller:
    """Wait for transactions to leave the pending state within a time budget.

    A hash the node does not know yet (HTTP 404) or reports as
    ``pending_transaction`` is still pending. Any other record is terminal,
    whether or not the transaction succeeded. Other transport failures are
    raised immediately.
    """

    def __init__(
        self,
        transport: NodeTransport,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._transport = transport
        self._clock = clock
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------
    def poll_for_transaction(
        self, txn_hash: str, options: PollOptions | None = None
    ) -> TransactionRecord:
        return self._poll([txn_hash], options)[txn_hash]

    def poll_for_transactions(
        self, hashes: Iterable[str], options: PollOptions | None = None
    ) -> None:
        """Return once every hash is committed, or raise."""

        self._poll(list(hashes), options)

    def _poll(
        self, hashes: list[str], options: PollOptions | None
    ) -> dict[str, TransactionRecord]:
        options = options or PollOptions()
        for txn_hash in hashes:
            if not isinstance(txn_hash, str) or not txn_hash:
                raise ValidationError(
                    "Transaction hash must be a non-empty string", field="hash", value=txn_hash
                )

        deadline = self._clock() + options.poll_timeout
        outstanding = list(dict.fromkeys(hashes))
        committed: dict[str, TransactionRecord] = {}

        while outstanding:
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise self._timeout(outstanding, options)
            self._sleep(min(options.poll_period, remaining))

            still_pending = []
            for index, txn_hash in enumerate(outstanding):
                if self._clock() >= deadline:
                    raise self._timeout(still_pending + outstanding[index:], options)
                record = self._fetch(txn_hash)
                if record is None or record.is_pending:
                    still_pending.append(txn_hash)
                    continue
                logger.debug("Transaction %s committed at version %s", txn_hash, record.version)
                committed[txn_hash] = record

            outstanding = still_pending
            logger.debug("Poll iteration: %d pending", len(outstanding))

        return committed

    @staticmethod
    def _timeout(pending: list[str], options: PollOptions) -> TransactionTimeoutError:
        return TransactionTimeoutError(
            f"{len(pending)} transaction(s) still pending after {options.poll_timeout}s",
            hashes=pending,
            timeout=options.poll_timeout,
        )

    def _fetch(self, txn_hash: str) -> TransactionRecord | None:
        try:
            data = self._transport.get_json(f"transactions/by_hash/{txn_hash}")
        except NetworkError as exc:
            if exc.is_not_found:
                return None
            raise
        return TransactionRecord.from_dict(data)

    # ------------------------------------------------------------------
    # Long-poll
    # ------------------------------------------------------------------
    def wait_transaction_by_hash(self, txn_hash: str) -> TransactionRecord:
        """Issue one server-side long-poll and return whatever the node reports."""

        return TransactionRecord.from_dict(
            self._transport.get_json(f"transactions/wait_by_hash/{txn_hash}")
        )

    def wait_for_transaction(self, txn_hash: str) -> TransactionRecord:
        record = self.wait_transaction_by_hash(txn_hash)
        if record.is_pending:
            raise TransactionTimeoutError(
                f"Transaction {txn_hash} still pending after long-poll",
                hashes=[txn_hash],
            )
        return record
