"""Tests for record decoding and option bags."""

import pytest

from aptos_api.exceptions import DecodingError
from aptos_api.types import (
    AccountInfo,
    BatchSubmitResponse,
    Event,
    GasEstimate,
    NodeInfo,
    SimulateOptions,
    TransactionRecord,
)


class TestEvent:
    def test_from_dict(self):
        event = Event.from_dict(
            {
                "type": "0x1::coin::DepositEvent",
                "guid": {"creation_number": "3", "account_address": "0x1"},
                "sequence_number": "12",
                "data": {"amount": "5"},
            }
        )

        assert event.sequence_number == 12
        assert event.guid.creation_number == 3
        assert event.data == {"amount": "5"}

    def test_missing_guid(self):
        with pytest.raises(DecodingError) as excinfo:
            Event.from_dict({"type": "x", "sequence_number": "1"})
        assert excinfo.value.field == "guid"


class TestTransactionRecord:
    def test_pending(self):
        record = TransactionRecord.from_dict({"type": "pending_transaction", "hash": "0x1"})
        assert record.is_pending
        assert record.version is None

    def test_committed(self):
        record = TransactionRecord.from_dict(
            {
                "type": "user_transaction",
                "hash": "0x1",
                "version": "99",
                "success": False,
                "vm_status": "Move abort",
            }
        )
        assert record.is_committed
        assert record.version == 99
        assert record.success is False
        assert record.raw["vm_status"] == "Move abort"

    def test_not_an_object(self):
        with pytest.raises(DecodingError):
            TransactionRecord.from_dict(["type"])


class TestNodeRecords:
    def test_node_info(self):
        info = NodeInfo.from_dict(
            {"chain_id": 4, "epoch": "3", "ledger_version": "100", "node_role": "full_node"}
        )
        assert info.chain_id == 4
        assert info.ledger_version == 100
        assert info.node_role == "full_node"

    def test_node_info_rejects_zero_chain_id(self):
        with pytest.raises(DecodingError):
            NodeInfo.from_dict({"chain_id": 0})

    def test_account(self):
        account = AccountInfo.from_dict({"sequence_number": "4", "authentication_key": "0xab"})
        assert account.sequence_number == 4

    def test_gas_estimate_optional_fields(self):
        estimate = GasEstimate.from_dict({"gas_estimate": 100})
        assert estimate.prioritized_gas_estimate is None

    def test_batch_response_without_failures(self):
        assert BatchSubmitResponse.from_dict({}).all_succeeded


def test_simulate_query_params():
    assert SimulateOptions().query_params() == {}
    assert SimulateOptions(estimate_prioritized_gas_unit_price=True).query_params() == {
        "estimate_prioritized_gas_unit_price": "true"
    }
