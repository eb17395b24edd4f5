"""Tests for submission, batch submission and simulation."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from aptos_sdk.account import Account
from aptos_sdk.account_address import AccountAddress
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import EntryFunction, TransactionArgument
from fakes import DummyResponse, DummySession, make_node, transaction_json

from aptos_api.exceptions import NetworkError, ValidationError
from aptos_api.types import SimulateOptions, TransactionOptions

SIGNED_BCS = "application/x.aptos.signed_transaction+bcs"


class StubSigned:
    def __init__(self, payload: bytes) -> None:
        self._payload = payload

    def bytes(self) -> bytes:
        return self._payload


def _transfer(receiver: AccountAddress) -> EntryFunction:
    return EntryFunction.natural(
        "0x1::aptos_account",
        "transfer",
        [],
        [
            TransactionArgument(receiver, Serializer.struct),
            TransactionArgument(100, Serializer.u64),
        ],
    )


def _options(**kwargs) -> TransactionOptions:
    return TransactionOptions(sequence_number=0, chain_id=4, **kwargs)


class TestSubmitTransaction:
    def test_posts_bcs_body(self):
        session = DummySession()
        session.route("POST", "/transactions", {"hash": "0xfeed", "sender": "0x1"})
        node = make_node(session)

        response = node.submit_transaction(StubSigned(b"\x01\x02"))

        assert response.hash == "0xfeed"
        call = session.calls[0]
        assert call.data == b"\x01\x02"
        assert call.headers["Content-Type"] == SIGNED_BCS

    def test_rejection_surfaces_status_and_body(self):
        session = DummySession()
        session.route(
            "POST",
            "/transactions",
            DummyResponse({"message": "SEQUENCE_NUMBER_TOO_OLD"}, status_code=400),
        )
        node = make_node(session)

        with pytest.raises(NetworkError) as excinfo:
            node.submit_transaction(StubSigned(b"\x00"))
        assert excinfo.value.status_code == 400
        assert "SEQUENCE_NUMBER_TOO_OLD" in excinfo.value.body

    def test_build_sign_and_submit(self):
        sender = Account.generate()
        session = DummySession()
        session.route("GET", "/", {"chain_id": 4})
        session.route(
            "GET",
            f"/accounts/{sender.address()}",
            {"sequence_number": "11", "authentication_key": "0x00"},
        )
        session.route("POST", "/transactions", {"hash": "0xabc"})
        node = make_node(session)

        response = node.build_sign_and_submit_transaction(
            sender, _transfer(AccountAddress.from_str("0x1"))
        )

        assert response.hash == "0xabc"
        submitted = session.calls_to("/transactions")[0]
        assert isinstance(submitted.data, bytes) and submitted.data

    def test_build_sign_and_submit_rejects_multi_agent_options(self):
        node = make_node(DummySession())
        with pytest.raises(ValidationError):
            node.build_sign_and_submit_transaction(
                Account.generate(),
                _transfer(AccountAddress.from_str("0x1")),
                _options(fee_payer=Account.generate().address()),
            )


class TestBatchSubmit:
    def test_one_failure_reported_by_index(self):
        session = DummySession()
        session.route(
            "POST",
            "/transactions/batch",
            {
                "transaction_failures": [
                    {
                        "transaction_index": 1,
                        "error": {
                            "message": "invalid signature",
                            "error_code": "invalid_input",
                            "vm_error_code": 1,
                        },
                    }
                ]
            },
        )
        node = make_node(session)

        response = node.batch_submit_transaction(
            [StubSigned(b"\x01"), StubSigned(b"\x02"), StubSigned(b"\x03")]
        )

        assert not response.all_succeeded
        assert [failure.transaction_index for failure in response.failures] == [1]
        assert response.failures[0].message == "invalid signature"
        assert response.failures[0].vm_error_code == 1

    def test_all_valid(self):
        session = DummySession()
        session.route("POST", "/transactions/batch", {"transaction_failures": []})
        node = make_node(session)

        response = node.batch_submit_transaction([StubSigned(b"\x01"), StubSigned(b"\x02")])

        assert response.all_succeeded
        assert response.failures == []
        call = session.calls[0]
        # uleb128 length prefix followed by each signed transaction
        assert call.data == b"\x02\x01\x02"
        assert call.headers["Content-Type"] == SIGNED_BCS

    def test_empty_batch_rejected(self):
        session = DummySession()
        with pytest.raises(ValidationError):
            make_node(session).batch_submit_transaction([])
        assert session.calls == []


class TestSimulate:
    def _simulation_session(self) -> DummySession:
        session = DummySession()

        def simulate(call: SimpleNamespace):
            return [transaction_json("0xsim", version=0)]

        session.route("POST", "/transactions/simulate", simulate)
        return session

    def test_single_signer(self):
        sender = Account.generate()
        session = self._simulation_session()
        node = make_node(session)
        raw = node.build_transaction(
            sender.address(), _transfer(AccountAddress.from_str("0x1")), _options()
        )

        records = node.simulate_transaction(
            raw, sender, SimulateOptions(estimate_gas_unit_price=True, estimate_max_gas_amount=True)
        )

        assert records[0].hash == "0xsim"
        call = session.calls[0]
        assert call.params == {"estimate_gas_unit_price": "true", "estimate_max_gas_amount": "true"}
        assert call.headers["Content-Type"] == SIGNED_BCS

    def test_signer_must_be_sender(self):
        sender = Account.generate()
        node = make_node(DummySession())
        raw = node.build_transaction(
            sender.address(), _transfer(AccountAddress.from_str("0x1")), _options()
        )

        with pytest.raises(ValidationError):
            node.simulate_transaction(raw, Account.generate())

    def test_multi_agent(self):
        sender, second = Account.generate(), Account.generate()
        session = self._simulation_session()
        node = make_node(session)
        raw = node.build_transaction_multi_agent(
            sender.address(),
            _transfer(second.address()),
            _options(additional_signers=[second.address()]),
        )

        records = node.simulate_transaction_multi_agent(
            raw, sender, SimulateOptions(secondary_signers=[second])
        )

        assert len(records) == 1
        assert session.calls[0].params == {}

    def test_multi_agent_signer_mismatch(self):
        sender, second = Account.generate(), Account.generate()
        node = make_node(DummySession())
        raw = node.build_transaction_multi_agent(
            sender.address(),
            _transfer(second.address()),
            _options(additional_signers=[second.address()]),
        )

        with pytest.raises(ValidationError):
            node.simulate_transaction_multi_agent(raw, sender, SimulateOptions())
        with pytest.raises(ValidationError):
            node.simulate_transaction_multi_agent(
                raw, sender, SimulateOptions(secondary_signers=[Account.generate()])
            )

    def test_fee_payer(self):
        sender, payer = Account.generate(), Account.generate()
        session = self._simulation_session()
        node = make_node(session)
        raw = node.build_transaction_multi_agent(
            sender.address(),
            _transfer(AccountAddress.from_str("0x1")),
            _options(fee_payer=payer.address()),
        )

        with pytest.raises(ValidationError):
            node.simulate_transaction_multi_agent(raw, sender)

        records = node.simulate_transaction_multi_agent(
            raw, sender, SimulateOptions(fee_payer_signer=payer)
        )
        assert records[0].is_committed
