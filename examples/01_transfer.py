"""APT transfer example for the Aptos API client.

This example demonstrates:
- Funding a fresh account from the faucet
- Building, simulating and submitting a transfer
- Waiting for the transaction to commit
"""

import os

from aptos_sdk.account import Account
from aptos_sdk.account_address import AccountAddress
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import EntryFunction, TransactionArgument
from dotenv import load_dotenv

from aptos_api import AptosClient, PollOptions, SimulateOptions, TransactionOptions, network_config

load_dotenv()


def example_transfer():
    """Send 1_000 octas from a funded account to a receiver."""

    network = network_config(os.getenv("APTOS_NETWORK", "devnet"))
    client = AptosClient(network)

    private_key = os.getenv("PRIVATE_KEY")
    sender = Account.load_key(private_key) if private_key else Account.generate()
    receiver = AccountAddress.from_str_relaxed(os.getenv("RECEIVER_ADDRESS", "0x1"))

    if not private_key:
        print(f"Funding new account {sender.address()}")
        client.fund(sender.address(), 100_000_000)

    print(f"Balance: {client.account_apt_balance(sender.address())} octas")

    payload = EntryFunction.natural(
        "0x1::aptos_account",
        "transfer",
        [],
        [
            TransactionArgument(receiver, Serializer.struct),
            TransactionArgument(1_000, Serializer.u64),
        ],
    )

    raw = client.build_transaction(
        sender.address(),
        payload,
        TransactionOptions(estimate_gas_unit_price=True, estimate_max_gas_amount=True),
    )
    simulated = client.simulate_transaction(raw, sender, SimulateOptions())
    print(f"Simulation: {simulated[0].vm_status}")

    submitted = client.build_sign_and_submit_transaction(sender, payload)
    print(f"Submitted {submitted.hash}")

    record = client.poll_for_transaction(submitted.hash, PollOptions(poll_timeout=30))
    if record.success:
        print(f"✅ Committed at version {record.version}")
    else:
        print(f"❌ Transaction failed: {record.vm_status}")


def main():
    print("=" * 50)
    print("Aptos API - Example 01")
    print("💸 APT transfer")
    print("=" * 50)

    example_transfer()


if __name__ == "__main__":
    main()
