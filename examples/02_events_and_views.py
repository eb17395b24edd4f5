"""Event and view function example for the Aptos API client.

This example demonstrates:
- Reading node info and the chain id
- Fetching a large event range with concurrent pages
- Calling a view function with typed decoding
"""

import os

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import TransactionArgument
from dotenv import load_dotenv

from aptos_api import AptosClient, ViewPayload, as_u64, network_config

load_dotenv()


def example_events_and_views():
    network = network_config(os.getenv("APTOS_NETWORK", "testnet"))
    client = AptosClient(network)

    info = client.info()
    print(f"Chain {client.get_chain_id()} at ledger version {info.ledger_version}")

    account = AccountAddress.from_str_relaxed(os.getenv("ACCOUNT_ADDRESS", "0x1"))
    creation_number = int(os.getenv("EVENT_CREATION_NUMBER", "0"))

    events = client.events_by_creation_number(account, creation_number, start=0, limit=250)
    print(f"Fetched {len(events)} events")
    for event in events[:5]:
        print(f"   #{event.sequence_number} {event.type}")

    payload = ViewPayload.natural(
        "0x1::account",
        "get_sequence_number",
        [],
        [TransactionArgument(account, Serializer.struct)],
    )
    (sequence_number,) = client.view_as(payload, [as_u64])
    print(f"Sequence number of {account}: {sequence_number}")


def main():
    print("=" * 50)
    print("Aptos API - Example 02")
    print("📜 Events and views")
    print("=" * 50)

    example_events_and_views()


if __name__ == "__main__":
    main()
