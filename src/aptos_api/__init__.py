"""Aptos API - synchronous client for the Aptos full node REST API.

Builds, submits, simulates and confirms transactions, fetches paginated event
streams and calls view functions, using ``aptos-sdk`` for BCS encoding and
signing and ``requests`` for transport.
"""

from .base import FaucetApi, IndexerApi, NodeApi
from .client import AptosClient
from .config import (
    DEVNET,
    LOCALNET,
    MAINNET,
    TESTNET,
    NetworkConfig,
    named_networks,
    network_config,
)
from .exceptions import (
    AptosApiError,
    DecodingError,
    NetworkError,
    TransactionTimeoutError,
    UnconfiguredClientError,
    ValidationError,
)
from .faucet import FaucetClient
from .indexer import IndexerClient
from .node import NodeClient, NodeClientConfig
from .payloads import MultisigPayload, ViewPayload
from .types import (
    AccountInfo,
    AccountResourceRecord,
    BatchSubmitFailure,
    BatchSubmitResponse,
    CoinBalance,
    Event,
    EventGuid,
    GasEstimate,
    HealthCheckResponse,
    NodeInfo,
    PollOptions,
    SimulateOptions,
    SubmitResponse,
    TransactionOptions,
    TransactionRecord,
)
from .utils import as_address, as_bool, as_u64, sequence_of

__version__ = "0.1.0"

__all__ = [
    # Clients
    "AptosClient",
    "NodeClient",
    "IndexerClient",
    "FaucetClient",
    "NodeApi",
    "IndexerApi",
    "FaucetApi",
    # Configuration
    "NetworkConfig",
    "NodeClientConfig",
    "LOCALNET",
    "DEVNET",
    "TESTNET",
    "MAINNET",
    "named_networks",
    "network_config",
    # Options and records
    "TransactionOptions",
    "PollOptions",
    "SimulateOptions",
    "ViewPayload",
    "MultisigPayload",
    "AccountInfo",
    "AccountResourceRecord",
    "BatchSubmitFailure",
    "BatchSubmitResponse",
    "CoinBalance",
    "Event",
    "EventGuid",
    "GasEstimate",
    "HealthCheckResponse",
    "NodeInfo",
    "SubmitResponse",
    "TransactionRecord",
    # Exceptions
    "AptosApiError",
    "ValidationError",
    "NetworkError",
    "TransactionTimeoutError",
    "DecodingError",
    "UnconfiguredClientError",
    # View decoders
    "as_u64",
    "as_bool",
    "as_address",
    "sequence_of",
]
