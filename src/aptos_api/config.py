"""Network presets for the Aptos client."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ValidationError


@dataclass(frozen=True)
class NetworkConfig:
    """Which network the client talks to.

    A ``chain_id`` of 0 means the chain id is fetched from the node on first use.
    Empty ``indexer_url`` / ``faucet_url`` leave that collaborator unconfigured.
    """

    name: str
    node_url: str
    chain_id: int = 0
    indexer_url: str = ""
    faucet_url: str = ""

    def __post_init__(self) -> None:
        if not self.node_url:
            raise ValidationError("A node URL is required", field="node_url", value=self.node_url)
        if not 0 <= self.chain_id <= 255:
            raise ValidationError("Chain id must fit in a u8", field="chain_id", value=self.chain_id)


LOCALNET = NetworkConfig(
    name="localnet",
    chain_id=4,
    node_url="http://127.0.0.1:8080/v1",
    indexer_url="http://127.0.0.1:8090/v1/graphql",
    faucet_url="http://127.0.0.1:8081",
)

# Devnet resets regularly and its chain id changes with each reset
DEVNET = NetworkConfig(
    name="devnet",
    node_url="https://api.devnet.aptoslabs.com/v1",
    indexer_url="https://api.devnet.aptoslabs.com/v1/graphql",
    faucet_url="https://faucet.devnet.aptoslabs.com/",
)

TESTNET = NetworkConfig(
    name="testnet",
    chain_id=2,
    node_url="https://api.testnet.aptoslabs.com/v1",
    indexer_url="https://api.testnet.aptoslabs.com/v1/graphql",
    faucet_url="https://faucet.testnet.aptoslabs.com/",
)

MAINNET = NetworkConfig(
    name="mainnet",
    chain_id=1,
    node_url="https://api.mainnet.aptoslabs.com/v1",
    indexer_url="https://api.mainnet.aptoslabs.com/v1/graphql",
)


def named_networks() -> dict[str, NetworkConfig]:
    """Return a fresh name -> config mapping of the built-in presets."""
    return {config.name: config for config in (LOCALNET, DEVNET, TESTNET, MAINNET)}


def network_config(name: str) -> NetworkConfig:
    """Look up a preset by name (case-insensitive)."""
    networks = named_networks()
    key = name.lower()
    if key not in networks:
        raise ValidationError(
            f"Unknown network '{name}'. Expected one of: {', '.join(sorted(networks))}",
            field="network",
            value=name,
        )
    return networks[key]
