"""Resolution of transaction parameters from options, on-chain lookups and defaults.

Each field is resolved with the same precedence:

1. an explicit value in :class:`~aptos_api.types.TransactionOptions`;
2. an on-chain estimate when the matching ``estimate_*`` flag is set;
3. an on-chain lookup (sequence number, chain id);
4. a fixed default from :class:`GasDefaults`.

Lookup failures propagate; there is no fallback past an explicit failure.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from aptos_sdk.account_address import AccountAddress

from ..constants import (
    DEFAULT_EXPIRATION_SECONDS,
    DEFAULT_GAS_UNIT_PRICE,
    DEFAULT_MAX_GAS_AMOUNT,
)
from ..types import AccountInfo, GasEstimate, TransactionOptions
from .config import NodeClientConfig

logger = logging.getLogger(__name__)


class ChainLookups(Protocol):
    """Read-only node operations the defaulting policy depends on."""

    def get_chain_id(self) -> int: ...

    def account(self, address: AccountAddress) -> AccountInfo: ...

    def estimate_gas_price(self) -> GasEstimate: ...

    def account_apt_balance(self, address: AccountAddress) -> int: ...


@dataclass(frozen=True)
class GasDefaults:
    """Fixed fallbacks, constant for the lifetime of a client."""

    max_gas_amount: int = DEFAULT_MAX_GAS_AMOUNT
    gas_unit_price: int = DEFAULT_GAS_UNIT_PRICE
    expiration_seconds: int = DEFAULT_EXPIRATION_SECONDS

    @classmethod
    def from_config(cls, config: NodeClientConfig) -> GasDefaults:
        return cls(
            max_gas_amount=config.max_gas_amount,
            gas_unit_price=config.gas_unit_price,
            expiration_seconds=config.expiration_seconds,
        )


@dataclass(frozen=True)
class ResolvedParameters:
    sequence_number: int
    max_gas_amount: int
    gas_unit_price: int
    expiration_timestamp_secs: int
    chain_id: int


def resolve_gas_unit_price(
    options: TransactionOptions, lookups: ChainLookups, defaults: GasDefaults
) -> int:
    if options.gas_unit_price is not None:
        return options.gas_unit_price

    if options.estimate_prioritized_gas_unit_price or options.estimate_gas_unit_price:
        estimate = lookups.estimate_gas_price()
        if options.estimate_prioritized_gas_unit_price:
            if estimate.prioritized_gas_estimate is not None:
                return estimate.prioritized_gas_estimate
            logger.warning("Node did not report a prioritized gas estimate, using gas_estimate")
        return estimate.gas_estimate

    return defaults.gas_unit_price


def resolve_max_gas_amount(
    sender: AccountAddress,
    options: TransactionOptions,
    gas_unit_price: int,
    lookups: ChainLookups,
    defaults: GasDefaults,
) -> int:
    if options.max_gas_amount is not None:
        return options.max_gas_amount

    if options.estimate_max_gas_amount:
        # Cap at what the sender can pay for at the resolved price
        balance = lookups.account_apt_balance(sender)
        affordable = balance // max(gas_unit_price, 1)
        return max(1, min(defaults.max_gas_amount, affordable))

    return defaults.max_gas_amount


def resolve_sequence_number(
    sender: AccountAddress, options: TransactionOptions, lookups: ChainLookups
) -> int:
    if options.sequence_number is not None:
        return options.sequence_number
    return lookups.account(sender).sequence_number


def resolve_chain_id(options: TransactionOptions, lookups: ChainLookups) -> int:
    if options.chain_id is not None:
        return options.chain_id
    return lookups.get_chain_id()


def resolve_expiration(
    options: TransactionOptions,
    defaults: GasDefaults,
    clock: Callable[[], float] = time.time,
) -> int:
    seconds = (
        options.expiration_seconds
        if options.expiration_seconds is not None
        else defaults.expiration_seconds
    )
    return int(clock()) + seconds


def resolve_parameters(
    sender: AccountAddress,
    options: TransactionOptions,
    lookups: ChainLookups,
    defaults: GasDefaults,
    clock: Callable[[], float] = time.time,
) -> ResolvedParameters:
    gas_unit_price = resolve_gas_unit_price(options, lookups, defaults)
    chain_id = resolve_chain_id(options, lookups)
    sequence_number = resolve_sequence_number(sender, options, lookups)
    max_gas_amount = resolve_max_gas_amount(sender, options, gas_unit_price, lookups, defaults)

    return ResolvedParameters(
        sequence_number=sequence_number,
        max_gas_amount=max_gas_amount,
        gas_unit_price=gas_unit_price,
        expiration_timestamp_secs=resolve_expiration(options, defaults, clock),
        chain_id=chain_id,
    )
