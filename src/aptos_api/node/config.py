"""Configuration containers for the node client."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from ..constants import (
    DEFAULT_EXPIRATION_SECONDS,
    DEFAULT_GAS_UNIT_PRICE,
    DEFAULT_MAX_CONCURRENT_PAGE_REQUESTS,
    DEFAULT_MAX_GAS_AMOUNT,
    DEFAULT_REQUEST_TIMEOUT,
    EVENTS_PAGE_SIZE,
)
from ..exceptions import ValidationError


@dataclass(frozen=True)
class NodeClientConfig:
    """Aggregated configuration for the node REST client."""

    node_url: str
    chain_id: int = 0
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    max_gas_amount: int = DEFAULT_MAX_GAS_AMOUNT
    gas_unit_price: int = DEFAULT_GAS_UNIT_PRICE
    expiration_seconds: int = DEFAULT_EXPIRATION_SECONDS
    events_page_size: int = EVENTS_PAGE_SIZE
    max_concurrent_page_requests: int = DEFAULT_MAX_CONCURRENT_PAGE_REQUESTS
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.events_page_size <= 0:
            raise ValidationError(
                "events_page_size must be positive",
                field="events_page_size",
                value=self.events_page_size,
            )
        if self.max_concurrent_page_requests <= 0:
            raise ValidationError(
                "max_concurrent_page_requests must be positive",
                field="max_concurrent_page_requests",
                value=self.max_concurrent_page_requests,
            )

    def resolved_node_url(self) -> str:
        """Return the node URL without a trailing slash."""

        return self.node_url.rstrip("/")
