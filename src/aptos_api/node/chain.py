"""Write-once chain id cache."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ChainIdCache:
    """Memoise the chain id for the lifetime of a client.

    A configured non-zero chain id is returned without touching the network.
    Otherwise the first caller fetches it while concurrent callers wait on the
    lock; a failed fetch leaves the cache empty so the next call retries.
    """

    def __init__(self, fetch: Callable[[], int], configured: int = 0) -> None:
        self._fetch = fetch
        self._chain_id: int | None = configured or None
        self._lock = threading.Lock()

    @property
    def cached(self) -> int | None:
        return self._chain_id

    def get(self) -> int:
        chain_id = self._chain_id
        if chain_id is not None:
            return chain_id

        with self._lock:
            if self._chain_id is None:
                self._chain_id = self._fetch()
                logger.debug("Cached chain id %s", self._chain_id)
            return self._chain_id
