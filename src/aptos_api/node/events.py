"""Paginated event stream fetching."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from aptos_sdk.account_address import AccountAddress

from ..constants import DEFAULT_MAX_CONCURRENT_PAGE_REQUESTS, EVENTS_PAGE_SIZE
from ..exceptions import DecodingError, ValidationError
from ..types import Event
from ..utils import check_u64, partition_range, to_address
from .transport import NodeTransport

logger = logging.getLogger(__name__)


class EventFetcher:
    """Fetch account event streams, splitting large ranges into concurrent pages.

    Pages are reassembled in ascending start order regardless of the order in
    which they complete. A page shorter than requested marks the end of the
    stream; later pages are cancelled or discarded.
    """

    def __init__(
        self,
        transport: NodeTransport,
        page_size: int = EVENTS_PAGE_SIZE,
        max_workers: int = DEFAULT_MAX_CONCURRENT_PAGE_REQUESTS,
    ) -> None:
        self._transport = transport
        self._page_size = page_size
        self._max_workers = max_workers

    def events_by_handle(
        self,
        account: AccountAddress | str,
        event_handle: str,
        field_name: str,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        address = to_address(account, field="account")
        if not event_handle or not field_name:
            raise ValidationError(
                "event_handle and field_name are required",
                field="event_handle" if not event_handle else "field_name",
            )
        return self._fetch(f"accounts/{address}/events/{event_handle}/{field_name}", start, limit)

    def events_by_creation_number(
        self,
        account: AccountAddress | str,
        creation_number: int,
        start: int | None = None,
        limit: int | None = None,
    ) -> list[Event]:
        address = to_address(account, field="account")
        check_u64(creation_number, "creation_number")
        return self._fetch(f"accounts/{address}/events/{creation_number}", start, limit)

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------
    def _fetch(self, path: str, start: int | None, limit: int | None) -> list[Event]:
        check_u64(start, "start")
        check_u64(limit, "limit")
        if limit is None:
            limit = self._page_size
        if limit == 0:
            raise ValidationError("'limit' must be positive", field="limit", value=limit)

        if limit <= self._page_size:
            return self._page(path, start, limit)

        if start is None:
            # Let the server pick the first page, then anchor the rest on it
            probe = self._page(path, None, self._page_size)
            if len(probe) < self._page_size:
                return probe
            anchor = probe[0].sequence_number
            pages = partition_range(
                anchor + self._page_size, limit - self._page_size, self._page_size
            )
            return probe + self._fan_out(path, pages)

        return self._fan_out(path, partition_range(start, limit, self._page_size))

    def _fan_out(self, path: str, pages: list[tuple[int, int]]) -> list[Event]:
        if not pages:
            return []

        workers = min(self._max_workers, len(pages))
        logger.debug("Fetching %d event pages from %s with %d workers", len(pages), path, workers)

        events: list[Event] = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="aptos-events") as pool:
            futures: list[Future[list[Event]]] = [
                pool.submit(self._page, path, page_start, page_limit)
                for page_start, page_limit in pages
            ]
            try:
                for index, (future, (page_start, page_limit)) in enumerate(zip(futures, pages)):
                    page = future.result()
                    events.extend(page)
                    if len(page) < page_limit:
                        logger.debug("Event stream %s exhausted at start=%d", path, page_start)
                        self._discard(futures[index + 1 :], path)
                        break
            finally:
                for future in futures:
                    future.cancel()

        return events

    @staticmethod
    def _discard(futures: list[Future[list[Event]]], path: str) -> None:
        for future in futures:
            if future.cancel() or not future.done() or future.exception() is not None:
                continue
            if future.result():
                logger.warning("Discarding events past the end of stream %s", path)
                return

    def _page(self, path: str, start: int | None, limit: int) -> list[Event]:
        data: Any = self._transport.get_json(path, params={"start": start, "limit": limit})
        if not isinstance(data, list):
            raise DecodingError(
                f"Expected a list of events, got {type(data).__name__}", field=path
            )
        events = [Event.from_dict(entry) for entry in data]
        _check_page(events, path, start)
        return events


def _check_page(events: list[Event], path: str, start: int | None) -> None:
    """Pages must begin at the requested sequence number and have no gaps."""

    if not events:
        return
    first = events[0].sequence_number if start is None else start
    for index, event in enumerate(events):
        if event.sequence_number != first + index:
            raise DecodingError(
                f"Event page from {path} expected sequence number {first + index}, "
                f"got {event.sequence_number}",
                field="sequence_number",
                index=index,
            )
