"""In-process stand-ins for the node HTTP API."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from urllib.parse import urlsplit

from requests import Session

from aptos_api.node import NodeClient, NodeClientConfig

NODE_URL = "http://node.test/v1"


class DummyResponse:
    def __init__(self, payload: Any, *, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    @property
    def text(self) -> str:
        if isinstance(self._payload, bytes):
            return self._payload.hex()
        return self._payload if isinstance(self._payload, str) else json.dumps(self._payload)

    @property
    def content(self) -> bytes:
        if isinstance(self._payload, bytes):
            return self._payload
        return self.text.encode()

    def json(self) -> Any:
        if isinstance(self._payload, str | bytes):
            raise ValueError("not json")
        return self._payload


def not_found() -> DummyResponse:
    return DummyResponse({"message": "not found", "error_code": "not_found"}, status_code=404)


class DummySession(Session):
    """Route requests by ``(method, path)`` to canned payloads or handlers.

    Handlers receive the recorded call and return a payload or a ``DummyResponse``.
    Unrouted paths answer 404.
    """

    def __init__(self) -> None:
        super().__init__()
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[SimpleNamespace] = []
        self._lock = threading.Lock()

    def route(self, method: str, path: str, handler: Any) -> None:
        self.routes[(method, path)] = handler

    def calls_to(self, path: str) -> list[SimpleNamespace]:
        return [call for call in self.calls if call.path == path]

    def request(self, method: str, url: str, **kwargs: Any) -> DummyResponse:  # type: ignore[override]
        parsed = urlsplit(url)
        path = parsed.path
        if parsed.netloc == urlsplit(NODE_URL).netloc and path.startswith("/v1"):
            path = path[len("/v1") :] or "/"

        call = SimpleNamespace(
            method=method,
            url=url,
            path=path,
            params=dict(kwargs.get("params") or {}),
            headers=dict(kwargs.get("headers") or {}),
            data=kwargs.get("data"),
            json=kwargs.get("json"),
            timeout=kwargs.get("timeout"),
        )
        with self._lock:
            self.calls.append(call)

        handler = self.routes.get((method, path))
        if handler is None:
            return not_found()
        result = handler(call) if callable(handler) else handler
        if isinstance(result, DummyResponse):
            return result
        return DummyResponse(result)


def make_node(session: DummySession, **overrides: Any) -> NodeClient:
    return NodeClient(NodeClientConfig(node_url=NODE_URL, **overrides), session)


def event_stream(
    total: int, event_type: str = "0x1::coin::WithdrawEvent"
) -> Callable[[SimpleNamespace], list[dict[str, Any]]]:
    """Serve ``total`` events honouring the ``start`` and ``limit`` query parameters."""

    def handler(call: SimpleNamespace) -> list[dict[str, Any]]:
        start = int(call.params.get("start", 0))
        limit = int(call.params.get("limit", 100))
        return [
            {
                "type": event_type,
                "guid": {"creation_number": "2", "account_address": "0x0"},
                "sequence_number": str(number),
                "data": {"amount": str(number * 10)},
            }
            for number in range(start, min(start + limit, total))
        ]

    return handler


def transaction_json(
    txn_hash: str, *, pending: bool = False, success: bool = True, version: int = 1
) -> dict[str, Any]:
    if pending:
        return {"type": "pending_transaction", "hash": txn_hash, "sender": "0x1"}
    return {
        "type": "user_transaction",
        "hash": txn_hash,
        "version": str(version),
        "success": success,
        "vm_status": "Executed successfully" if success else "Move abort",
        "sender": "0x1",
        "sequence_number": "0",
    }
