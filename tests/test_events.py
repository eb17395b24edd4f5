"""Tests for paginated event fetching."""

from __future__ import annotations

import threading
import time
from types import SimpleNamespace

import pytest
from fakes import DummyResponse, DummySession, event_stream, make_node

from aptos_api.constants import ACCOUNT_ZERO
from aptos_api.exceptions import DecodingError, NetworkError, ValidationError

HANDLE_PATH = "/accounts/0x0/events/0x2/transfer"
CREATION_PATH = "/accounts/0x0/events/123"


@pytest.fixture
def session() -> DummySession:
    session = DummySession()
    session.route("GET", HANDLE_PATH, event_stream(150))
    session.route("GET", CREATION_PATH, event_stream(150))
    return session


def _sequence_numbers(events) -> list[int]:
    return [event.sequence_number for event in events]


class TestEventsByHandle:
    """Fetching through the event handle endpoint."""

    def test_default_limit_returns_first_page(self, session):
        node = make_node(session)
        events = node.events_by_handle(ACCOUNT_ZERO, "0x2", "transfer")

        assert len(events) == 100
        assert events[-1].sequence_number == 99
        assert len(session.calls_to(HANDLE_PATH)) == 1
        assert "start" not in session.calls[0].params

    def test_large_range_is_fetched_in_order(self, session):
        node = make_node(session)
        events = node.events_by_handle(ACCOUNT_ZERO, "0x2", "transfer", start=0, limit=150)

        assert _sequence_numbers(events) == list(range(150))
        starts = sorted(call.params["start"] for call in session.calls_to(HANDLE_PATH))
        assert starts == [0, 100]

    def test_small_window(self, session):
        node = make_node(session)
        events = node.events_by_handle("0x0", "0x2", "transfer", start=50, limit=5)

        assert _sequence_numbers(events) == [50, 51, 52, 53, 54]
        assert events[0].data == {"amount": "500"}
        assert events[0].guid.creation_number == 2


class TestEventsByCreationNumber:
    """Fetching through the creation number endpoint."""

    def test_default_limit(self, session):
        node = make_node(session)
        events = node.events_by_creation_number(ACCOUNT_ZERO, 123)

        assert len(events) == 100
        assert events[-1].sequence_number == 99

    def test_large_range(self, session):
        node = make_node(session)
        events = node.events_by_creation_number(ACCOUNT_ZERO, 123, start=0, limit=150)

        assert _sequence_numbers(events) == list(range(150))

    def test_small_window(self, session):
        node = make_node(session)
        events = node.events_by_creation_number(ACCOUNT_ZERO, 123, start=50, limit=5)

        assert _sequence_numbers(events) == list(range(50, 55))


class TestPaging:
    """Fan-out, anchoring and exhaustion behaviour."""

    def test_pages_reassembled_when_completed_out_of_order(self):
        serve = event_stream(300)

        def slow_first_page(call: SimpleNamespace):
            if call.params.get("start") == 0:
                time.sleep(0.05)
            return serve(call)

        session = DummySession()
        session.route("GET", CREATION_PATH, slow_first_page)
        node = make_node(session)

        events = node.events_by_creation_number(ACCOUNT_ZERO, 123, start=0, limit=300)

        assert _sequence_numbers(events) == list(range(300))

    def test_unknown_start_anchors_on_probe_page(self):
        serve = event_stream(1000)

        def server_default_start(call: SimpleNamespace):
            params = dict(call.params)
            params.setdefault("start", 400)
            return serve(SimpleNamespace(params=params))

        session = DummySession()
        session.route("GET", CREATION_PATH, server_default_start)
        node = make_node(session)

        events = node.events_by_creation_number(ACCOUNT_ZERO, 123, limit=250)

        assert _sequence_numbers(events) == list(range(400, 650))
        calls = session.calls_to(CREATION_PATH)
        assert "start" not in calls[0].params
        assert sorted(call.params["start"] for call in calls[1:]) == [500, 600]

    def test_short_page_ends_the_stream(self, session):
        node = make_node(session)
        events = node.events_by_handle(ACCOUNT_ZERO, "0x2", "transfer", start=0, limit=500)

        assert _sequence_numbers(events) == list(range(150))

    def test_short_probe_page_is_returned_as_is(self):
        session = DummySession()
        session.route("GET", CREATION_PATH, event_stream(30))
        node = make_node(session)

        events = node.events_by_creation_number(ACCOUNT_ZERO, 123, limit=250)

        assert _sequence_numbers(events) == list(range(30))
        assert len(session.calls_to(CREATION_PATH)) == 1

    def test_concurrency_is_bounded(self):
        serve = event_stream(1000)
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def tracked(call: SimpleNamespace):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.01)
            with lock:
                state["active"] -= 1
            return serve(call)

        session = DummySession()
        session.route("GET", CREATION_PATH, tracked)
        node = make_node(session, max_concurrent_page_requests=2)

        events = node.events_by_creation_number(ACCOUNT_ZERO, 123, start=0, limit=1000)

        assert len(events) == 1000
        assert state["peak"] <= 2

    def test_page_error_propagates(self):
        serve = event_stream(300)

        def failing_second_page(call: SimpleNamespace):
            if call.params.get("start") == 100:
                return DummyResponse({"message": "boom"}, status_code=500)
            return serve(call)

        session = DummySession()
        session.route("GET", CREATION_PATH, failing_second_page)
        node = make_node(session)

        with pytest.raises(NetworkError) as excinfo:
            node.events_by_creation_number(ACCOUNT_ZERO, 123, start=0, limit=300)
        assert excinfo.value.status_code == 500

    def test_server_ignoring_start_is_rejected(self):
        serve = event_stream(300)

        def always_from_zero(call: SimpleNamespace):
            return serve(SimpleNamespace(params={"limit": call.params["limit"]}))

        session = DummySession()
        session.route("GET", CREATION_PATH, always_from_zero)
        node = make_node(session)

        with pytest.raises(DecodingError) as excinfo:
            node.events_by_creation_number(ACCOUNT_ZERO, 123, start=0, limit=300)
        assert excinfo.value.field == "sequence_number"
        assert excinfo.value.index == 0

    def test_gap_inside_a_page_is_rejected(self):
        serve = event_stream(100)

        def with_gap(call: SimpleNamespace):
            events = serve(call)
            del events[10]
            return events

        session = DummySession()
        session.route("GET", CREATION_PATH, with_gap)
        node = make_node(session)

        with pytest.raises(DecodingError) as excinfo:
            node.events_by_creation_number(ACCOUNT_ZERO, 123)
        assert excinfo.value.index == 10

    def test_zero_limit_rejected(self, session):
        node = make_node(session)
        with pytest.raises(ValidationError):
            node.events_by_creation_number(ACCOUNT_ZERO, 123, start=0, limit=0)
        assert session.calls == []
