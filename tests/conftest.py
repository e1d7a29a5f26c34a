"""Pytest fixtures for signal client tests."""

import threading
from collections.abc import Callable, Iterator

import httpx
import pytest

from signalclient.api.signal import Signal, SignalPayload, Trace
from signalclient.client import Client

TEST_BASE_URL = "http://ingestion.test/"


class TrackingStream(httpx.SyncByteStream):
    """Response body that records whether it was fully read and closed."""

    def __init__(self, body: bytes = b"") -> None:
        self._body = body
        self.consumed = False
        self.closed = False
        self.released = threading.Event()

    def __iter__(self) -> Iterator[bytes]:
        if self._body:
            yield self._body
        self.consumed = True

    def close(self) -> None:
        self.closed = True
        self.released.set()


class RecordingTransport(httpx.MockTransport):
    """Mock transport keeping every request it receives."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._respond = handler or (lambda request: httpx.Response(200))
        super().__init__(self._record)

    def _record(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)


@pytest.fixture
def make_client() -> Iterator[Callable[..., tuple[Client, RecordingTransport]]]:
    """Build a client backed by a recording transport."""
    clients: list[Client] = []

    def factory(handler=None, token: str = "") -> tuple[Client, RecordingTransport]:
        transport = RecordingTransport(handler)
        client = Client(httpx.Client(transport=transport), token)
        client.base_url = TEST_BASE_URL
        clients.append(client)
        return client, transport

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def sample_signal() -> Signal:
    return Signal(
        signal_payload=SignalPayload(payload_schema="my schema", payload="hello signal"),
        type="my type",
        signal_name="my signal",
        source="agent",
    )


@pytest.fixture
def sample_trace() -> Trace:
    return Trace(
        signal_name="my trace",
        signal_payload=SignalPayload(payload_schema="my trace schema", payload="hello trace"),
        data=[
            Signal(
                signal_name="my signal 1",
                signal_payload=SignalPayload(payload_schema="my signal schema 1", payload="hello signal 1"),
            ),
            Signal(
                signal_name="my signal 2",
                signal_payload=SignalPayload(payload_schema="my signal schema 2", payload="hello signal 2"),
            ),
        ],
    )


@pytest.fixture
def tracking_stream() -> type[TrackingStream]:
    return TrackingStream
