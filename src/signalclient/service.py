"""Signal submission endpoints."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from signalclient.api.signal import Batch, Signal, Trace
from signalclient.context import CallContext
from signalclient.errors import EmptyBatchError, EmptyDataError, NilValueError

if TYPE_CHECKING:
    from signalclient.client import Client

SIGNALS_PATH = "signals"
TRACES_PATH = "traces"
BATCHES_PATH = "batches"


class SignalService:
    """Submission operations bound to one client.

    Each call validates its argument, then sends exactly one request. Errors
    from the client propagate unchanged.
    """

    def __init__(self, client: Client):
        self._client = client

    def send_signal(self, ctx: CallContext | None, signal: Signal | None) -> None:
        if signal is None:
            raise NilValueError("signal")
        self._post(ctx, SIGNALS_PATH, signal)

    def send_trace(self, ctx: CallContext | None, trace: Trace | None) -> None:
        if trace is None:
            raise NilValueError("trace")
        if not trace.data:
            raise EmptyDataError()
        self._post(ctx, TRACES_PATH, trace)

    def send_batch(self, ctx: CallContext | None, batch: Batch | Iterable[Signal] | None) -> None:
        """Send signals and traces in one request, in order.

        A plain iterable is turned into a ``Batch`` first, so foreign element
        types are rejected before anything is sent.
        """
        if batch is None:
            raise NilValueError("batch")
        if not isinstance(batch, Batch):
            batch = Batch(batch)
        if len(batch) == 0:
            raise EmptyBatchError()
        self._post(ctx, BATCHES_PATH, batch)

    def _post(self, ctx: CallContext | None, path: str, body: object) -> None:
        request = self._client.build_request("POST", path, body)
        self._client.execute(ctx, request)
