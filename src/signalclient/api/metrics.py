"""Builders for common signal kinds, such as summed metrics."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from signalclient.api.signal import Signal, SignalPayload, SignalType

METRIC_PAYLOAD_SCHEMA = "metric/2020-01-01T00:00:00.000Z"


class MetricValueEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: int


class MetricSignalPayload(BaseModel):
    """Payload of an aggregated metric over a capture interval.

    The type tag goes on the wire capitalized, as ``"Type"``, which is what
    the ingestion API has always received for metric payloads.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = Field("metric", alias="Type")
    capture_interval_s: int
    date_started: datetime
    date_ended: datetime
    kind: str
    values: list[MetricValueEntry]


def new_payload(schema: str, payload: Any) -> SignalPayload:
    return SignalPayload(payload_schema=schema, payload=payload)


def new_signal(
    signal_type: SignalType | str,
    name: str,
    source: str | None,
    payload: SignalPayload | None,
    **fields: Any,
) -> Signal:
    """Build a signal of any type; extra keyword fields go on the signal as-is."""
    return Signal(type=signal_type, signal_name=name, source=source, signal_payload=payload, **fields)


def new_point(name: str, source: str | None, payload: SignalPayload, **fields: Any) -> Signal:
    return new_signal(SignalType.POINT, name, source, payload, **fields)


def new_metric(name: str, source: str | None, started: datetime, payload: SignalPayload) -> Signal:
    """Build a metric signal.

    ``started`` is recorded in the signal context under ``date_started``.
    """
    return new_signal(SignalType.METRIC, name, source, payload, context={"date_started": started.isoformat()})


def new_sum_metric(
    name: str,
    source: str | None,
    started: datetime,
    ended: datetime,
    interval: timedelta,
    values: Mapping[str, int],
) -> Signal:
    """Build a metric signal whose values were summed over ``interval``."""
    return new_metric(name, source, started, _metric_payload(started, ended, interval, "sum", values))


def _metric_payload(
    started: datetime,
    ended: datetime,
    interval: timedelta,
    kind: str,
    values: Mapping[str, int],
) -> SignalPayload:
    entries = [MetricValueEntry(key=key, value=value) for key, value in sorted(values.items())]
    payload = MetricSignalPayload(
        capture_interval_s=int(interval.total_seconds()),
        date_started=started,
        date_ended=ended,
        kind=kind,
        values=entries,
    )
    return new_payload(METRIC_PAYLOAD_SCHEMA, payload.model_dump(mode="json", by_alias=True))
