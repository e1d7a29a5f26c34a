"""Base data structures of telemetry signals.

Higher-level signals such as metrics are built from there.
"""

from signalclient.api.metrics import (
    METRIC_PAYLOAD_SCHEMA,
    MetricSignalPayload,
    MetricValueEntry,
    new_metric,
    new_payload,
    new_point,
    new_signal,
    new_sum_metric,
)
from signalclient.api.signal import (
    Batch,
    BatchElement,
    Location,
    Signal,
    SignalPayload,
    SignalType,
    StackFrame,
    Trace,
)

__all__ = [
    "METRIC_PAYLOAD_SCHEMA",
    "Batch",
    "BatchElement",
    "Location",
    "MetricSignalPayload",
    "MetricValueEntry",
    "Signal",
    "SignalPayload",
    "SignalType",
    "StackFrame",
    "Trace",
    "new_metric",
    "new_payload",
    "new_point",
    "new_signal",
    "new_sum_metric",
]
