"""Client library for submitting telemetry signals to the ingestion API."""

from signalclient.api.signal import Batch, Location, Signal, SignalPayload, SignalType, StackFrame, Trace
from signalclient.client import Client, check_response, classify_status
from signalclient.config import DEFAULT_BASE_URL, SignalClientSettings
from signalclient.context import CallContext
from signalclient.errors import (
    APIError,
    AuthTokenError,
    BatchMembershipError,
    ContextCancelledError,
    ContextError,
    DeadlineExceededError,
    EmptyBatchError,
    EmptyDataError,
    InvalidContextError,
    InvalidSignalError,
    NilValueError,
    PayloadEncodingError,
    ResponseDecodingError,
    SignalClientError,
    URLResolutionError,
)
from signalclient.service import SignalService

__all__ = [
    "DEFAULT_BASE_URL",
    "APIError",
    "AuthTokenError",
    "Batch",
    "BatchMembershipError",
    "CallContext",
    "Client",
    "ContextCancelledError",
    "ContextError",
    "DeadlineExceededError",
    "EmptyBatchError",
    "EmptyDataError",
    "InvalidContextError",
    "InvalidSignalError",
    "Location",
    "NilValueError",
    "PayloadEncodingError",
    "ResponseDecodingError",
    "Signal",
    "SignalClientError",
    "SignalClientSettings",
    "SignalPayload",
    "SignalService",
    "SignalType",
    "StackFrame",
    "Trace",
    "URLResolutionError",
    "check_response",
    "classify_status",
]
