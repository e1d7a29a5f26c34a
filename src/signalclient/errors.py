"""Error taxonomy for signal submission."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class SignalClientError(Exception):
    """Base class for every error raised by the client."""


class InvalidContextError(SignalClientError):
    """Raised when a call is made without a call context."""

    def __init__(self, message: str = "context must be non-nil") -> None:
        super().__init__(message)


class ContextError(SignalClientError):
    """Raised when the call context ended before the exchange completed."""


class DeadlineExceededError(ContextError):
    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class ContextCancelledError(ContextError):
    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class URLResolutionError(SignalClientError):
    """Raised when the base URL and the endpoint path cannot be combined."""


class PayloadEncodingError(SignalClientError):
    """Raised when a request body cannot be serialized to JSON."""


class ResponseDecodingError(SignalClientError):
    """Raised when a non-empty response body cannot be decoded."""


class APIError(SignalClientError):
    """Generic request error returned when the status code is unexpected."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        super().__init__(self._message())

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def _message(self) -> str:
        reason = getattr(self.response, "reason_phrase", "") or ""
        status = f"{self.status_code} {reason}".strip()
        return f"api error: response with status code {status}"


class AuthTokenError(APIError):
    """The access token is missing or was rejected (401)."""

    def _message(self) -> str:
        return "api error: access token is missing or invalid"


class InvalidSignalError(APIError):
    """One or more submitted signals were rejected by the server (422)."""

    def _message(self) -> str:
        return "api error: one of the provided signals is invalid"


class NilValueError(SignalClientError, ValueError):
    """Raised when a required argument is None."""

    def __init__(self, what: str = "value") -> None:
        super().__init__(f"unexpected nil {what}")


class EmptyDataError(SignalClientError, ValueError):
    def __init__(self, message: str = "unexpected empty trace data") -> None:
        super().__init__(message)


class EmptyBatchError(SignalClientError, ValueError):
    def __init__(self, message: str = "unexpected empty batch") -> None:
        super().__init__(message)


class BatchMembershipError(SignalClientError, TypeError):
    """Raised when a batch element is neither a Signal nor a Trace."""

    def __init__(self, index: int, value: object) -> None:
        self.index = index
        self.value = value
        super().__init__(
            f"batch element {index} has type {type(value).__name__}; only Signal and Trace can be batched"
        )
