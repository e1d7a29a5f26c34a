"""HTTP client for the signal ingestion API.

Builds JSON requests against the configured base URL, injects the session
token, and turns response statuses into typed errors shared by every
submission operation.
"""

from __future__ import annotations

import json
import re
import threading
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from signalclient.api.signal import Batch
from signalclient.config import DEFAULT_BASE_URL, SignalClientSettings
from signalclient.context import CallContext
from signalclient.errors import (
    APIError,
    AuthTokenError,
    DeadlineExceededError,
    InvalidContextError,
    InvalidSignalError,
    PayloadEncodingError,
    ResponseDecodingError,
    URLResolutionError,
)
from signalclient.logging import DebugLogger, http_debug_logger
from signalclient.service import SignalService

SESSION_HEADER = "X-Session-Key"
JSON_MEDIA_TYPE = "application/json"

_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: AuthTokenError,
    422: InvalidSignalError,
}

_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def classify_status(status_code: int) -> type[APIError] | None:
    """Map a status code to the error it raises, or None for 2xx."""
    if 200 <= status_code <= 299:
        return None
    return _STATUS_ERRORS.get(status_code, APIError)


def check_response(response: httpx.Response) -> None:
    error_type = classify_status(response.status_code)
    if error_type is not None:
        raise error_type(response)


def encode_body(body: Any) -> bytes:
    """Serialize a request body to JSON.

    HTML-sensitive and non-ASCII characters are written as-is so payloads
    round-trip byte for byte.
    """
    try:
        if isinstance(body, Batch):
            body = body.to_wire()
        elif isinstance(body, BaseModel):
            body = body.model_dump(mode="json")
        text = json.dumps(body, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise PayloadEncodingError(f"cannot encode request body: {exc}") from exc
    return text.encode("utf-8")


def format_request(request: httpx.Request) -> str:
    lines = [f"{request.method} {request.url.raw_path.decode('ascii')} HTTP/1.1"]
    lines.extend(f"{name}: {value}" for name, value in request.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n" + request.content.decode("utf-8", errors="replace")


def format_response(response: httpx.Response) -> str:
    lines = [f"{response.http_version} {response.status_code} {response.reason_phrase}"]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n" + response.content.decode("utf-8", errors="replace")


def _has_scheme(path: str) -> bool:
    return _SCHEME.match(path) is not None


class _Exchange:
    """One send/read/close cycle, run on a daemon worker thread.

    ``wake`` is set when the cycle ends, whatever the outcome.
    """

    def __init__(self, http: httpx.Client, request: httpx.Request, wake: threading.Event) -> None:
        self.response: httpx.Response | None = None
        self.error: Exception | None = None
        self._done = threading.Event()
        self._wake = wake
        self._thread = threading.Thread(
            target=self._run, args=(http, request), name="signalclient-exchange", daemon=True
        )

    @property
    def finished(self) -> bool:
        return self._done.is_set()

    def start(self) -> None:
        self._thread.start()

    def _run(self, http: httpx.Client, request: httpx.Request) -> None:
        try:
            response = http.send(request, stream=True)
            try:
                response.read()
            finally:
                response.close()
            self.response = response
        except Exception as exc:
            # Re-raised on the calling thread.
            self.error = exc
        finally:
            self._done.set()
            self._wake.set()


class Client:
    """Ingestion API client.

    Usage:
        client = Client(token="...")
        client.signal_service().send_signal(CallContext.with_timeout(5), signal)

    ``base_url`` may be reassigned after construction, e.g. to point at a
    test server.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        token: str = "",
        *,
        logger: DebugLogger | None = None,
    ):
        self._http = http_client if http_client is not None else httpx.Client()
        self._token = token
        self.base_url: str | httpx.URL = DEFAULT_BASE_URL
        self.logger = logger

    @classmethod
    def from_settings(
        cls,
        config: SignalClientSettings | None = None,
        http_client: httpx.Client | None = None,
    ) -> Client:
        from signalclient.config import settings

        config = config or settings
        if http_client is None:
            http_client = httpx.Client(timeout=config.timeout_seconds)
        token = config.token.get_secret_value() if config.token else ""
        client = cls(http_client, token, logger=http_debug_logger() if config.debug else None)
        client.base_url = config.base_url
        return client

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def signal_service(self) -> SignalService:
        return SignalService(self)

    def build_request(self, method: str, path: str, body: Any = None) -> httpx.Request:
        """Build a request for ``path`` relative to the base URL.

        The body, when given, is sent as JSON.
        """
        url = self._resolve(path)
        headers = {"Accept": JSON_MEDIA_TYPE}
        content = None
        if body is not None:
            content = encode_body(body)
            headers["Content-Type"] = JSON_MEDIA_TYPE
        return self._http.build_request(method, url, content=content, headers=headers)

    def execute(
        self,
        ctx: CallContext | None,
        request: httpx.Request,
        response_type: Any = None,
    ) -> Any:
        """Send ``request`` and interpret the response.

        The response body is always read and closed so the connection goes
        back to the pool. On success the body is decoded into
        ``response_type`` when one is given; a blank body decodes to None.

        The call returns as soon as ``ctx`` is cancelled or its deadline
        passes, with the context's error. An exchange left behind that way
        still drains and closes its response on its worker thread.
        """
        if ctx is None:
            raise InvalidContextError()
        ctx_err = ctx.err()
        if ctx_err is not None:
            raise ctx_err

        request.headers[SESSION_HEADER] = self._token
        self._bound_timeout(request, ctx.remaining())
        self._debug("sending request", format_request(request))

        wake = threading.Event()
        exchange = _Exchange(self._http, request, wake)
        unregister = ctx.on_cancel(wake.set)
        try:
            exchange.start()
            wake.wait(ctx.remaining())
        finally:
            unregister()

        ctx_err = ctx.err()
        if not exchange.finished:
            self._debug("abandoned exchange", f"{request.method} {request.url}: {ctx_err}")
            raise ctx_err or DeadlineExceededError()
        if exchange.error is not None:
            if ctx_err is not None:
                raise ctx_err from exchange.error
            raise exchange.error
        if ctx_err is not None:
            raise ctx_err

        response = exchange.response
        assert response is not None
        self._debug("received response", format_response(response))
        check_response(response)

        if response_type is None or not response.content.strip():
            return None
        try:
            return TypeAdapter(response_type).validate_json(response.content)
        except ValidationError as exc:
            raise ResponseDecodingError(f"cannot decode response body: {exc}") from exc

    def _resolve(self, path: str) -> httpx.URL:
        if ":" in path.split("/", 1)[0] and not _has_scheme(path):
            raise URLResolutionError(f"cannot resolve {path!r}: first path segment contains a colon")
        try:
            url = httpx.URL(self.base_url).join(httpx.URL(path))
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise URLResolutionError(f"cannot resolve {path!r} against {self.base_url!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise URLResolutionError(f"cannot resolve {path!r} against {self.base_url!r}: not an absolute URL")
        return url

    @staticmethod
    def _bound_timeout(request: httpx.Request, remaining: float | None) -> None:
        if remaining is None:
            return
        current = request.extensions.get("timeout") or httpx.Timeout(None).as_dict()
        request.extensions["timeout"] = {
            key: remaining if value is None else min(value, remaining) for key, value in current.items()
        }

    def _debug(self, title: str, dump: str) -> None:
        if self.logger is None:
            return
        self.logger.debug(f"{title}\n{dump}\n")
