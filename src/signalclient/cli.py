"""CLI entry point using Typer."""

import json
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import httpx
import structlog
import typer
import yaml  # type: ignore[import-untyped]
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from signalclient.api.metrics import new_sum_metric
from signalclient.api.signal import Batch, Signal, Trace
from signalclient.client import Client
from signalclient.config import SignalClientSettings
from signalclient.context import CallContext
from signalclient.errors import SignalClientError
from signalclient.logging import configure_logging
from signalclient.service import SignalService

app = typer.Typer(
    name="signalclient",
    help="Submit telemetry signals, traces and batches to the ingestion API.",
)
console = Console()
logger = structlog.get_logger()

_state: dict[str, SignalClientSettings] = {}


@app.callback()
def main(
    base_url: str | None = typer.Option(None, "--base-url", help="Ingestion API base URL"),
    token: str | None = typer.Option(None, "--token", help="Session token"),
    timeout: float | None = typer.Option(None, "--timeout", help="Call timeout in seconds"),
    debug: bool = typer.Option(False, "--debug", help="Dump HTTP requests and responses"),
) -> None:
    """Configure the client shared by every command."""
    overrides: dict[str, Any] = {}
    if base_url:
        overrides["base_url"] = base_url
    if token:
        overrides["token"] = token
    if timeout is not None:
        overrides["timeout_seconds"] = timeout
    if debug:
        overrides["debug"] = True
        overrides["log_level"] = "DEBUG"

    config = SignalClientSettings(**overrides)
    configure_logging(config.log_level, json=config.log_json)
    _state["config"] = config


def _build_client(config: SignalClientSettings) -> Client:
    return Client.from_settings(config)


def _load_document(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def _submit(send: Callable[[SignalService, CallContext], None]) -> None:
    config = _state.get("config") or SignalClientSettings()
    ctx = CallContext.with_timeout(config.timeout_seconds)
    with _build_client(config) as client:
        send(client.signal_service(), ctx)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


@app.command()
def signal(path: Path = typer.Argument(..., help="JSON or YAML file holding one signal")) -> None:
    """Send a single signal."""
    try:
        value = Signal.model_validate(_load_document(path))
        _submit(lambda service, ctx: service.send_signal(ctx, value))
    except (FileNotFoundError, ValueError, yaml.YAMLError, SignalClientError, httpx.HTTPError) as e:
        _fail(e)

    logger.info("signal.sent", name=value.signal_name)
    console.print(f"[bold green]Sent signal[/bold green] {value.signal_name}")


@app.command()
def trace(path: Path = typer.Argument(..., help="JSON or YAML file holding one trace")) -> None:
    """Send a trace and its child signals."""
    try:
        value = Trace.model_validate(_load_document(path))
        _submit(lambda service, ctx: service.send_trace(ctx, value))
    except (FileNotFoundError, ValueError, yaml.YAMLError, SignalClientError, httpx.HTTPError) as e:
        _fail(e)

    logger.info("trace.sent", name=value.signal_name, signals=len(value.data))
    console.print(f"[bold green]Sent trace[/bold green] {value.signal_name} ({len(value.data)} signals)")


@app.command()
def batch(path: Path = typer.Argument(..., help="JSON or YAML file holding a list of signals and traces")) -> None:
    """Send a batch of signals and traces in one request."""
    try:
        value = Batch.from_wire(_load_document(path))
        _submit(lambda service, ctx: service.send_batch(ctx, value))
    except (FileNotFoundError, ValueError, yaml.YAMLError, SignalClientError, httpx.HTTPError) as e:
        _fail(e)

    table = Table(title="Batch Sent")
    table.add_column("#", style="cyan")
    table.add_column("Kind", style="magenta")
    table.add_column("Name", style="green")
    for idx, element in enumerate(value):
        table.add_row(str(idx), type(element).__name__, element.signal_name)
    console.print(table)
    logger.info("batch.sent", elements=len(value))


@app.command()
def metric(
    name: str = typer.Argument(..., help="Metric signal name"),
    values: list[str] = typer.Argument(..., help="key=value pairs to sum"),
    source: str = typer.Option("signalclient-cli", help="Emitting component"),
    interval: int = typer.Option(60, help="Capture interval in seconds"),
) -> None:
    """Send a summed metric ending now."""
    try:
        counts = _parse_values(values)
        ended = datetime.now(UTC)
        span = timedelta(seconds=interval)
        value = new_sum_metric(name, source, ended - span, ended, span, counts)
        _submit(lambda service, ctx: service.send_signal(ctx, value))
    except (ValueError, SignalClientError, httpx.HTTPError) as e:
        _fail(e)

    console.print(f"[bold green]Sent metric[/bold green] {name} ({len(counts)} values)")


def _parse_values(pairs: list[str]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected key=value, got {pair!r}")
        counts[key] = counts.get(key, 0) + int(raw)
    return counts


if __name__ == "__main__":
    app()
