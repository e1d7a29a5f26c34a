"""Tests for the signalclient CLI."""

import json

import httpx
import pytest
from typer.testing import CliRunner

from signalclient import cli
from signalclient.api.signal import Batch, Signal, Trace

runner = CliRunner()


@pytest.fixture
def cli_transport(make_client, monkeypatch):
    """Route CLI submissions through a recording transport."""
    responses: list[httpx.Response] = []

    def respond(request: httpx.Request) -> httpx.Response:
        return responses.pop(0) if responses else httpx.Response(202)

    client, transport = make_client(respond)
    monkeypatch.setattr(cli, "_build_client", lambda config: client)
    transport.responses = responses
    return transport


def test_signal_command(tmp_path, cli_transport):
    path = tmp_path / "signal.json"
    path.write_text(
        json.dumps({"type": "point", "signal_name": "cli", "payload_schema": "s/1", "payload": {"a": "<b>"}})
    )

    result = runner.invoke(cli.app, ["signal", str(path)])

    assert result.exit_code == 0, result.output
    assert "Sent signal" in result.output
    (request,) = cli_transport.requests
    assert request.url.path == "/signals"
    assert Signal.model_validate_json(request.content).payload == {"a": "<b>"}


def test_trace_command_yaml(tmp_path, cli_transport):
    path = tmp_path / "trace.yaml"
    path.write_text(
        "signal_name: root\n"
        "data:\n"
        "  - signal_name: child\n"
        "    payload_schema: s/1\n"
        "    payload: hello\n"
    )

    result = runner.invoke(cli.app, ["trace", str(path)])

    assert result.exit_code == 0, result.output
    (request,) = cli_transport.requests
    assert request.url.path == "/traces"
    assert Trace.model_validate_json(request.content).data[0].signal_name == "child"


def test_batch_command(tmp_path, cli_transport):
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps(
            [
                {"signal_name": "first"},
                {"signal_name": "second", "data": [{"signal_name": "nested"}]},
            ]
        )
    )

    result = runner.invoke(cli.app, ["batch", str(path)])

    assert result.exit_code == 0, result.output
    sent = Batch.from_json(cli_transport.requests[0].content)
    assert [type(element) for element in sent] == [Signal, Trace]
    assert [element.signal_name for element in sent] == ["first", "second"]


def test_metric_command(cli_transport):
    result = runner.invoke(cli.app, ["metric", "sq.cli.metric", "a=1", "b=2", "a=3"])

    assert result.exit_code == 0, result.output
    sent = Signal.model_validate_json(cli_transport.requests[0].content)
    assert sent.type == "metric"
    assert sent.payload["values"] == [{"key": "a", "value": 4}, {"key": "b", "value": 2}]


def test_metric_command_rejects_bad_pair(cli_transport):
    result = runner.invoke(cli.app, ["metric", "m", "novalue"])

    assert result.exit_code == 1
    assert cli_transport.requests == []


def test_missing_file(tmp_path, cli_transport):
    result = runner.invoke(cli.app, ["signal", str(tmp_path / "missing.json")])

    assert result.exit_code == 1
    assert "File not found" in result.output


def test_server_rejection_exits_nonzero(tmp_path, cli_transport):
    cli_transport.responses.append(httpx.Response(422))
    path = tmp_path / "signal.json"
    path.write_text(json.dumps({"signal_name": "bad"}))

    result = runner.invoke(cli.app, ["signal", str(path)])

    assert result.exit_code == 1
    assert "invalid" in result.output
