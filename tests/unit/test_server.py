"""
Unit tests for the transport loop and startup preflight in talos_mcp/server.py.

``serve`` is driven with an in-memory line source and a list-collecting
writer; talosctl is mocked at the subprocess level.
"""

from __future__ import annotations

import io
import json

import anyio
import pytest
from mcp.types import INVALID_REQUEST, PARSE_ERROR

from talos_mcp.config import Settings
from talos_mcp.dispatcher import Dispatcher
from talos_mcp.server import _preflight, _text_input, serve
from talos_mcp.talosctl import Talosctl
from tests.conftest import TALOSCONFIG


async def _lines(*items: str):
    for item in items:
        yield item


async def _serve(dispatcher, *lines: str) -> list[str]:
    out: list[str] = []

    async def write(line: str) -> None:
        out.append(line)

    await serve(_lines(*lines), write, dispatcher)
    return out


async def test_ping_exact_output(dispatcher):
    out = await _serve(dispatcher, '{"jsonrpc":"2.0","id":1,"method":"ping"}\n')
    assert out == ['{"jsonrpc":"2.0","result":{},"id":1}']


async def test_notification_writes_nothing(dispatcher):
    out = await _serve(dispatcher, '{"jsonrpc":"2.0","method":"notifications/initialized"}')
    assert out == []


async def test_blank_lines_skipped(dispatcher):
    out = await _serve(dispatcher, "\n", "   \n", '{"jsonrpc":"2.0","id":2,"method":"ping"}')
    assert len(out) == 1


async def test_responses_in_request_order(dispatcher):
    out = await _serve(
        dispatcher,
        '{"jsonrpc":"2.0","id":1,"method":"ping"}',
        '{"jsonrpc":"2.0","id":2,"method":"nope"}',
        '{"jsonrpc":"2.0","id":3,"method":"ping"}',
    )
    assert [json.loads(line)["id"] for line in out] == [1, 2, 3]
    assert json.loads(out[1])["error"]["message"] == "Unknown method: nope"


async def test_malformed_line_then_continue(dispatcher, capsys):
    out = await _serve(dispatcher, "{oops", '{"jsonrpc":"2.0","id":9,"method":"ping"}')
    first = json.loads(out[0])
    assert first["id"] is None
    assert first["error"]["code"] == PARSE_ERROR
    assert json.loads(out[1]) == {"jsonrpc": "2.0", "result": {}, "id": 9}
    assert "WARNING" in capsys.readouterr().err


async def test_missing_method_echoes_id(dispatcher):
    out = await _serve(dispatcher, '{"jsonrpc":"2.0","id":5,"params":{}}')
    response = json.loads(out[0])
    assert response["id"] == 5
    assert response["error"]["code"] == INVALID_REQUEST


async def test_tool_call_end_to_end(mock_run, talosctl):
    mock_run((b"Client:\n\tTag: v1.7.0\n", b"", 0))
    line = json.dumps({"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "get_version"}})
    out = await _serve(Dispatcher(talosctl), line)

    assert mock_run.calls[0] == ("talosctl", "--talosconfig", TALOSCONFIG, "version", "--client")
    response = json.loads(out[0])
    payload = json.loads(response["result"]["content"][0]["text"])
    assert payload == {"version": "Client:\n\tTag: v1.7.0\n", "short_format": False}


async def test_health_failure_envelope(mock_run, talosctl):
    mock_run((b"", b"etcd is unhealthy", 1))
    line = json.dumps({
        "jsonrpc": "2.0",
        "id": 8,
        "method": "tools/call",
        "params": {"name": "get_health", "arguments": {"control_planes": ["10.0.0.2"]}},
    })
    out = await _serve(Dispatcher(talosctl), line)

    response = json.loads(out[0])
    assert response["id"] == 8
    assert response["error"]["code"] == INVALID_REQUEST
    assert response["error"]["message"] == "Health check failed: talosctl failed: etcd is unhealthy"


# ---------------------------------------------------------------------------
# _preflight()
# ---------------------------------------------------------------------------

async def test_preflight_exits_without_talosctl(monkeypatch, settings, talosctl):
    monkeypatch.setattr("talos_mcp.server.shutil.which", lambda name: None)
    with pytest.raises(SystemExit) as exc_info:
        await _preflight(settings, talosctl)
    assert exc_info.value.code == 1


async def test_preflight_warns_without_talosconfig(monkeypatch, capsys):
    monkeypatch.setattr("talos_mcp.server.shutil.which", lambda name: "/usr/bin/talosctl")
    settings = Settings()
    await _preflight(settings, Talosctl(settings))
    assert "WARNING: TALOSCONFIG is not set" in capsys.readouterr().err


async def test_preflight_reports_context_and_version(monkeypatch, mock_run, tmp_path, capsys):
    monkeypatch.setattr("talos_mcp.server.shutil.which", lambda name: "/usr/bin/talosctl")
    config = tmp_path / "talosconfig"
    config.write_text("context: lab\ncontexts:\n  lab:\n    endpoints: [10.0.0.2]\n")
    mock_run((b"Client v1.7.0\n", b"", 0))
    settings = Settings(talosconfig=str(config))

    await _preflight(settings, Talosctl(settings))

    err = capsys.readouterr().err
    assert "lab (endpoints: 10.0.0.2)" in err
    assert "talosctl client: Client v1.7.0" in err
    assert mock_run.calls[0][-3:] == ("version", "--client", "--short")


async def test_preflight_version_failure_is_warning(monkeypatch, mock_run, capsys):
    monkeypatch.setattr("talos_mcp.server.shutil.which", lambda name: "/usr/bin/talosctl")
    mock_run((b"", b"", 2))
    settings = Settings(talosconfig="/nonexistent/talosconfig")

    await _preflight(settings, Talosctl(settings))

    err = capsys.readouterr().err
    assert "cannot read talosconfig" in err
    assert "talosctl version check failed" in err


async def test_preflight_unexpected_talosconfig_shape(monkeypatch, mock_run, tmp_path, capsys):
    monkeypatch.setattr("talos_mcp.server.shutil.which", lambda name: "/usr/bin/talosctl")
    config = tmp_path / "talosconfig"
    config.write_text("context: lab\ncontexts: [lab]\n")
    mock_run((b"Client v1.7.0\n", b"", 0))
    settings = Settings(talosconfig=str(config))

    await _preflight(settings, Talosctl(settings))

    assert "lab (endpoints: none)" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Request isolation
# ---------------------------------------------------------------------------

async def test_null_byte_argument_then_continue(monkeypatch, talosctl):
    async def reject(*args, **kwargs):
        raise ValueError("embedded null byte")

    monkeypatch.setattr("asyncio.create_subprocess_exec", reject)
    call = json.dumps({
        "jsonrpc": "2.0",
        "id": 1,
        "method": "tools/call",
        "params": {"name": "dmesg", "arguments": {"node": "a\u0000b"}},
    })
    out = await _serve(Dispatcher(talosctl), call, '{"jsonrpc":"2.0","id":2,"method":"ping"}')

    assert len(out) == 2
    first = json.loads(out[0])
    assert first["id"] == 1
    assert first["error"]["message"].startswith("Failed to execute talosctl")
    assert out[1] == '{"jsonrpc":"2.0","result":{},"id":2}'


async def test_invalid_utf8_line_then_continue(dispatcher):
    raw = io.BytesIO(b'\xff\xfe\n{"jsonrpc":"2.0","id":1,"method":"ping"}\n')
    out: list[str] = []

    async def write(line: str) -> None:
        out.append(line)

    await serve(anyio.wrap_file(_text_input(raw)), write, dispatcher)

    assert len(out) == 2
    assert json.loads(out[0])["error"]["code"] == PARSE_ERROR
    assert out[1] == '{"jsonrpc":"2.0","result":{},"id":1}'
