"""
Shared fixtures for the test suite.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from talos_mcp.config import Settings
from talos_mcp.dispatcher import Dispatcher
from talos_mcp.talosctl import Talosctl

TALOSCONFIG = "/home/talos/.talos/config"


# ---------------------------------------------------------------------------
# Subprocess mock factory
# ---------------------------------------------------------------------------

def make_proc(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0):
    """Mimics the object returned by asyncio.create_subprocess_exec."""
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    return proc


@pytest.fixture
def mock_run(monkeypatch):
    """
    Patches asyncio.create_subprocess_exec with a fake that pops responses
    from a queue. Every spawned argv is recorded on ``queue.calls``.

    Usage:
        mock_run((b"output", b"", 0))
        mock_run((b"out1", b"", 0), (b"out2", b"", 0))  # multiple calls
    """
    responses: list[tuple[bytes, bytes, int]] = []
    calls: list[tuple[str, ...]] = []

    async def fake_exec(*args, **kwargs):
        assert responses, f"Unexpected talosctl call: {args}"
        calls.append(args)
        stdout, stderr, rc = responses.pop(0)
        return make_proc(stdout, stderr, rc)

    monkeypatch.setattr("asyncio.create_subprocess_exec", fake_exec)

    def queue(*items: tuple[bytes, bytes, int]):
        responses.extend(items)

    queue.calls = calls
    return queue


@pytest.fixture
def settings() -> Settings:
    return Settings(talosconfig=TALOSCONFIG)


@pytest.fixture
def talosctl(settings) -> Talosctl:
    return Talosctl(settings)


# ---------------------------------------------------------------------------
# Fake invoker
# ---------------------------------------------------------------------------

class FakeTalosctl:
    """Stands in for ``Talosctl``: records argv and returns queued results.

    A queued exception is raised instead of returned. With nothing queued,
    every call returns ``"ok"``.
    """

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[list[str], str]] = []

    async def run(self, args, *, capture="stdout") -> str:
        self.calls.append((list(args), capture))
        result = self.responses.pop(0) if self.responses else "ok"
        if isinstance(result, BaseException):
            raise result
        return result

    @property
    def argv(self) -> list[str]:
        """argv of the most recent call."""
        return self.calls[-1][0]


@pytest.fixture
def fake_ctl() -> FakeTalosctl:
    return FakeTalosctl()


@pytest.fixture
def dispatcher(fake_ctl) -> Dispatcher:
    return Dispatcher(fake_ctl)
