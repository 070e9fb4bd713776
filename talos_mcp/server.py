"""
Talos MCP server

Exposes talosctl-backed tools over line-delimited JSON-RPC on stdio across
seven groups:
  • Inspection  — containers, stats, processes, memory, cpu
  • Filesystem  — list, read, copy, usage, mounts
  • Network     — addresses, routes, netstat, pcap, io cgroups
  • Services    — dmesg, service control, logs, events
  • Storage     — disks
  • Cluster     — health, version, time, machine config, etcd
  • Lifecycle   — reboot, shutdown, reset, upgrade (destructive)

Environment variables:
  TALOSCONFIG=/path/to/talosconfig  — required by every talosctl call
  TALOS_MCP_TALOSCTL=talosctl       — talosctl binary name or path
  TALOS_MCP_READ_ONLY=true          — only register read-only tools

Requests are handled one at a time: a line is read, dispatched (including any
talosctl run) and answered before the next line is read.

Run with:
    python -m talos_mcp.server
"""

from __future__ import annotations

import asyncio
import shutil
import sys
from io import TextIOWrapper
from typing import AsyncIterable, Awaitable, BinaryIO, Callable

import anyio
import yaml

from talos_mcp.config import Settings, load_talosconfig, talosconfig_summary
from talos_mcp.dispatcher import Dispatcher
from talos_mcp.errors import TalosMcpError
from talos_mcp.protocol import MalformedLine, encode, envelope, failure, parse_line
from talos_mcp.talosctl import Talosctl

WriteLine = Callable[[str], Awaitable[None]]


# ---------------------------------------------------------------------------
# Transport loop
# ---------------------------------------------------------------------------

async def serve(lines: AsyncIterable[str], write: WriteLine, dispatcher: Dispatcher) -> None:
    """Answer each request line in order until ``lines`` is exhausted."""
    async for line in lines:
        if not line.strip():
            continue

        try:
            request = parse_line(line)
        except MalformedLine as e:
            print(f"WARNING: dropping malformed request: {e}", file=sys.stderr)
            await write(encode(failure(e.id, e.error)))
            continue

        outcome = await dispatcher.dispatch(request.method, request.params)
        message = envelope(request.id, outcome)
        if message is not None:
            await write(encode(message))


# ---------------------------------------------------------------------------
# Startup preflight
# ---------------------------------------------------------------------------

async def _preflight(settings: Settings, talosctl: Talosctl) -> None:
    """Check talosctl availability and the talosconfig before serving."""
    if not shutil.which(settings.talosctl):
        print(
            f"FATAL: {settings.talosctl} not found on PATH. Install talosctl and try again.",
            file=sys.stderr,
        )
        sys.exit(1)

    if not settings.talosconfig:
        print(
            "WARNING: TALOSCONFIG is not set. Every tool call will fail until it is.",
            file=sys.stderr,
        )
        return

    try:
        summary = talosconfig_summary(load_talosconfig(settings.talosconfig))
        print(f"talosconfig: {settings.talosconfig} — context {summary}", file=sys.stderr)
    except (OSError, yaml.YAMLError) as e:
        print(f"WARNING: cannot read talosconfig {settings.talosconfig}: {e}", file=sys.stderr)

    try:
        version = await talosctl.run(["version", "--client", "--short"])
        print(f"talosctl client: {version.strip()}", file=sys.stderr)
    except TalosMcpError as e:
        print(f"WARNING: talosctl version check failed: {e}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _text_input(buffer: BinaryIO) -> TextIOWrapper:
    """Decode request bytes; invalid UTF-8 becomes U+FFFD and fails JSON parsing."""
    return TextIOWrapper(buffer, encoding="utf-8", errors="replace")


async def _run() -> None:
    settings = Settings.from_env()
    talosctl = Talosctl(settings)
    dispatcher = Dispatcher(talosctl, read_only=settings.read_only)

    mode = "read-only" if settings.read_only else "full"
    print(
        f"talos MCP server starting — {len(dispatcher.tools)} tools registered ({mode} mode)",
        file=sys.stderr,
    )
    await _preflight(settings, talosctl)

    stdin = anyio.wrap_file(_text_input(sys.stdin.buffer))
    stdout = anyio.wrap_file(TextIOWrapper(sys.stdout.buffer, encoding="utf-8"))

    async def write(line: str) -> None:
        await stdout.write(line + "\n")
        await stdout.flush()

    await serve(stdin, write, dispatcher)


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
