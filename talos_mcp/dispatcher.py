"""
Method dispatch.

``Dispatcher.dispatch(method, params)`` resolves one request to an
``Outcome``:

  Notify        — a notification; nothing is written back
  Reply(value)  — success; ``value`` becomes the JSON-RPC result
  Fail(error)   — any ``TalosMcpError``; becomes the JSON-RPC error

Protocol verbs (initialize, ping, tools/list, tools/call, notifications/*)
are tried first, then each tool group in registry order. A tool name used
directly as the method returns the handler's structured result; through
``tools/call`` the result is wrapped in a text content block.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Union

from mcp.types import Implementation, InitializeResult, ServerCapabilities, ToolsCapability

from talos_mcp import __version__
from talos_mcp.errors import (
    MissingParameter,
    MissingRequiredField,
    TalosMcpError,
    UnknownMethod,
    UnexpectedError,
    UnknownTool,
)
from talos_mcp.formatters import text_content
from talos_mcp.params import as_map
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools import WRITE_TOOLS, Handler, active_groups, describe_all

PROTOCOL_VERSION = "2025-06-18"
NOTIFICATION_PREFIX = "notifications/"

_INITIALIZE_FIELDS = ("capabilities", "clientInfo", "protocolVersion")


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Notify:
    pass


@dataclass(frozen=True)
class Reply:
    value: Any


@dataclass(frozen=True)
class Fail:
    error: TalosMcpError


Outcome = Union[Notify, Reply, Fail]


def server_descriptor() -> dict:
    """The fixed initialize result; clients cannot change any of it."""
    result = InitializeResult(
        protocolVersion=PROTOCOL_VERSION,
        capabilities=ServerCapabilities(tools=ToolsCapability(listChanged=True)),
        serverInfo=Implementation(
            name="talos-mcp-server",
            title="Talos OS MCP Server",
            version=__version__,
        ),
    )
    return result.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class Dispatcher:
    def __init__(self, talosctl: Talosctl, *, read_only: bool = False) -> None:
        self.talosctl = talosctl
        self.read_only = read_only
        self.groups = active_groups(read_only)
        self.tools = describe_all(read_only)
        self._protocol = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    async def dispatch(self, method: str, params: Any = None) -> Outcome:
        args = as_map(params)
        if method.startswith(NOTIFICATION_PREFIX):
            return Notify()
        try:
            return Reply(await self._resolve(method, args))
        except TalosMcpError as e:
            return Fail(e)
        except Exception as exc:  # noqa: BLE001
            return Fail(UnexpectedError(exc))

    async def _resolve(self, method: str, args: dict) -> Any:
        verb = self._protocol.get(method)
        if verb is not None:
            return await verb(args)
        handler = self.find_handler(method)
        if handler is None:
            raise UnknownMethod(method)
        return await self._invoke(method, handler, args)

    def find_handler(self, name: str) -> Handler | None:
        for group in self.groups:
            handler = group.handlers.get(name)
            if handler is not None:
                return handler
        return None

    async def _invoke(self, name: str, handler: Handler, args: dict) -> Any:
        if name in WRITE_TOOLS:
            ts = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
            print(f"[AUDIT] {ts} {name} {args}", file=sys.stderr)
        return await handler(self.talosctl, args)

    # -- protocol verbs ------------------------------------------------------

    async def _initialize(self, args: dict) -> dict:
        missing = [f for f in _INITIALIZE_FIELDS if f not in args]
        if missing:
            raise MissingRequiredField(missing)
        return server_descriptor()

    async def _ping(self, args: dict) -> dict:
        return {}

    async def _list_tools(self, args: dict) -> dict:
        return {"tools": [t.model_dump(by_alias=True, exclude_none=True) for t in self.tools]}

    async def _call_tool(self, args: dict) -> dict:
        name = args.get("name")
        if not isinstance(name, str):
            raise MissingParameter("name", "Missing tool name")
        handler = self.find_handler(name)
        if handler is None:
            raise UnknownTool(name)
        result = await self._invoke(name, handler, as_map(args.get("arguments")))
        return text_content(result)
