"""
JSON-RPC 2.0 framing: one request object per input line, one response object
per output line.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from talos_mcp.dispatcher import Fail, Notify, Outcome, Reply
from talos_mcp.errors import InvalidRequest, ParseError, TalosMcpError

JSONRPC_VERSION = "2.0"


@dataclass(frozen=True)
class Request:
    method: str
    params: Any = None
    id: Any = None
    jsonrpc: str = JSONRPC_VERSION


class MalformedLine(Exception):
    """A line that could not be turned into a ``Request``."""

    def __init__(self, error: TalosMcpError, request_id: Any = None) -> None:
        super().__init__(error.message)
        self.error = error
        self.id = request_id


def parse_line(line: str) -> Request:
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as e:
        raise MalformedLine(ParseError(f"Parse error: {e}")) from e

    if not isinstance(obj, dict):
        raise MalformedLine(InvalidRequest("Invalid request: expected a JSON object"))
    method = obj.get("method")
    if not isinstance(method, str):
        raise MalformedLine(InvalidRequest("Invalid request: missing method"), obj.get("id"))

    return Request(
        method=method,
        params=obj.get("params"),
        id=obj.get("id"),
        jsonrpc=obj.get("jsonrpc", JSONRPC_VERSION),
    )


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

def success(request_id: Any, result: Any) -> dict:
    return {"jsonrpc": JSONRPC_VERSION, "result": result, "id": request_id}


def failure(request_id: Any, error: TalosMcpError) -> dict:
    body: dict[str, Any] = {"code": error.code, "message": error.message}
    if error.data is not None:
        body["data"] = error.data
    return {"jsonrpc": JSONRPC_VERSION, "error": body, "id": request_id}


def envelope(request_id: Any, outcome: Outcome) -> dict | None:
    """Response object for ``outcome``, or None for a notification."""
    if isinstance(outcome, Notify):
        return None
    if isinstance(outcome, Reply):
        return success(request_id, outcome.value)
    if isinstance(outcome, Fail):
        return failure(request_id, outcome.error)
    raise TypeError(f"not an outcome: {outcome!r}")


def encode(message: dict) -> str:
    return json.dumps(message, separators=(",", ":"))
