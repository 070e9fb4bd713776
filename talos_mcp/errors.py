"""
Error taxonomy.

Every failure a request can hit is a ``TalosMcpError``. Application errors all
share the JSON-RPC ``INVALID_REQUEST`` code; only transport-level parse
failures use ``PARSE_ERROR``.
"""

from __future__ import annotations

from typing import Any

from mcp.types import INVALID_REQUEST, PARSE_ERROR


class TalosMcpError(Exception):
    """Base class; carries the JSON-RPC error code and optional data."""

    code: int = INVALID_REQUEST

    def __init__(self, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data


# ---------------------------------------------------------------------------
# Invocation
# ---------------------------------------------------------------------------

class ConfigurationMissing(TalosMcpError):
    """No talosconfig path is configured; raised before anything is spawned."""

    def __init__(self) -> None:
        super().__init__("TALOSCONFIG env var not set")


class SpawnError(TalosMcpError):
    """talosctl could not be launched at all."""


class ExternalToolError(TalosMcpError):
    """talosctl ran and exited with a non-zero status."""

    def __init__(self, message: str, *, returncode: int, stderr: str) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ContextError(TalosMcpError):
    """Wraps a cause with the step that produced it."""

    def __init__(self, context: str, cause: TalosMcpError) -> None:
        super().__init__(f"{context}: {cause.message}", data=cause.data)
        self.context = context
        self.cause = cause


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

class MissingParameter(TalosMcpError):
    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Missing {field} param")
        self.field = field


class MissingRequiredField(TalosMcpError):
    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            "Missing required initialize parameters: capabilities, clientInfo, "
            "and protocolVersion are required",
            data={"missing": fields},
        )
        self.fields = fields


class ValidationError(TalosMcpError):
    """Parameters are present but their combination is invalid."""


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class UnknownMethod(TalosMcpError):
    def __init__(self, method: str) -> None:
        super().__init__(f"Unknown method: {method}")
        self.method = method


class UnknownTool(TalosMcpError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnexpectedError(TalosMcpError):
    """Any other exception raised while handling a request."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Unexpected error: {cause}")
        self.cause = cause


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class ParseError(TalosMcpError):
    code = PARSE_ERROR


class InvalidRequest(TalosMcpError):
    """The line is JSON but not a request object."""
