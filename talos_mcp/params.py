"""
Typed access to a tool's argument map.

Values are matched against their JSON type strictly: a value of the wrong type
counts as absent, so optional keys fall back to their default and required
keys fail with ``MissingParameter``. JSON booleans are never integers.
"""

from __future__ import annotations

from typing import Any

from talos_mcp.errors import MissingParameter


def as_map(value: Any) -> dict[str, Any]:
    """Return ``value`` as a parameter map; anything but an object is empty."""
    return dict(value) if isinstance(value, dict) else {}


def require_str(args: dict, key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str):
        raise MissingParameter(key)
    return value


def opt_str(args: dict, key: str, default: str | None = None) -> str | None:
    value = args.get(key)
    return value if isinstance(value, str) else default


def opt_bool(args: dict, key: str, default: bool = False) -> bool:
    value = args.get(key)
    return value if isinstance(value, bool) else default


def opt_int(args: dict, key: str, default: int | None = None) -> int | None:
    value = args.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


def opt_str_list(args: dict, key: str) -> list[str] | None:
    """Array of strings; non-string elements are dropped, non-arrays are absent."""
    value = args.get(key)
    if not isinstance(value, list):
        return None
    return [v for v in value if isinstance(v, str)]
