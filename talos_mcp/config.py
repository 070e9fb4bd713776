"""
Runtime settings, read from the environment once at startup.

Environment variables:
  TALOSCONFIG             — path to the talosconfig passed to every talosctl call
  TALOS_MCP_TALOSCTL      — talosctl binary name or path (default: talosctl)
  TALOS_MCP_READ_ONLY     — only register read-only tools (1/true/yes)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

import yaml


_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    talosconfig: str | None = None
    talosctl: str = "talosctl"
    read_only: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            talosconfig=env.get("TALOSCONFIG") or None,
            talosctl=env.get("TALOS_MCP_TALOSCTL") or "talosctl",
            read_only=env.get("TALOS_MCP_READ_ONLY", "").lower() in _TRUTHY,
        )


# ---------------------------------------------------------------------------
# talosconfig inspection (startup preflight only)
# ---------------------------------------------------------------------------

def load_talosconfig(path: str) -> dict:
    """Parse a talosconfig file. Raises OSError or yaml.YAMLError."""
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def talosconfig_summary(data: dict) -> str:
    """One-line description of the active context, e.g. ``prod (endpoints: 10.0.0.2)``."""
    name = data.get("context")
    if not name or not isinstance(name, str):
        return "no active context"
    contexts = data.get("contexts")
    context = contexts.get(name) if isinstance(contexts, dict) else None
    if not isinstance(context, dict):
        context = {}
    endpoints = _as_list(context.get("endpoints"))
    nodes = _as_list(context.get("nodes"))
    parts = [f"endpoints: {', '.join(map(str, endpoints)) or 'none'}"]
    if nodes:
        parts.append(f"nodes: {', '.join(map(str, nodes))}")
    return f"{name} ({'; '.join(parts)})"
