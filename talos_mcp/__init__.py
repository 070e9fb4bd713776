"""Talos MCP server — talosctl tools over line-delimited JSON-RPC."""

__version__ = "1.0.0"
