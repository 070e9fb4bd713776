"""
Storage tools (read-only).

Tools:
  disks       — disk resources (talosctl get disks)
  list_disks  — block devices under /sys/block
"""

from __future__ import annotations

from mcp.types import Tool

from talos_mcp.formatters import node_args, resource_args
from talos_mcp.params import opt_str, require_str
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools._schema import READ_ONLY, node_only_schema, resource_schema

STORAGE_TOOLS: list[Tool] = [
    Tool(
        name="disks",
        description="Get detailed disk information from a Talos node",
        inputSchema=resource_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="list_disks",
        description="List disk devices on a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
]


async def handle_disks(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    namespace = opt_str(args, "namespace")
    output = opt_str(args, "output", "table")
    out = await ctl.run(resource_args(node, "disks", namespace, output))
    return {"disks": out, "namespace": namespace, "output_format": output}


async def handle_list_disks(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "list", "/sys/block"))
    return {"disks": out}


STORAGE_HANDLERS = {
    "disks": handle_disks,
    "list_disks": handle_list_disks,
}
