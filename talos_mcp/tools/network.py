"""
Network tools (read-only).

Tools:
  interfaces               — address resources (talosctl get addresses)
  routes                   — route resources (talosctl get routes)
  get_netstat              — socket/connection table
  capture_packets          — pcap on an interface for a duration
  get_network_io_cgroups   — the io cgroup preset
  list_network_interfaces  — entries under /sys/class/net
"""

from __future__ import annotations

from mcp.types import Tool

from talos_mcp.formatters import node_args, resource_args
from talos_mcp.params import opt_str, require_str
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools._schema import (
    READ_ONLY,
    node_only_schema,
    node_property,
    resource_schema,
)


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

NETWORK_TOOLS: list[Tool] = [
    Tool(
        name="interfaces",
        description="Get detailed network interface information including addresses and links",
        inputSchema=resource_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="routes",
        description="Get network routing table information for a Talos node",
        inputSchema=resource_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_netstat",
        description="Get network connection statistics from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="capture_packets",
        description="Capture network packets on a Talos node interface",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property("IP address or hostname of the Talos node to capture from"),
                "interface": {
                    "type": "string",
                    "description": "Network interface to capture from (defaults to eth0)",
                    "default": "eth0",
                },
                "duration": {
                    "type": "string",
                    "description": "Duration to capture packets (defaults to 10s)",
                    "default": "10s",
                },
            },
            "required": ["node"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_network_io_cgroups",
        description="Get network I/O cgroup statistics from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="list_network_interfaces",
        description="List network interfaces on a Talos node (legacy method)",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def _get_resource(ctl: Talosctl, args: dict, resource: str, key: str) -> dict:
    node = require_str(args, "node")
    namespace = opt_str(args, "namespace")
    output = opt_str(args, "output", "table")
    out = await ctl.run(resource_args(node, resource, namespace, output))
    return {key: out, "namespace": namespace, "output_format": output}


async def handle_interfaces(ctl: Talosctl, args: dict) -> dict:
    return await _get_resource(ctl, args, "addresses", "interfaces")


async def handle_routes(ctl: Talosctl, args: dict) -> dict:
    return await _get_resource(ctl, args, "routes", "routes")


async def handle_netstat(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "netstat"))
    return {"netstat": out}


async def handle_capture_packets(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    interface = opt_str(args, "interface", "eth0")
    duration = opt_str(args, "duration", "10s")
    out = await ctl.run(node_args(node, "pcap", "--interface", interface, "--duration", duration))
    return {"packets": out}


async def handle_network_io_cgroups(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "cgroups", "--preset", "io"))
    return {"network_io": out}


async def handle_list_network_interfaces(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "list", "/sys/class/net"))
    return {"interfaces": out}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

NETWORK_HANDLERS = {
    "interfaces": handle_interfaces,
    "routes": handle_routes,
    "get_netstat": handle_netstat,
    "capture_packets": handle_capture_packets,
    "get_network_io_cgroups": handle_network_io_cgroups,
    "list_network_interfaces": handle_list_network_interfaces,
}
