"""
Service and log tools.

Tools:
  dmesg       — kernel ring buffer
  service     — status/start/stop/restart a Talos service
  restart     — restart a Talos service
  get_logs    — service or Kubernetes container logs
  get_events  — runtime event stream
"""

from __future__ import annotations

from mcp.types import Tool

from talos_mcp.formatters import containerd_namespace, node_args
from talos_mcp.params import opt_bool, opt_int, opt_str, require_str
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools._schema import (
    KUBERNETES_PROPERTY,
    READ_ONLY,
    WRITE,
    node_only_schema,
    node_property,
)


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

SERVICE_TOOLS: list[Tool] = [
    Tool(
        name="dmesg",
        description="Get kernel ring buffer messages (system logs) from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="service",
        description="Manage services on a Talos node (get status, start, stop, restart)",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "service": {
                    "type": "string",
                    "description": "Name of the service to manage (e.g., kubelet, etcd, containerd)",
                },
                "action": {
                    "type": "string",
                    "description": "Action to perform on the service (defaults to 'status')",
                    "enum": ["status", "start", "stop", "restart"],
                    "default": "status",
                },
            },
            "required": ["node", "service"],
        },
        annotations=WRITE,
    ),
    Tool(
        name="restart",
        description="Restart a specific service on a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property("IP address or hostname of the Talos node"),
                "service": {
                    "type": "string",
                    "description": "Name of the service to restart (e.g., kubelet, etcd, containerd)",
                },
            },
            "required": ["node", "service"],
        },
        annotations=WRITE,
    ),
    Tool(
        name="get_logs",
        description="Get service logs from a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "service": {
                    "type": "string",
                    "description": "Name of the service to get logs for (e.g., kubelet, etcd)",
                },
                "tail": {
                    "type": "integer",
                    "description": "Number of lines to show from the end of the logs (e.g., 100)",
                    "minimum": 1,
                },
                "kubernetes": KUBERNETES_PROPERTY,
            },
            "required": ["node", "service"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_events",
        description="Get system events from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def handle_dmesg(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "dmesg"))
    return {"dmesg": out}


async def handle_service(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    service = require_str(args, "service")
    action = opt_str(args, "action", "status")
    out = await ctl.run(node_args(node, "service", service, action))
    return {"service": out}


async def handle_restart(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    service = require_str(args, "service")
    out = await ctl.run(node_args(node, "service", service, "restart"))
    return {"restart": out}


async def handle_logs(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    service = require_str(args, "service")
    tail = opt_int(args, "tail")
    kubernetes = opt_bool(args, "kubernetes")

    cmd = node_args(node, "logs", service)
    if tail is not None:
        cmd += ["--tail", str(tail)]
    if kubernetes:
        cmd.append("--kubernetes")

    out = await ctl.run(cmd)
    return {
        "logs": out,
        "service": service,
        "tail_lines": tail,
        "namespace": containerd_namespace(kubernetes),
    }


async def handle_events(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "events"))
    return {"events": out}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

SERVICE_HANDLERS = {
    "dmesg": handle_dmesg,
    "service": handle_service,
    "restart": handle_restart,
    "get_logs": handle_logs,
    "get_events": handle_events,
}
