"""
System inspection tools (read-only).

Tools:
  containers            — containers running on a node
  stats                 — container CPU/memory statistics
  get_processes         — process list, sorted by rss or cpu
  memory_verbose        — detailed memory breakdown
  get_cpu_memory_usage  — memory plus the cpu cgroup preset, in one result
"""

from __future__ import annotations

import asyncio

from mcp.types import Tool

from talos_mcp.formatters import containerd_namespace, node_args
from talos_mcp.params import opt_bool, opt_str, require_str
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools._schema import (
    KUBERNETES_PROPERTY,
    READ_ONLY,
    node_only_schema,
    node_property,
)


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

INSPECTION_TOOLS: list[Tool] = [
    Tool(
        name="containers",
        description="List running containers on a Talos node with their current status",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "kubernetes": {
                    **KUBERNETES_PROPERTY,
                    "description": "Use the k8s.io containerd namespace to list Kubernetes containers (defaults to false)",
                },
            },
            "required": ["node"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="stats",
        description="Get resource usage statistics (CPU, memory) for containers on a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "kubernetes": {
                    **KUBERNETES_PROPERTY,
                    "description": "Use the k8s.io containerd namespace to get Kubernetes containers stats (defaults to false)",
                },
            },
            "required": ["node"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_processes",
        description="List running processes on a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "sort": {
                    "type": "string",
                    "description": "Column to sort output by (defaults to 'rss')",
                    "enum": ["rss", "cpu"],
                    "default": "rss",
                },
            },
            "required": ["node"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="memory_verbose",
        description="Get detailed memory usage information from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_cpu_memory_usage",
        description="Get CPU and memory usage statistics from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def handle_containers(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    kubernetes = opt_bool(args, "kubernetes")

    cmd = node_args(node, "containers")
    if kubernetes:
        cmd.append("--kubernetes")

    out = await ctl.run(cmd)
    return {"containers": out, "namespace": containerd_namespace(kubernetes)}


async def handle_stats(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    kubernetes = opt_bool(args, "kubernetes")

    cmd = node_args(node, "stats")
    if kubernetes:
        cmd.append("--kubernetes")

    out = await ctl.run(cmd)
    return {"stats": out, "namespace": containerd_namespace(kubernetes)}


async def handle_processes(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    sort = opt_str(args, "sort", "rss")
    out = await ctl.run(node_args(node, "processes", "--sort", sort))
    return {"processes": out, "sort_by": sort}


async def handle_memory_verbose(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "memory", "--verbose"))
    return {"memory_verbose": out}


async def handle_cpu_memory_usage(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")

    # Both calls always run; the memory error wins when both fail.
    mem, cpu = await asyncio.gather(
        ctl.run(node_args(node, "memory")),
        ctl.run(node_args(node, "cgroups", "--preset", "cpu")),
        return_exceptions=True,
    )
    for result in (mem, cpu):
        if isinstance(result, BaseException):
            raise result
    return {"memory": mem, "cpu": cpu}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

INSPECTION_HANDLERS = {
    "containers": handle_containers,
    "stats": handle_stats,
    "get_processes": handle_processes,
    "memory_verbose": handle_memory_verbose,
    "get_cpu_memory_usage": handle_cpu_memory_usage,
}
