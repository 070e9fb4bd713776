"""
Node lifecycle tools — destructive operations.

These are fire-and-forget: the result only says talosctl accepted the
command, not that the node finished rebooting, resetting or upgrading.

Tools:
  reboot_node    — reboot a node
  shutdown_node  — power a node off
  reset_node     — wipe a node back to maintenance mode
  upgrade_node   — upgrade Talos on a node to an installer image
  upgrade_k8s    — upgrade the Kubernetes control plane
"""

from __future__ import annotations

from mcp.types import Tool

from talos_mcp.formatters import node_args
from talos_mcp.params import opt_str, require_str
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools._schema import DESTRUCTIVE, node_only_schema, node_property

DEFAULT_INSTALLER_IMAGE = "ghcr.io/siderolabs/installer:latest"


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

LIFECYCLE_TOOLS: list[Tool] = [
    Tool(
        name="reboot_node",
        description="Reboot a Talos node (DESTRUCTIVE OPERATION)",
        inputSchema=node_only_schema("IP address or hostname of the Talos node to reboot"),
        annotations=DESTRUCTIVE,
    ),
    Tool(
        name="shutdown_node",
        description="Shutdown a Talos node (DESTRUCTIVE OPERATION)",
        inputSchema=node_only_schema("IP address or hostname of the Talos node to shutdown"),
        annotations=DESTRUCTIVE,
    ),
    Tool(
        name="reset_node",
        description="Reset a Talos node to factory defaults (DESTRUCTIVE OPERATION)",
        inputSchema=node_only_schema("IP address or hostname of the Talos node to reset"),
        annotations=DESTRUCTIVE,
    ),
    Tool(
        name="upgrade_node",
        description="Upgrade a Talos node to a new image version",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property("IP address or hostname of the Talos node to upgrade"),
                "image": {
                    "type": "string",
                    "description": "Container image to upgrade to (defaults to latest installer)",
                    "default": DEFAULT_INSTALLER_IMAGE,
                },
            },
            "required": ["node"],
        },
        annotations=DESTRUCTIVE,
    ),
    Tool(
        name="upgrade_k8s",
        description="Upgrade Kubernetes cluster version",
        inputSchema={
            "type": "object",
            "properties": {
                "from": {
                    "type": "string",
                    "description": "Current Kubernetes version (defaults to 1.28.0)",
                    "default": "1.28.0",
                },
                "to": {
                    "type": "string",
                    "description": "Target Kubernetes version (defaults to 1.29.0)",
                    "default": "1.29.0",
                },
            },
        },
        annotations=DESTRUCTIVE,
    ),
]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def handle_reboot(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    await ctl.run(node_args(node, "reboot"))
    return {"status": "reboot initiated"}


async def handle_shutdown(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    await ctl.run(node_args(node, "shutdown"))
    return {"status": "node shutdown initiated"}


async def handle_reset(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    await ctl.run(node_args(node, "reset"))
    return {"status": "node reset initiated"}


async def handle_upgrade_node(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    image = opt_str(args, "image", DEFAULT_INSTALLER_IMAGE)
    await ctl.run(node_args(node, "upgrade", "--image", image))
    return {"status": "upgrade initiated"}


async def handle_upgrade_k8s(ctl: Talosctl, args: dict) -> dict:
    from_version = opt_str(args, "from", "1.28.0")
    to_version = opt_str(args, "to", "1.29.0")
    await ctl.run(["upgrade-k8s", "--from", from_version, "--to", to_version])
    return {"status": "k8s upgrade initiated"}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

LIFECYCLE_HANDLERS = {
    "reboot_node": handle_reboot,
    "shutdown_node": handle_shutdown,
    "reset_node": handle_reset,
    "upgrade_node": handle_upgrade_node,
    "upgrade_k8s": handle_upgrade_k8s,
}
