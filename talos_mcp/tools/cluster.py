"""
Cluster, configuration and etcd tools.

Tools:
  get_health        — talosctl health across control plane and worker nodes
  get_version       — talosctl client version
  get_time          — node time, optionally checked against an NTP server
  apply_config      — apply a machine config file to a node
  validate_config   — validate a machine config file
  get_etcd_status   — etcd status
  get_etcd_members  — etcd member list
  bootstrap_etcd    — bootstrap etcd on the first control plane node
  defrag_etcd       — defragment the etcd database on a node

``talosctl health`` reports its progress on stderr, so get_health captures
stderr instead of stdout.
"""

from __future__ import annotations

from mcp.types import Tool

from talos_mcp.errors import ContextError, MissingParameter, TalosMcpError, ValidationError
from talos_mcp.formatters import node_args
from talos_mcp.params import opt_bool, opt_str, opt_str_list, require_str
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools._schema import READ_ONLY, WRITE, node_only_schema, node_property

DEFAULT_CONTROL_PLANES = ["192.168.1.77"]


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

CLUSTER_TOOLS: list[Tool] = [
    Tool(
        name="get_health",
        description="Check the health status of the Talos cluster",
        inputSchema={
            "type": "object",
            "properties": {
                "control_planes": {
                    "type": "array",
                    "description": "Array of IP addresses or hostnames of control plane nodes (defaults to [192.168.1.77])",
                    "items": {"type": "string"},
                    "default": DEFAULT_CONTROL_PLANES,
                },
                "worker_nodes": {
                    "type": "array",
                    "description": "Array of IP addresses or hostnames of worker nodes",
                    "items": {"type": "string"},
                },
                "init_node": {"type": "string", "description": "IP address or hostname of the init node"},
                "timeout": {
                    "type": "string",
                    "description": "Timeout duration for health check (defaults to 120s)",
                    "default": "120s",
                },
                "run_e2e": {"type": "boolean", "description": "Run Kubernetes e2e test (defaults to false)", "default": False},
                "k8s_endpoint": {"type": "string", "description": "Use endpoint instead of kubeconfig default"},
                "server": {"type": "boolean", "description": "Run server-side check (defaults to true)", "default": True},
            },
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_version",
        description="Get Talos client version information",
        inputSchema={
            "type": "object",
            "properties": {
                "short": {"type": "boolean", "description": "Print the short version (defaults to false)", "default": False},
            },
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_time",
        description="Get current time from a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "check": {
                    "type": "string",
                    "description": "Check server time against specified NTP server (e.g., 'pool.ntp.org')",
                },
            },
            "required": ["node"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="apply_config",
        description="Apply a configuration file to a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property("IP address or hostname of the Talos node to configure"),
                "file": {"type": "string", "description": "Path to the configuration file to apply"},
            },
            "required": ["node", "file"],
        },
        annotations=WRITE,
    ),
    Tool(
        name="validate_config",
        description="Validate a Talos configuration file",
        inputSchema={
            "type": "object",
            "properties": {
                "config": {"type": "string", "description": "Path to the configuration file to validate"},
                "mode": {
                    "type": "string",
                    "description": "Validation mode (defaults to 'container')",
                    "default": "container",
                },
            },
            "required": ["config"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_etcd_status",
        description="Get etcd cluster status from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_etcd_members",
        description="Get etcd cluster member information from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
    Tool(
        name="bootstrap_etcd",
        description="Bootstrap etcd cluster on a Talos node",
        inputSchema=node_only_schema("IP address or hostname of the Talos node to bootstrap"),
        annotations=WRITE,
    ),
    Tool(
        name="defrag_etcd",
        description="Defragment etcd database on a Talos node",
        inputSchema=node_only_schema("IP address or hostname of the Talos node to defragment"),
        annotations=WRITE,
    ),
]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _health_args(
    control_planes: list[str],
    *,
    worker_nodes: list[str] | None = None,
    init_node: str | None = None,
    timeout: str = "120s",
    run_e2e: bool = False,
    k8s_endpoint: str | None = None,
    server: bool = True,
) -> list[str]:
    # The first control plane node is the one talosctl talks to.
    cmd = node_args(control_planes[0], "health", "--control-plane-nodes", ",".join(control_planes))
    if worker_nodes is not None:
        cmd += ["--worker-nodes", ",".join(worker_nodes)]
    if init_node is not None:
        cmd += ["--init-node", init_node]
    cmd += ["--wait-timeout", timeout]
    if run_e2e:
        cmd.append("--run-e2e")
    if k8s_endpoint is not None:
        cmd += ["--k8s-endpoint", k8s_endpoint]
    if not server:
        cmd.append("--server=false")
    return cmd


async def handle_health(ctl: Talosctl, args: dict) -> dict:
    control_planes = opt_str_list(args, "control_planes")
    if control_planes is None:
        control_planes = list(DEFAULT_CONTROL_PLANES)
    worker_nodes = opt_str_list(args, "worker_nodes")
    init_node = opt_str(args, "init_node")
    timeout = opt_str(args, "timeout", "120s")
    run_e2e = opt_bool(args, "run_e2e")
    k8s_endpoint = opt_str(args, "k8s_endpoint")
    server = opt_bool(args, "server", True)

    if not control_planes:
        raise ValidationError("At least one control plane node must be specified")

    cmd = _health_args(
        control_planes,
        worker_nodes=worker_nodes,
        init_node=init_node,
        timeout=timeout,
        run_e2e=run_e2e,
        k8s_endpoint=k8s_endpoint,
        server=server,
    )
    try:
        out = await ctl.run(cmd, capture="stderr")
    except TalosMcpError as e:
        raise ContextError("Health check failed", e) from e

    return {
        "health": out,
        "cluster_info": {
            "control_planes": control_planes,
            "worker_nodes": worker_nodes,
            "init_node": init_node,
            "timeout": timeout,
            "run_e2e": run_e2e,
            "k8s_endpoint": k8s_endpoint,
            "server_side": server,
        },
    }


async def handle_version(ctl: Talosctl, args: dict) -> dict:
    short = opt_bool(args, "short")
    cmd = ["version", "--client"]
    if short:
        cmd.append("--short")
    out = await ctl.run(cmd)
    return {"version": out, "short_format": short}


async def handle_time(ctl: Talosctl, args: dict) -> dict:
    node = opt_str(args, "node")
    if not node:
        raise MissingParameter(
            "node",
            "Time command requires a node to be specified. Please provide a node parameter.",
        )
    check = opt_str(args, "check")

    cmd = node_args(node, "time")
    if check is not None:
        cmd += ["--check", check]

    out = await ctl.run(cmd)
    return {"time": out, "node": node, "ntp_check": check}


async def handle_apply_config(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    file = require_str(args, "file")
    await ctl.run(node_args(node, "apply-config", "--file", file))
    return {"status": "config applied"}


async def handle_validate_config(ctl: Talosctl, args: dict) -> dict:
    config = require_str(args, "config")
    mode = opt_str(args, "mode", "container")
    out = await ctl.run(["validate", "--config", config, "--mode", mode])
    return {"validation": out}


async def handle_etcd_status(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "etcd", "status"))
    return {"etcd_status": out}


async def handle_etcd_members(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "etcd", "members"))
    return {"etcd_members": out}


async def handle_bootstrap_etcd(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    await ctl.run(node_args(node, "bootstrap"))
    return {"status": "etcd bootstrapped"}


async def handle_defrag_etcd(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    await ctl.run(node_args(node, "etcd", "defrag"))
    return {"status": "etcd defragmented"}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

CLUSTER_HANDLERS = {
    "get_health": handle_health,
    "get_version": handle_version,
    "get_time": handle_time,
    "apply_config": handle_apply_config,
    "validate_config": handle_validate_config,
    "get_etcd_status": handle_etcd_status,
    "get_etcd_members": handle_etcd_members,
    "bootstrap_etcd": handle_bootstrap_etcd,
    "defrag_etcd": handle_defrag_etcd,
}
