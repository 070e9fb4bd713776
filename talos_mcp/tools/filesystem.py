"""
Filesystem tools.

Tools:
  list        — list a directory (long, humanize, recurse/depth, type filters)
  read        — read a file
  copy        — copy a file or directory off a node
  get_usage   — disk usage for a path
  get_mounts  — mount table
"""

from __future__ import annotations

from mcp.types import Tool

from talos_mcp.formatters import node_args
from talos_mcp.params import opt_bool, opt_int, opt_str, opt_str_list, require_str
from talos_mcp.talosctl import Talosctl
from talos_mcp.tools._schema import READ_ONLY, WRITE, node_only_schema, node_property


# ---------------------------------------------------------------------------
# Tool definitions
# ---------------------------------------------------------------------------

FILESYSTEM_TOOLS: list[Tool] = [
    Tool(
        name="list",
        description="List files and directories at a specified path on a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "path": {
                    "type": "string",
                    "description": "Directory path to list (defaults to root /)",
                    "default": "/",
                },
                "long": {"type": "boolean", "description": "Display additional file details", "default": False},
                "humanize": {"type": "boolean", "description": "Humanize size and time in the output", "default": False},
                "recurse": {
                    "type": "boolean",
                    "description": "Recurse into subdirectories (takes precedence over depth)",
                    "default": False,
                },
                "depth": {
                    "type": "integer",
                    "description": "Maximum recursion depth (defaults to 1)",
                    "minimum": 1,
                    "default": 1,
                },
                "type": {
                    "type": "array",
                    "description": "Filter by specified file types",
                    "items": {"type": "string", "enum": ["f", "d", "l", "L"]},
                },
            },
            "required": ["node"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="read",
        description="Read the contents of a file on a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "path": {"type": "string", "description": "Full path to the file to read"},
            },
            "required": ["node", "path"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="copy",
        description="Copy files to/from a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property("IP address or hostname of the Talos node"),
                "source": {"type": "string", "description": "Source file path (local or remote)"},
                "destination": {"type": "string", "description": "Destination file path (local or remote)"},
            },
            "required": ["node", "source", "destination"],
        },
        annotations=WRITE,
    ),
    Tool(
        name="get_usage",
        description="Get disk usage information for a path on a Talos node",
        inputSchema={
            "type": "object",
            "properties": {
                "node": node_property(),
                "path": {
                    "type": "string",
                    "description": "Path to check disk usage for (defaults to root /)",
                    "default": "/",
                },
            },
            "required": ["node"],
        },
        annotations=READ_ONLY,
    ),
    Tool(
        name="get_mounts",
        description="Get filesystem mount information from a Talos node",
        inputSchema=node_only_schema(),
        annotations=READ_ONLY,
    ),
]


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _list_args(
    node: str,
    path: str,
    *,
    long: bool = False,
    humanize: bool = False,
    recurse: bool = False,
    depth: int = 1,
    types: list[str] | None = None,
) -> list[str]:
    cmd = node_args(node, "list", path)
    if long:
        cmd.append("--long")
    if humanize:
        cmd.append("--humanize")
    # --recurse and --depth are mutually exclusive
    if recurse:
        cmd.append("--recurse")
    elif depth != 1:
        cmd += ["--depth", str(depth)]
    for file_type in types or []:
        cmd += ["--type", file_type]
    return cmd


async def handle_list(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    path = opt_str(args, "path", "/")
    long = opt_bool(args, "long")
    humanize = opt_bool(args, "humanize")
    recurse = opt_bool(args, "recurse")
    depth = opt_int(args, "depth", 1)
    types = opt_str_list(args, "type")

    out = await ctl.run(
        _list_args(node, path, long=long, humanize=humanize, recurse=recurse, depth=depth, types=types)
    )
    return {
        "list": out,
        "path": path,
        "long": long,
        "humanize": humanize,
        "recurse": recurse,
        "depth": depth,
        "types": types,
    }


async def handle_read(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    path = require_str(args, "path")
    out = await ctl.run(node_args(node, "read", path))
    return {"content": out}


async def handle_copy(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    source = require_str(args, "source")
    destination = require_str(args, "destination")
    out = await ctl.run(node_args(node, "copy", source, destination))
    return {"copy": out}


async def handle_usage(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    path = opt_str(args, "path", "/")
    out = await ctl.run(node_args(node, "usage", path))
    return {"usage": out}


async def handle_mounts(ctl: Talosctl, args: dict) -> dict:
    node = require_str(args, "node")
    out = await ctl.run(node_args(node, "mounts"))
    return {"mounts": out}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

FILESYSTEM_HANDLERS = {
    "list": handle_list,
    "read": handle_read,
    "copy": handle_copy,
    "get_usage": handle_usage,
    "get_mounts": handle_mounts,
}
