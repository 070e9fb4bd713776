"""
Tool registry.

Groups are listed in dispatch order. Tool names are unique across groups, so
the order only decides which table is consulted first.
"""

from __future__ import annotations

from typing import Awaitable, Callable, NamedTuple

from mcp.types import Tool

from talos_mcp.talosctl import Talosctl
from talos_mcp.tools.cluster import CLUSTER_HANDLERS, CLUSTER_TOOLS
from talos_mcp.tools.filesystem import FILESYSTEM_HANDLERS, FILESYSTEM_TOOLS
from talos_mcp.tools.inspection import INSPECTION_HANDLERS, INSPECTION_TOOLS
from talos_mcp.tools.lifecycle import LIFECYCLE_HANDLERS, LIFECYCLE_TOOLS
from talos_mcp.tools.network import NETWORK_HANDLERS, NETWORK_TOOLS
from talos_mcp.tools.services import SERVICE_HANDLERS, SERVICE_TOOLS
from talos_mcp.tools.storage import STORAGE_HANDLERS, STORAGE_TOOLS

Handler = Callable[[Talosctl, dict], Awaitable[dict]]


class ToolGroup(NamedTuple):
    name: str
    tools: list[Tool]
    handlers: dict[str, Handler]


TOOL_GROUPS: list[ToolGroup] = [
    ToolGroup("inspection", INSPECTION_TOOLS, INSPECTION_HANDLERS),
    ToolGroup("filesystem", FILESYSTEM_TOOLS, FILESYSTEM_HANDLERS),
    ToolGroup("network", NETWORK_TOOLS, NETWORK_HANDLERS),
    ToolGroup("services", SERVICE_TOOLS, SERVICE_HANDLERS),
    ToolGroup("storage", STORAGE_TOOLS, STORAGE_HANDLERS),
    ToolGroup("cluster", CLUSTER_TOOLS, CLUSTER_HANDLERS),
    ToolGroup("lifecycle", LIFECYCLE_TOOLS, LIFECYCLE_HANDLERS),
]


def is_read_only(tool: Tool) -> bool:
    return tool.annotations is not None and tool.annotations.readOnlyHint is True


def active_groups(read_only: bool = False) -> list[ToolGroup]:
    """Groups with write tools removed when ``read_only`` is set."""
    if not read_only:
        return list(TOOL_GROUPS)
    groups = []
    for group in TOOL_GROUPS:
        tools = [t for t in group.tools if is_read_only(t)]
        names = {t.name for t in tools}
        handlers = {k: v for k, v in group.handlers.items() if k in names}
        groups.append(ToolGroup(group.name, tools, handlers))
    return groups


def describe_all(read_only: bool = False) -> list[Tool]:
    return [tool for group in active_groups(read_only) for tool in group.tools]


WRITE_TOOLS: set[str] = {
    tool.name for group in TOOL_GROUPS for tool in group.tools if not is_read_only(tool)
}
