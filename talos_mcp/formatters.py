"""Shared result-shaping helpers."""

from __future__ import annotations

import json
from typing import Any

from mcp.types import TextContent


def containerd_namespace(kubernetes: bool) -> str:
    """Name of the containerd namespace talosctl targets for ``--kubernetes``."""
    return "k8s.io" if kubernetes else "system"


def text_content(payload: Any) -> dict[str, Any]:
    """Wrap a structured result as a ``tools/call`` result.

    The payload is pretty-printed into a single text block; callers parse
    the text back into JSON.
    """
    block = TextContent(type="text", text=json.dumps(payload, indent=2))
    return {"content": [block.model_dump(by_alias=True, exclude_none=True)]}


def node_args(node: str, *args: str) -> list[str]:
    """argv targeting a single node."""
    return ["--nodes", node, *args]


def resource_args(node: str, resource: str, namespace: str | None, output: str) -> list[str]:
    """argv for ``talosctl get <resource>``."""
    cmd = node_args(node, "get", resource)
    if namespace is not None:
        cmd += ["--namespace", namespace]
    cmd += ["--output", output]
    return cmd
