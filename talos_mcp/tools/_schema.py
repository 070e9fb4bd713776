"""Schema fragments and annotations shared by the tool groups."""

from __future__ import annotations

from mcp.types import ToolAnnotations

NODE_DESCRIPTION = "IP address or hostname of the Talos node to query"


def node_property(description: str = NODE_DESCRIPTION) -> dict:
    return {"type": "string", "description": description}


KUBERNETES_PROPERTY = {
    "type": "boolean",
    "description": "Use the k8s.io containerd namespace to access Kubernetes containers (defaults to false)",
    "default": False,
}

RESOURCE_NAMESPACE_PROPERTY = {
    "type": "string",
    "description": "Resource namespace (default is to use default namespace per resource)",
}

OUTPUT_PROPERTY = {
    "type": "string",
    "description": "Output mode (default: table)",
    "enum": ["json", "table", "yaml", "jsonpath"],
    "default": "table",
}


def node_only_schema(description: str = NODE_DESCRIPTION) -> dict:
    return {
        "type": "object",
        "properties": {"node": node_property(description)},
        "required": ["node"],
    }


READ_ONLY = ToolAnnotations(readOnlyHint=True, openWorldHint=True)
WRITE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, openWorldHint=True)
DESTRUCTIVE = ToolAnnotations(readOnlyHint=False, destructiveHint=True, openWorldHint=True)


def resource_schema() -> dict:
    """Schema for tools backed by ``talosctl get <resource>``."""
    return {
        "type": "object",
        "properties": {
            "node": node_property(),
            "namespace": RESOURCE_NAMESPACE_PROPERTY,
            "output": OUTPUT_PROPERTY,
        },
        "required": ["node"],
    }
