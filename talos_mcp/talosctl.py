"""
Async talosctl wrapper.

Uses asyncio.create_subprocess_exec — no shell involved, immune to injection.
Callers pass node addresses, paths and flags as explicit list elements, never
interpolated into a shell string.

Every call is prefixed with ``--talosconfig <path>`` from the injected
settings. No timeout is applied: a hung talosctl call hangs its request.
"""

from __future__ import annotations

import asyncio
from typing import Literal, Sequence

from talos_mcp.config import Settings
from talos_mcp.errors import ConfigurationMissing, ExternalToolError, SpawnError

Capture = Literal["stdout", "stderr"]


# ---------------------------------------------------------------------------
# Error enrichment
# ---------------------------------------------------------------------------

_ERROR_HINTS = {
    "connection refused": (
        "The Talos API refused the connection. Check the node address and that "
        "apid is listening on port 50000."
    ),
    "certificate signed by unknown authority": (
        "TLS verification failed. The talosconfig may belong to a different cluster."
    ),
    "x509:": (
        "TLS verification failed. Check that the talosconfig certificates match the cluster."
    ),
    "context deadline exceeded": (
        "Timed out waiting for the Talos API. The node may be down or unreachable."
    ),
    "PermissionDenied": (
        "The talosconfig role is not allowed to run this operation "
        "(os:reader cannot perform writes)."
    ),
    "nodes are not set": (
        "No target node. Pass a node, or set nodes in the active talosconfig context."
    ),
}


def _enrich_error(raw_stderr: str) -> str:
    """Prepend an actionable hint to common talosctl errors."""
    for pattern, hint in _ERROR_HINTS.items():
        if pattern in raw_stderr:
            return f"{hint}\n\ntalosctl stderr: {raw_stderr}"
    return raw_stderr


# ---------------------------------------------------------------------------
# Invoker
# ---------------------------------------------------------------------------

class Talosctl:
    """Runs talosctl against the configured talosconfig."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def build_args(self, args: Sequence[str]) -> list[str]:
        if not self.settings.talosconfig:
            raise ConfigurationMissing()
        return ["--talosconfig", self.settings.talosconfig, *args]

    async def run(self, args: Sequence[str], *, capture: Capture = "stdout") -> str:
        """Run talosctl and return the captured stream.

        ``capture="stderr"`` is for calls such as ``health`` that report their
        progress on stderr rather than stdout.
        """
        full_args = self.build_args(args)

        try:
            proc = await asyncio.create_subprocess_exec(
                self.settings.talosctl,
                *full_args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        # ValueError covers arguments with an embedded NUL byte.
        except (OSError, ValueError) as e:
            raise SpawnError(f"Failed to execute talosctl: {e}") from e

        stdout, stderr = await proc.communicate()
        err = stderr.decode(errors="replace")

        if proc.returncode != 0:
            if err.strip():
                message = f"talosctl failed: {_enrich_error(err)}"
            else:
                message = f"talosctl exited with code {proc.returncode}"
            raise ExternalToolError(message, returncode=proc.returncode, stderr=err)

        if capture == "stderr":
            return err
        return stdout.decode(errors="replace")
