"""
Integration test fixtures — requires talosctl and a reachable Talos cluster.
"""

from __future__ import annotations

import os
import shutil
import subprocess

import pytest

from talos_mcp.config import Settings
from talos_mcp.talosctl import Talosctl


def _cluster_reachable() -> bool:
    if not shutil.which("talosctl") or not os.environ.get("TALOSCONFIG"):
        return False
    try:
        result = subprocess.run(
            ["talosctl", "version", "--client", "--short"],
            capture_output=True,
            timeout=5,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


skip_no_cluster = pytest.mark.skipif(
    not _cluster_reachable(),
    reason="talosctl or TALOSCONFIG not available — skipping integration tests",
)


@pytest.fixture
def live_ctl() -> Talosctl:
    return Talosctl(Settings.from_env())


@pytest.fixture
def node() -> str:
    """Node to query; TALOS_TEST_NODE or the default control plane address."""
    return os.environ.get("TALOS_TEST_NODE", "192.168.1.77")
