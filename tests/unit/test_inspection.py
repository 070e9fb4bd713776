"""
Unit tests for talos_mcp/tools/inspection.py handlers.
"""

from __future__ import annotations

import pytest

from talos_mcp.errors import ExternalToolError, MissingParameter
from talos_mcp.tools.inspection import (
    handle_containers,
    handle_cpu_memory_usage,
    handle_memory_verbose,
    handle_processes,
    handle_stats,
)
from tests.conftest import FakeTalosctl


# ---------------------------------------------------------------------------
# containers / stats
# ---------------------------------------------------------------------------

async def test_containers_defaults_to_system_namespace():
    ctl = FakeTalosctl("NODE  NAMESPACE  ID")
    result = await handle_containers(ctl, {"node": "10.0.0.5"})
    assert ctl.argv == ["--nodes", "10.0.0.5", "containers"]
    assert "--kubernetes" not in ctl.argv
    assert result == {"containers": "NODE  NAMESPACE  ID", "namespace": "system"}


async def test_containers_kubernetes():
    ctl = FakeTalosctl()
    result = await handle_containers(ctl, {"node": "10.0.0.5", "kubernetes": True})
    assert ctl.argv == ["--nodes", "10.0.0.5", "containers", "--kubernetes"]
    assert result["namespace"] == "k8s.io"


async def test_containers_missing_node():
    ctl = FakeTalosctl()
    with pytest.raises(MissingParameter):
        await handle_containers(ctl, {"kubernetes": True})
    assert ctl.calls == []


async def test_stats_kubernetes():
    ctl = FakeTalosctl("stats")
    result = await handle_stats(ctl, {"node": "n1", "kubernetes": True})
    assert ctl.argv == ["--nodes", "n1", "stats", "--kubernetes"]
    assert result == {"stats": "stats", "namespace": "k8s.io"}


# ---------------------------------------------------------------------------
# processes / memory
# ---------------------------------------------------------------------------

async def test_processes_default_sort():
    ctl = FakeTalosctl()
    result = await handle_processes(ctl, {"node": "n1"})
    assert ctl.argv == ["--nodes", "n1", "processes", "--sort", "rss"]
    assert result["sort_by"] == "rss"


async def test_processes_sort_cpu():
    ctl = FakeTalosctl()
    result = await handle_processes(ctl, {"node": "n1", "sort": "cpu"})
    assert ctl.argv[-2:] == ["--sort", "cpu"]
    assert result["sort_by"] == "cpu"


async def test_memory_verbose():
    ctl = FakeTalosctl("MemTotal: 8 GiB")
    result = await handle_memory_verbose(ctl, {"node": "n1"})
    assert ctl.argv == ["--nodes", "n1", "memory", "--verbose"]
    assert result == {"memory_verbose": "MemTotal: 8 GiB"}


# ---------------------------------------------------------------------------
# get_cpu_memory_usage — composite
# ---------------------------------------------------------------------------

async def test_cpu_memory_runs_both_calls():
    ctl = FakeTalosctl("mem-out", "cpu-out")
    result = await handle_cpu_memory_usage(ctl, {"node": "n1"})
    assert [argv for argv, _ in ctl.calls] == [
        ["--nodes", "n1", "memory"],
        ["--nodes", "n1", "cgroups", "--preset", "cpu"],
    ]
    assert result == {"memory": "mem-out", "cpu": "cpu-out"}


async def test_cpu_memory_second_call_fails():
    ctl = FakeTalosctl("mem-out", ExternalToolError("talosctl failed: cgroups", returncode=1, stderr="cgroups"))
    with pytest.raises(ExternalToolError, match="cgroups"):
        await handle_cpu_memory_usage(ctl, {"node": "n1"})
    assert len(ctl.calls) == 2


async def test_cpu_memory_first_error_wins():
    ctl = FakeTalosctl(
        ExternalToolError("talosctl failed: memory", returncode=1, stderr="memory"),
        ExternalToolError("talosctl failed: cgroups", returncode=1, stderr="cgroups"),
    )
    with pytest.raises(ExternalToolError, match="memory"):
        await handle_cpu_memory_usage(ctl, {"node": "n1"})
    assert len(ctl.calls) == 2
