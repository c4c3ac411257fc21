"""Tests for gribble data models."""

import pytest

from gribble.models import CachedNetworkInterface, CachedProcess, DiskInfo


def test_cached_process_creation():
    """Test CachedProcess dataclass creation."""
    proc = CachedProcess(name="python", pid=123, cpu_usage=50.0, memory=1024000)

    assert proc.name == "python"
    assert proc.pid == 123
    assert proc.cpu_usage == 50.0
    assert proc.memory == 1024000


def test_cached_process_is_frozen():
    """Test that CachedProcess is immutable (frozen)."""
    proc = CachedProcess(name="init", pid=1, cpu_usage=0.1, memory=10000)

    with pytest.raises(AttributeError):
        proc.pid = 999


def test_cached_network_interface_uses_slots():
    """Test that CachedNetworkInterface uses __slots__ for memory efficiency."""
    iface = CachedNetworkInterface(name="eth0", total_received=10, total_transmitted=20)

    # Slots-based dataclasses don't have __dict__
    assert not hasattr(iface, "__dict__")


class TestDiskInfo:
    """Tests for DiskInfo derived values."""

    def test_used_space_and_percent(self):
        """Test used space and usage percent are derived from capacity."""
        disk = DiskInfo(
            name="/dev/sda1",
            mount_point="/",
            total_space=1000,
            available_space=250,
            file_system="ext4",
        )
        assert disk.used_space == 750
        assert disk.usage_percent == 75.0

    def test_zero_capacity(self):
        """Test a zero-sized disk reports 0% rather than dividing by zero."""
        disk = DiskInfo(
            name="none", mount_point="/proc", total_space=0, available_space=0, file_system="proc"
        )
        assert disk.usage_percent == 0.0

    def test_available_exceeds_total(self):
        """Test used space never goes negative."""
        disk = DiskInfo(
            name="odd", mount_point="/mnt", total_space=100, available_space=150, file_system="nfs"
        )
        assert disk.used_space == 0
