"""Tests for the TelemetryProvider class."""

import os

from gribble.models import DiskInfo, HostInfo
from gribble.monitor import (
    RawNetworkInterface,
    RawProcess,
    TelemetryProvider,
    TelemetrySnapshot,
)


class TestTelemetrySnapshot:
    """Tests for TelemetrySnapshot dataclass."""

    def test_snapshot_defaults_to_empty(self):
        """Test an empty snapshot reports zeros and empty lists."""
        snapshot = TelemetrySnapshot()
        assert snapshot.cpu_percent == 0.0
        assert snapshot.memory_total == 0
        assert snapshot.processes == []
        assert snapshot.disks == []
        assert snapshot.networks == []

    def test_snapshot_uses_slots(self):
        """Test TelemetrySnapshot uses __slots__ for memory efficiency."""
        assert not hasattr(TelemetrySnapshot(), "__dict__")


class TestTelemetryProvider:
    """Tests for TelemetryProvider class."""

    def test_queries_empty_before_refresh(self):
        """Test nothing is collected until refresh() is called."""
        provider = TelemetryProvider()

        assert provider.processes() == []
        assert provider.disks() == []
        assert provider.network_interfaces() == []

    def test_refresh_collects_processes(self):
        """Test refresh() collects process records."""
        provider = TelemetryProvider()
        provider.refresh()

        processes = provider.processes()
        assert len(processes) > 0
        for proc in processes:
            assert isinstance(proc, RawProcess)
            assert isinstance(proc.name, str)
            assert isinstance(proc.cpu_usage, float)
            assert isinstance(proc.memory, int)

    def test_refresh_includes_own_process(self):
        """Test the test runner itself shows up in the process list."""
        provider = TelemetryProvider()
        provider.refresh()

        assert os.getpid() in {proc.pid for proc in provider.processes()}

    def test_refresh_collects_memory(self):
        """Test refresh() records memory totals."""
        provider = TelemetryProvider()
        snapshot = provider.refresh()

        assert snapshot.memory_total > 0
        assert provider.snapshot is snapshot

    def test_refresh_collects_networks(self):
        """Test network interfaces carry cumulative counters."""
        provider = TelemetryProvider()
        provider.refresh()

        for iface in provider.network_interfaces():
            assert isinstance(iface, RawNetworkInterface)
            assert iface.total_received >= 0
            assert iface.total_transmitted >= 0

    def test_refresh_collects_disks(self):
        """Test disks report consistent capacity values."""
        provider = TelemetryProvider()
        provider.refresh()

        for disk in provider.disks():
            assert isinstance(disk, DiskInfo)
            assert disk.total_space >= 0
            assert disk.mount_point

    def test_host_info(self):
        """Test static host facts are populated."""
        provider = TelemetryProvider()
        provider.refresh()

        info = provider.host_info()
        assert isinstance(info, HostInfo)
        assert info.hostname
        assert info.cpu_count > 0
        assert info.total_memory > 0
        assert info.uptime_seconds >= 0
        assert len(info.load_avg) == 3

    def test_process_details_for_self(self):
        """Test details are available for a live process."""
        provider = TelemetryProvider()

        details = provider.process_details(os.getpid())

        assert details is not None
        status, command_line = details
        assert isinstance(status, str)
        assert command_line

    def test_process_details_for_missing_pid(self):
        """Test details for a vanished process are None, not an exception."""
        provider = TelemetryProvider()

        # PIDs above pid_max never exist
        assert provider.process_details(2**31 - 1) is None
