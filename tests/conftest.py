"""Shared fixtures for gribble tests."""

import pytest

from gribble.models import DiskInfo, HostInfo
from gribble.monitor import RawNetworkInterface, RawProcess, TelemetrySnapshot


class FakeProvider:
    """Telemetry provider serving scripted snapshots."""

    def __init__(self, processes=None, networks=None, disks=None) -> None:
        self.next_processes: list[RawProcess] = list(processes or [])
        self.next_networks: list[RawNetworkInterface] = list(networks or [])
        self.next_disks: list[DiskInfo] = list(disks or [])
        self.refresh_count = 0
        self.details: dict[int, tuple[str, str]] = {}
        self.snapshot = TelemetrySnapshot()

    def refresh(self) -> TelemetrySnapshot:
        self.refresh_count += 1
        self.snapshot = TelemetrySnapshot(
            cpu_percent=12.5,
            memory_total=8 * 1024**3,
            memory_used=2 * 1024**3,
            processes=list(self.next_processes),
            disks=list(self.next_disks),
            networks=list(self.next_networks),
        )
        return self.snapshot

    def processes(self) -> list[RawProcess]:
        return self.snapshot.processes

    def disks(self) -> list[DiskInfo]:
        return self.snapshot.disks

    def network_interfaces(self) -> list[RawNetworkInterface]:
        return self.snapshot.networks

    def host_info(self) -> HostInfo:
        return HostInfo(
            hostname="testhost",
            os_name="Linux",
            os_version="6.1",
            kernel_version="6.1.0",
            cpu_count=4,
            total_memory=8 * 1024**3,
            uptime_seconds=3600.0,
            load_avg=(0.5, 0.25, 0.1),
        )

    def process_details(self, pid: int) -> tuple[str, str] | None:
        return self.details.get(pid)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider(
        processes=[
            RawProcess(pid=1, name="init", cpu_usage=0.5, memory=10 * 1024**2),
            RawProcess(pid=42, name="python", cpu_usage=35.0, memory=200 * 1024**2),
            RawProcess(pid=7, name="sshd", cpu_usage=2.0, memory=5 * 1024**2),
        ],
        networks=[
            RawNetworkInterface(name="lo", total_received=1000, total_transmitted=1000),
            RawNetworkInterface(name="eth0", total_received=5000, total_transmitted=3000),
        ],
    )
