"""Telemetry provider for gribble, backed by psutil."""

import logging
import platform
import socket
import time
from dataclasses import dataclass, field

import psutil

from gribble.models import DiskInfo, HostInfo

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RawProcess:
    """Process as reported by the OS, in enumeration order."""

    pid: int
    name: str
    cpu_usage: float
    memory: int


@dataclass(slots=True, frozen=True)
class RawNetworkInterface:
    """Cumulative interface counters as reported by the OS."""

    name: str
    total_received: int
    total_transmitted: int


@dataclass(slots=True)
class TelemetrySnapshot:
    """Snapshot of overall system state taken by one refresh."""

    cpu_percent: float = 0.0
    memory_total: int = 0
    memory_used: int = 0
    swap_total: int = 0
    swap_used: int = 0
    processes: list[RawProcess] = field(default_factory=list)
    disks: list[DiskInfo] = field(default_factory=list)
    networks: list[RawNetworkInterface] = field(default_factory=list)


class TelemetryProvider:
    """
    Refreshable view of host telemetry collected with psutil.

    Every query returns data from the last refresh(); nothing is collected
    implicitly. Missing or unreadable data degrades to zero or empty lists
    rather than raising, so a partially available host still renders.
    """

    def __init__(self) -> None:
        """Initialize the TelemetryProvider with an empty snapshot."""
        self._snapshot = TelemetrySnapshot()
        # Initialize CPU percent (first call returns 0.0)
        psutil.cpu_percent()

    @property
    def snapshot(self) -> TelemetrySnapshot:
        """Get the last collected snapshot."""
        return self._snapshot

    def refresh(self) -> TelemetrySnapshot:
        """Re-query the OS and replace the current snapshot."""
        snapshot = TelemetrySnapshot(
            processes=self._collect_processes(),
            disks=self._collect_disks(),
            networks=self._collect_networks(),
        )
        try:
            snapshot.cpu_percent = psutil.cpu_percent()
            mem = psutil.virtual_memory()
            swap = psutil.swap_memory()
            snapshot.memory_total = mem.total
            snapshot.memory_used = mem.used
            snapshot.swap_total = swap.total
            snapshot.swap_used = swap.used
        except (OSError, RuntimeError) as exc:
            logger.warning("Failed to read memory statistics: %s", exc)
        self._snapshot = snapshot
        return snapshot

    def processes(self) -> list[RawProcess]:
        return self._snapshot.processes

    def disks(self) -> list[DiskInfo]:
        return self._snapshot.disks

    def network_interfaces(self) -> list[RawNetworkInterface]:
        return self._snapshot.networks

    def host_info(self) -> HostInfo:
        """Collect static host facts, using "Unknown" where unavailable."""
        try:
            load_avg = psutil.getloadavg()
        except (OSError, AttributeError):
            load_avg = (0.0, 0.0, 0.0)
        try:
            uptime = max(0.0, time.time() - psutil.boot_time())
        except (OSError, RuntimeError):
            uptime = 0.0
        return HostInfo(
            hostname=socket.gethostname() or "Unknown",
            os_name=platform.system() or "Unknown",
            os_version=platform.version() or "Unknown",
            kernel_version=platform.release() or "Unknown",
            cpu_count=psutil.cpu_count() or 0,
            total_memory=self._snapshot.memory_total or psutil.virtual_memory().total,
            uptime_seconds=uptime,
            load_avg=tuple(load_avg),
        )

    def process_details(self, pid: int) -> tuple[str, str] | None:
        """Return (status, command line) for a live process, or None."""
        try:
            proc = psutil.Process(pid)
            with proc.oneshot():
                status = proc.status()
                cmdline = proc.cmdline()
                command_line = " ".join(cmdline) if cmdline else proc.name()
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            return None
        return status, command_line

    def _collect_processes(self) -> list[RawProcess]:
        """
        Collect all running processes in OS enumeration order.

        Handles AccessDenied and ZombieProcess errors gracefully.
        """
        processes: list[RawProcess] = []

        for proc in psutil.process_iter(attrs=["pid", "name", "cpu_percent", "memory_info"]):
            try:
                info = proc.info
                mem_info = info.get("memory_info")
                processes.append(
                    RawProcess(
                        pid=info.get("pid", 0),
                        name=info.get("name") or "",
                        cpu_usage=info.get("cpu_percent") or 0.0,
                        memory=mem_info.rss if mem_info else 0,
                    )
                )
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                # Process died mid-poll
                continue

        return processes

    def _collect_disks(self) -> list[DiskInfo]:
        disks: list[DiskInfo] = []
        try:
            partitions = psutil.disk_partitions(all=False)
        except OSError as exc:
            logger.warning("Failed to list disk partitions: %s", exc)
            return disks

        for part in partitions:
            try:
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                continue
            disks.append(
                DiskInfo(
                    name=part.device,
                    mount_point=part.mountpoint,
                    total_space=usage.total,
                    available_space=usage.free,
                    file_system=part.fstype,
                )
            )
        return disks

    def _collect_networks(self) -> list[RawNetworkInterface]:
        try:
            counters = psutil.net_io_counters(pernic=True)
        except OSError as exc:
            logger.warning("Failed to read network counters: %s", exc)
            return []
        return [
            RawNetworkInterface(
                name=name,
                total_received=stats.bytes_recv,
                total_transmitted=stats.bytes_sent,
            )
            for name, stats in counters.items()
        ]
