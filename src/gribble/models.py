"""Data models for gribble."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class CachedProcess:
    """Immutable snapshot of a process as shown in the process panel."""

    name: str
    pid: int
    cpu_usage: float  # 0.0 - 100.0 * core_count
    memory: int  # Bytes


@dataclass(slots=True, frozen=True)
class CachedNetworkInterface:
    """Cumulative counters for one network interface."""

    name: str
    total_received: int  # Bytes since attach/boot
    total_transmitted: int


@dataclass(slots=True, frozen=True)
class DiskInfo:
    """Mounted filesystem with its capacity."""

    name: str
    mount_point: str
    total_space: int
    available_space: int
    file_system: str

    @property
    def used_space(self) -> int:
        return max(0, self.total_space - self.available_space)

    @property
    def usage_percent(self) -> float:
        if self.total_space <= 0:
            return 0.0
        return self.used_space / self.total_space * 100.0


@dataclass(slots=True, frozen=True)
class HostInfo:
    """Static facts about the host."""

    hostname: str
    os_name: str
    os_version: str
    kernel_version: str
    cpu_count: int
    total_memory: int
    uptime_seconds: float
    load_avg: tuple[float, float, float]


@dataclass(slots=True, frozen=True)
class ProcessDetails:
    """Details shown in the modal for the selected process."""

    name: str
    pid: int
    cpu_usage: float
    memory: int
    status: str
    command_line: str


@dataclass(slots=True, frozen=True)
class NetworkDetails:
    """Details shown in the modal for the tracked interface."""

    name: str
    total_received: int
    total_transmitted: int
    received_rate: int
    transmitted_rate: int


@dataclass(slots=True, frozen=True)
class FileDetails:
    """Metadata shown in the modal for a file explorer entry."""

    name: str
    is_dir: bool
    size: int
    permissions: str  # Octal, e.g. "755"
    path: str
