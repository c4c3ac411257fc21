"""Application state threaded through the UI loop."""

import logging
import stat
from enum import Enum
from pathlib import Path

from gribble.cache import NetworkCache, ProcessCache
from gribble.config import DEFAULT_SETTINGS, Settings
from gribble.models import (
    DiskInfo,
    FileDetails,
    HostInfo,
    NetworkDetails,
    ProcessDetails,
)
from gribble.monitor import TelemetryProvider
from gribble.navigation import DirectoryNavigator, EntryKind
from gribble.network import NetworkHistory
from gribble.panels import Panel, PanelSelection
from gribble.scheduler import RefreshScheduler

logger = logging.getLogger(__name__)

ModalData = ProcessDetails | NetworkDetails | HostInfo | DiskInfo | FileDetails


class Command(Enum):
    """Discrete user commands forwarded by the input layer."""

    QUIT = "quit"
    PANEL_NEXT = "panel_next"
    PANEL_PREV = "panel_prev"
    CURSOR_UP = "cursor_up"
    CURSOR_DOWN = "cursor_down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    CURSOR_HOME = "cursor_home"
    CURSOR_END = "cursor_end"
    ACTIVATE = "activate"
    MANUAL_REFRESH = "manual_refresh"
    GO_BACK = "go_back"
    GO_UP = "go_up"
    TOGGLE_HELP = "toggle_help"
    TOGGLE_DETAIL_MODAL = "toggle_detail_modal"


class AppState:
    """
    Everything the dashboard shows, owned in one place.

    The refresh scheduler mutates the caches and network history; commands
    mutate panel selection and navigation. The renderer only reads.
    """

    def __init__(
        self,
        provider: TelemetryProvider,
        settings: Settings = DEFAULT_SETTINGS,
        start_directory: Path | None = None,
        now: float = 0.0,
    ) -> None:
        """
        Initialize AppState and take the first snapshot.

        Args:
            provider: Telemetry source; anything with the TelemetryProvider
                interface works.
            settings: Limits and timings.
            start_directory: Directory the file explorer opens in.
            now: Monotonic timestamp of startup.
        """
        self.provider = provider
        self.settings = settings
        self.selection = PanelSelection()
        self.processes = ProcessCache(settings.max_processes)
        self.networks = NetworkCache(settings.max_networks)
        self.network_history = NetworkHistory(settings.network_history_size)
        self.navigator = DirectoryNavigator(
            start_directory,
            cursor=self.selection.cursor(Panel.FILE_EXPLORER),
            history_size=settings.directory_history_size,
            max_files=settings.max_files,
            name_max_len=settings.file_name_max_len,
        )
        self.scheduler = RefreshScheduler(
            self.refresh,
            update_interval=settings.update_interval,
            cooldown=settings.manual_refresh_cooldown,
        )
        self.should_quit = False
        self.show_help = False
        self.modal: ModalData | None = None
        self.notice: str | None = None
        self._clock = now
        self.scheduler.tick(now)

    @property
    def focused_panel(self) -> Panel:
        return self.selection.focused

    @property
    def selected_process(self) -> int:
        return self.selection.cursor(Panel.PROCESS_MANAGER).position

    @property
    def selected_network(self) -> int:
        return self.selection.cursor(Panel.NETWORK_GRAPH).position

    def refresh(self) -> None:
        """Query the provider, rebuild caches and feed the network history."""
        self.provider.refresh()
        self.processes.rebuild(self.provider.processes())
        self.networks.rebuild(self.provider.network_interfaces())
        self.selection.cursor(Panel.PROCESS_MANAGER).clamp(len(self.processes))
        self._feed_network_history()

    def _feed_network_history(self) -> None:
        interfaces = self.networks.items
        if not interfaces:
            return
        cursor = self.selection.cursor(Panel.NETWORK_GRAPH)
        tracked = self.networks.find(self.network_history.current_interface)
        if tracked is None:
            cursor.clamp(len(interfaces))
            tracked = interfaces[cursor.position]
        else:
            # Interfaces may have been reordered since the last refresh
            cursor.position = interfaces.index(tracked)
        self.network_history.select_interface(tracked.name)
        self.network_history.ingest(tracked.total_received, tracked.total_transmitted)

    def tick(self, now: float) -> bool:
        """Advance the periodic refresh timer. Returns True if data changed."""
        self._clock = now
        return self.scheduler.tick(now)

    def handle(self, command: Command, now: float | None = None) -> None:
        """Apply one user command."""
        if now is not None:
            self._clock = now
        self.notice = None

        if self.show_help:
            if command in (Command.TOGGLE_HELP, Command.QUIT):
                self.show_help = False
            return

        if command is Command.QUIT:
            if self.modal is not None:
                self.modal = None
            else:
                self.should_quit = True
        elif command is Command.PANEL_NEXT:
            self.selection.focus_next()
        elif command is Command.PANEL_PREV:
            self.selection.focus_previous()
        elif command in (
            Command.CURSOR_UP,
            Command.CURSOR_DOWN,
            Command.PAGE_UP,
            Command.PAGE_DOWN,
            Command.CURSOR_HOME,
            Command.CURSOR_END,
        ):
            self._move_cursor(command)
        elif command is Command.ACTIVATE:
            if self.focused_panel is Panel.FILE_EXPLORER:
                self.navigator.navigate_into_selected()
                self._check_navigation()
        elif command is Command.MANUAL_REFRESH:
            self._manual_refresh()
        elif command is Command.GO_BACK:
            if self.focused_panel is Panel.FILE_EXPLORER:
                self.navigator.go_back()
                self._check_navigation()
        elif command is Command.GO_UP:
            if self.focused_panel is Panel.FILE_EXPLORER:
                self.navigator.go_up()
                self._check_navigation()
        elif command is Command.TOGGLE_HELP:
            self.show_help = True
        elif command is Command.TOGGLE_DETAIL_MODAL:
            if self.modal is not None:
                self.modal = None
            else:
                self.modal = self._build_modal()

    def _list_length(self, panel: Panel) -> int:
        if panel is Panel.PROCESS_MANAGER:
            return len(self.processes)
        if panel is Panel.FILE_EXPLORER:
            return len(self.navigator.entries)
        return 0

    def _move_cursor(self, command: Command) -> None:
        panel = self.focused_panel
        if panel is Panel.NETWORK_GRAPH:
            if command in (Command.CURSOR_UP, Command.CURSOR_DOWN):
                self._cycle_interface(-1 if command is Command.CURSOR_UP else 1)
            return
        if panel not in (Panel.PROCESS_MANAGER, Panel.FILE_EXPLORER):
            return

        cursor = self.selection.cursor(panel)
        length = self._list_length(panel)
        page = self.settings.page_size
        if command is Command.CURSOR_UP:
            cursor.move_by(-1, length)
        elif command is Command.CURSOR_DOWN:
            cursor.move_by(1, length)
        elif command is Command.PAGE_UP:
            cursor.move_by(-page, length)
        elif command is Command.PAGE_DOWN:
            cursor.move_by(page, length)
        elif command is Command.CURSOR_HOME:
            cursor.home()
        elif command is Command.CURSOR_END:
            cursor.end(length)

    def _cycle_interface(self, delta: int) -> None:
        interfaces = self.networks.items
        if not interfaces:
            return
        cursor = self.selection.cursor(Panel.NETWORK_GRAPH)
        cursor.cycle(delta, len(interfaces))
        # Switching interfaces starts a fresh graph
        self.network_history.clear()
        self.network_history.select_interface(interfaces[cursor.position].name)

    def _manual_refresh(self) -> None:
        if not self.scheduler.manual_refresh(self._clock):
            return
        if self.focused_panel is Panel.FILE_EXPLORER:
            self.navigator.reload()
            self._check_navigation()

    def _check_navigation(self) -> None:
        """Surface a notice when the explorer is left stuck or showing an error."""
        entry = self.navigator.selected_entry()
        if self.navigator.stranded or (entry is not None and entry.kind is EntryKind.ERROR):
            self.notice = f"Cannot read {self.navigator.current_directory}"

    def _build_modal(self) -> ModalData | None:
        panel = self.focused_panel
        if panel is Panel.PROCESS_MANAGER:
            return self._process_modal()
        if panel is Panel.NETWORK_GRAPH:
            return self._network_modal()
        if panel is Panel.FILE_EXPLORER:
            return self._file_modal()
        return self.provider.host_info()

    def _process_modal(self) -> ProcessDetails | None:
        items = self.processes.items
        if not items:
            return None
        proc = items[min(self.selected_process, len(items) - 1)]
        details = self.provider.process_details(proc.pid)
        if details is None:
            return None
        status, command_line = details
        return ProcessDetails(
            name=proc.name,
            pid=proc.pid,
            cpu_usage=proc.cpu_usage,
            memory=proc.memory,
            status=status,
            command_line=command_line,
        )

    def _network_modal(self) -> NetworkDetails | None:
        items = self.networks.items
        if not items:
            return None
        iface = items[min(self.selected_network, len(items) - 1)]
        rx_rate, tx_rate = self.network_history.latest_rates()
        return NetworkDetails(
            name=iface.name,
            total_received=iface.total_received,
            total_transmitted=iface.total_transmitted,
            received_rate=rx_rate,
            transmitted_rate=tx_rate,
        )

    def _file_modal(self) -> DiskInfo | FileDetails | None:
        entry = self.navigator.selected_entry()
        if entry is None or entry.kind in (EntryKind.PARENT, EntryKind.ERROR):
            return None

        if entry.kind is EntryKind.DIRECTORY:
            for disk in self.provider.disks():
                if Path(disk.mount_point) == entry.path:
                    return disk

        try:
            info = entry.path.stat()
        except OSError as exc:
            logger.warning("Failed to stat %s: %s", entry.path, exc)
            return None
        return FileDetails(
            name=entry.path.name,
            is_dir=stat.S_ISDIR(info.st_mode),
            size=info.st_size,
            permissions=f"{stat.S_IMODE(info.st_mode) & 0o777:o}",
            path=str(entry.path),
        )
