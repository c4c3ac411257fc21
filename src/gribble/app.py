"""gribble - Main Textual application."""

import argparse
import getpass
import logging
import platform
import socket
import sys
import time
from datetime import datetime
from pathlib import Path

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Sparkline, Static

from gribble.config import DEFAULT_SETTINGS, Settings, dump_default_config, home_path, load_settings
from gribble.formatting import (
    format_memory_size,
    format_network_rate,
    format_network_size,
    format_path_display,
    format_uptime,
    truncate,
)
from gribble.models import DiskInfo, FileDetails, HostInfo, NetworkDetails, ProcessDetails
from gribble.monitor import TelemetryProvider
from gribble.navigation import EntryKind
from gribble.panels import Panel
from gribble.state import AppState, Command, ModalData

logger = logging.getLogger(__name__)

_DEFAULT_LOG_FILE = home_path(".cache", "gribble", "gribble.log")

HELP_TEXT = """\
[b]GRIBBLE - HELP[/b]

NAVIGATION:
  ← → h l     Switch between panels
  ↑ ↓ j k     Move within lists / cycle network interfaces
  PgUp/PgDn   Jump by page in lists
  Home/End    Jump to first/last item in lists
  Enter       Open directory (File Explorer)
  Backspace   Go up one directory (File Explorer)
  b           Go back in directory history (File Explorer)
  r           Refresh all data
  i           Show/hide details for the selected item
  ?           Show/hide this help
  q / Esc     Quit

PANELS:
  1. System Monitor   CPU, memory, uptime, architecture
  2. System Status    Time, disk usage, network totals
  3. Process Manager  Top processes by CPU
  4. File Explorer    Directory navigation
  5. Network Graph    Traffic for the selected interface

Press ?, q or Esc to close this help; other keys are ignored while it is open."""


def usage_bar(percent: float, width: int = 10) -> str:
    """Render a fixed-width block bar for a 0-100 percentage."""
    blocks = min(max(int(percent / (100 / width)), 0), width)
    return "█" * blocks + " " * (width - blocks)


def visible_window(length: int, cursor: int, rows: int) -> range:
    """Indices of the rows to draw so that the cursor stays on screen."""
    rows = max(1, rows)
    start = max(0, min(cursor - rows + 1, length - rows))
    start = max(0, min(start, cursor))
    return range(start, min(length, start + rows))


def describe_modal(data: ModalData, update_interval: float = 2.0) -> tuple[str, str]:
    """Return (title, body) text for a details modal."""
    if isinstance(data, ProcessDetails):
        return f"Process Details: {data.name}", (
            f"PID: {data.pid}\n"
            f"CPU Usage: {data.cpu_usage:.1f}%\n"
            f"Memory Usage: {format_memory_size(data.memory)}\n"
            f"Status: {data.status}\n"
            f"Command: {data.command_line}"
        )
    if isinstance(data, NetworkDetails):
        return f"Network Details: {data.name}", (
            f"Total Received: {format_network_size(data.total_received)}\n"
            f"Total Transmitted: {format_network_size(data.total_transmitted)}\n"
            f"Current RX Rate: {format_network_rate(int(data.received_rate / update_interval))}\n"
            f"Current TX Rate: {format_network_rate(int(data.transmitted_rate / update_interval))}"
        )
    if isinstance(data, HostInfo):
        return "System Details", (
            f"Hostname: {data.hostname}\n"
            f"OS: {data.os_name} {data.os_version}\n"
            f"Kernel: {data.kernel_version}\n"
            f"CPU Count: {data.cpu_count}\n"
            f"Total Memory: {format_memory_size(data.total_memory)}\n"
            f"Uptime: {format_uptime(data.uptime_seconds)}\n"
            f"Load average: {data.load_avg[0]:.2f} {data.load_avg[1]:.2f} {data.load_avg[2]:.2f}"
        )
    if isinstance(data, DiskInfo):
        return f"Disk Details: {data.name}", (
            f"Mount Point: {data.mount_point}\n"
            f"File System: {data.file_system}\n"
            f"Total Space: {format_memory_size(data.total_space)}\n"
            f"Used Space: {format_memory_size(data.used_space)}\n"
            f"Available Space: {format_memory_size(data.available_space)}\n"
            f"Usage: {data.usage_percent:.1f}%"
        )
    if isinstance(data, FileDetails):
        size = "N/A" if data.is_dir else format_memory_size(data.size)
        return f"File Info: {data.name}", (
            f"Name: {data.name}\n"
            f"Type: {'Directory' if data.is_dir else 'File'}\n"
            f"Size: {size}\n"
            f"Permissions: {data.permissions}\n"
            f"Path: {data.path}"
        )
    raise TypeError(f"unsupported modal data: {type(data).__name__}")


class DashboardPanel(Static):
    """Bordered panel whose content is redrawn from the application state."""

    DEFAULT_CSS = """
    DashboardPanel {
        height: 1fr;
        width: 1fr;
        padding: 0 1;
        border: round $panel-lighten-2;
    }

    DashboardPanel.-focused {
        border: round $warning;
    }
    """

    PANEL: Panel = Panel.SYSTEM_MONITOR

    def show_state(self, state: AppState) -> None:
        """Redraw from the current state."""
        self.set_class(state.focused_panel is self.PANEL, "-focused")
        self.border_title = self.panel_title(state)
        self.update(self.body(state))

    def panel_title(self, state: AppState) -> str:
        return self.PANEL.value

    def body(self, state: AppState) -> str:
        return ""

    def _rows(self) -> int:
        # Border takes two rows; before the first layout pass the size is 0
        height = self.size.height - 2
        return height if height > 0 else 20


class SystemMonitorPanel(DashboardPanel):
    """CPU, memory and uptime summary."""

    PANEL = Panel.SYSTEM_MONITOR

    def body(self, state: AppState) -> str:
        snapshot = state.provider.snapshot
        mem_percent = (
            snapshot.memory_used / snapshot.memory_total * 100.0 if snapshot.memory_total else 0.0
        )
        host = state.provider.host_info()
        return (
            f"▶ CPU: {snapshot.cpu_percent:5.1f}% \\[{usage_bar(snapshot.cpu_percent)}]\n"
            f"▶ RAM: {mem_percent:5.1f}% \\[{usage_bar(mem_percent)}]\n"
            f"▶ Memory: {format_memory_size(snapshot.memory_used)} / "
            f"{format_memory_size(snapshot.memory_total)}\n"
            f"▶ Processes: {len(snapshot.processes)}\n"
            f"▶ Uptime: {format_uptime(host.uptime_seconds)}\n"
            f"▶ OS: {escape(host.os_name)}\n"
            f"▶ Architecture: {platform.machine() or 'unknown'}"
        )


class SystemStatusPanel(DashboardPanel):
    """Clock, boot disk usage and network totals."""

    PANEL = Panel.SYSTEM_STATUS

    def body(self, state: AppState) -> str:
        now = datetime.now()
        disks = state.provider.disks()
        if disks:
            disk = disks[0]
            disk_line = (
                f"▶ Boot disk: {format_memory_size(disk.used_space)} / "
                f"{format_memory_size(disk.total_space)}\n"
                f"▶ Disk usage: {disk.usage_percent:.1f}%"
            )
        else:
            disk_line = "▶ Boot disk: 0 MB / 0 MB\n▶ Disk usage: 0.0%"

        interfaces = state.networks.items
        if interfaces:
            iface = interfaces[min(state.selected_network, len(interfaces) - 1)]
            name = truncate(iface.name, state.settings.interface_name_max_len)
            network_line = (
                f"  {escape(name)}: ↓{format_network_size(iface.total_received)} "
                f"↑{format_network_size(iface.total_transmitted)}"
            )
        else:
            network_line = "  No network data"

        load = state.provider.host_info().load_avg[0]
        return (
            f"▶ Time: {now:%H:%M:%S}\n"
            f"▶ Date: {now:%A, %B %d}\n"
            f"{disk_line}\n\n"
            f"▶ Network:\n{network_line}\n\n"
            f"▶ Load avg: {load:.2f}"
        )


class ProcessPanel(DashboardPanel):
    """Processes sorted by CPU usage."""

    PANEL = Panel.PROCESS_MANAGER

    def body(self, state: AppState) -> str:
        items = state.processes.items
        if not items:
            return "No process data"
        focused = state.focused_panel is self.PANEL
        lines = []
        for i in visible_window(len(items), state.selected_process, self._rows()):
            proc = items[i]
            name = escape(truncate(proc.name, state.settings.process_name_max_len))
            line = f"{proc.cpu_usage:5.1f}% │ {format_memory_size(proc.memory):>8} │ {name}"
            if focused and i == state.selected_process:
                line = f"[reverse]{line}[/reverse]"
            lines.append(line)
        return "\n".join(lines)


class FilePanel(DashboardPanel):
    """Directory listing for the file explorer."""

    PANEL = Panel.FILE_EXPLORER

    _ICONS = {
        EntryKind.PARENT: "",
        EntryKind.DIRECTORY: "📁 ",
        EntryKind.FILE: "📄 ",
        EntryKind.ERROR: "",
    }

    def panel_title(self, state: AppState) -> str:
        return f"📂 Explorer: {format_path_display(state.navigator.current_directory)}"

    def body(self, state: AppState) -> str:
        entries = state.navigator.entries
        selected = state.navigator.selected
        focused = state.focused_panel is self.PANEL
        lines = []
        for i in visible_window(len(entries), selected, self._rows()):
            entry = entries[i]
            line = escape(f"{self._ICONS[entry.kind]}{entry.label}")
            if entry.kind is EntryKind.ERROR:
                line = f"[red]{line}[/red]"
            if focused and i == selected:
                line = f"[reverse]{line}[/reverse]"
            lines.append(line)
        return "\n".join(lines)


class NetworkPanel(Vertical):
    """Receive and transmit rate graphs for the tracked interface."""

    DEFAULT_CSS = """
    NetworkPanel {
        height: 6fr;
        border: round $panel-lighten-2;
    }

    NetworkPanel.-focused {
        border: round $warning;
    }

    NetworkPanel Horizontal {
        height: 1fr;
    }

    NetworkPanel .graph-label {
        width: 1fr;
        height: 1;
    }

    NetworkPanel Sparkline {
        width: 1fr;
        height: 1fr;
        margin: 0 1;
    }

    #rx-graph > .sparkline--max-color {
        color: $success;
    }

    #tx-graph > .sparkline--max-color {
        color: $error;
    }
    """

    def compose(self) -> ComposeResult:
        with Horizontal(classes="labels"):
            yield Static(id="rx-label", classes="graph-label")
            yield Static(id="tx-label", classes="graph-label")
        with Horizontal():
            yield Sparkline([], summary_function=max, id="rx-graph")
            yield Sparkline([], summary_function=max, id="tx-graph")

    def show_state(self, state: AppState) -> None:
        """Redraw from the current state."""
        history = state.network_history
        self.set_class(state.focused_panel is Panel.NETWORK_GRAPH, "-focused")

        name = truncate(history.current_interface, state.settings.interface_name_max_len)
        count = len(state.networks)
        if count > 1:
            self.border_title = (
                f"📡 Network Traffic Monitor - {name} ({state.selected_network + 1}/{count}) "
                "\\[↑↓ to cycle]"
            )
        else:
            self.border_title = f"📡 Network Traffic Monitor - {name}"

        interval = state.settings.update_interval
        rx_rate, tx_rate = history.latest_rates()
        total_rx = history.rx_history[-1] if history.rx_history else 0
        total_tx = history.tx_history[-1] if history.tx_history else 0
        self.query_one("#rx-label", Static).update(
            f"[green]RX: {format_network_rate(int(rx_rate / interval))} | "
            f"Total: {format_network_size(total_rx)}[/green]"
        )
        self.query_one("#tx-label", Static).update(
            f"[red]TX: {format_network_rate(int(tx_rate / interval))} | "
            f"Total: {format_network_size(total_tx)}[/red]"
        )
        self.query_one("#rx-graph", Sparkline).data = list(history.rx_rates)
        self.query_one("#tx-graph", Sparkline).data = list(history.tx_rates)


class GribbleApp(App):
    """Main gribble application."""

    TITLE = "gribble"
    SUB_TITLE = "System Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #header {
        height: 3;
        border: round $success;
        color: $success;
        text-style: bold;
        padding: 0 1;
    }

    #dashboard {
        height: 1fr;
    }

    #dashboard > Horizontal {
        height: 7fr;
    }

    #help {
        display: none;
        height: 1fr;
        border: round $warning;
        padding: 1 2;
    }

    #modal {
        display: none;
        dock: bottom;
        height: auto;
        max-height: 60%;
        border: double $accent;
        background: $surface;
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("q,escape", "command('quit')", "Quit", priority=True),
        Binding("left,h", "command('panel_prev')", "Panel", show=False, priority=True),
        Binding("right,l", "command('panel_next')", "Panel", show=False, priority=True),
        Binding("up,k", "command('cursor_up')", "Up", show=False, priority=True),
        Binding("down,j", "command('cursor_down')", "Down", show=False, priority=True),
        Binding("pageup", "command('page_up')", "Page up", show=False, priority=True),
        Binding("pagedown", "command('page_down')", "Page down", show=False, priority=True),
        Binding("home", "command('cursor_home')", "First", show=False, priority=True),
        Binding("end", "command('cursor_end')", "Last", show=False, priority=True),
        Binding("enter", "command('activate')", "Open", show=False, priority=True),
        Binding("r", "command('manual_refresh')", "Refresh", priority=True),
        Binding("b", "command('go_back')", "Back", show=False, priority=True),
        Binding("backspace", "command('go_up')", "Up dir", show=False, priority=True),
        Binding("question_mark", "command('toggle_help')", "Help", priority=True),
        Binding("i", "command('toggle_detail_modal')", "Details", priority=True),
    ]

    def __init__(
        self,
        settings: Settings = DEFAULT_SETTINGS,
        provider: TelemetryProvider | None = None,
        start_directory: Path | None = None,
    ) -> None:
        """Initialize the GribbleApp."""
        super().__init__()
        self._settings = settings
        self._state = AppState(
            provider if provider is not None else TelemetryProvider(),
            settings,
            start_directory=start_directory,
            now=time.monotonic(),
        )

    @property
    def state(self) -> AppState:
        return self._state

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(self._header_text(), id="header")
        with Vertical(id="dashboard"):
            with Horizontal():
                yield SystemMonitorPanel(id="system-monitor")
                yield SystemStatusPanel(id="system-status")
            with Horizontal():
                yield ProcessPanel(id="process-panel")
                yield FilePanel(id="file-panel")
            yield NetworkPanel(id="network-panel")
        yield Static(HELP_TEXT, id="help")
        yield Static(id="modal")
        yield Footer()

    def on_mount(self) -> None:
        """Draw the first frame and start the refresh timer."""
        self._render_state()
        self.set_interval(self._settings.tick_interval, self._on_tick)

    def _header_text(self) -> str:
        try:
            user = getpass.getuser()
        except (KeyError, OSError):
            user = "unknown-user"
        return escape(f"{user.upper()}@{socket.gethostname()} :: SYSTEM MONITOR")

    def _on_tick(self) -> None:
        if self._state.tick(time.monotonic()):
            self._render_state()

    def action_command(self, name: str) -> None:
        """Forward a key binding to the application state."""
        self._state.handle(Command(name), now=time.monotonic())
        if self._state.should_quit:
            self.exit()
            return
        if self._state.notice:
            self.notify(self._state.notice, severity="warning")
        self._render_state()

    def _render_state(self) -> None:
        state = self._state
        self.query_one("#dashboard").display = not state.show_help
        self.query_one("#help").display = state.show_help

        for panel in self.query(DashboardPanel):
            panel.show_state(state)
        self.query_one(NetworkPanel).show_state(state)

        modal = self.query_one("#modal", Static)
        if state.modal is not None:
            title, body = describe_modal(state.modal, state.settings.update_interval)
            modal.border_title = title
            modal.update(escape(body))
            modal.display = True
        else:
            modal.display = False


def setup_logging(log_file: Path | None, debug: bool = False) -> None:
    """Send log records to a file; the terminal belongs to the UI."""
    path = log_file if log_file is not None else _DEFAULT_LOG_FILE
    level = logging.DEBUG if debug else logging.INFO
    handler: logging.Handler
    if path is None:
        handler = logging.NullHandler()
    else:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(path, encoding="utf-8")
        except OSError as exc:
            print(f"gribble: warning: cannot open log file {path}: {exc}", file=sys.stderr)
            handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gribble", description="Terminal system monitor")
    parser.add_argument("--config", type=Path, default=None, help="path to a TOML config file")
    parser.add_argument("--log-file", type=Path, default=None, help=f"log file (default {_DEFAULT_LOG_FILE})")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument("--dump-config", action="store_true", help="print the default config and exit")
    parser.add_argument("directory", nargs="?", type=Path, default=None, help="directory to open in the explorer")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for gribble application."""
    args = build_parser().parse_args(argv)
    if args.dump_config:
        print(dump_default_config(), end="")
        return

    setup_logging(args.log_file, args.debug)
    settings = load_settings(args.config)
    logger.info("Starting gribble")
    app = GribbleApp(settings, start_directory=args.directory)
    app.run()


if __name__ == "__main__":
    main()
