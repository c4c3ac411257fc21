"""Panel focus and per-panel cursor positions."""

from enum import Enum


class Panel(Enum):
    """Focusable panels, in focus-cycle order."""

    SYSTEM_MONITOR = "System Monitor"
    SYSTEM_STATUS = "System Status"
    PROCESS_MANAGER = "Process Manager"
    FILE_EXPLORER = "File Explorer"
    NETWORK_GRAPH = "Network Graph"

    @property
    def ordinal(self) -> int:
        return list(Panel).index(self)

    def next(self) -> "Panel":
        """Return the panel after this one, wrapping around."""
        panels = list(Panel)
        return panels[(self.ordinal + 1) % len(panels)]

    def previous(self) -> "Panel":
        """Return the panel before this one, wrapping around."""
        panels = list(Panel)
        return panels[(self.ordinal - 1) % len(panels)]


class Cursor:
    """Row position within a list whose length changes between refreshes."""

    def __init__(self, position: int = 0) -> None:
        self.position = max(0, position)

    def move_by(self, delta: int, length: int) -> None:
        """Move by delta rows, clamped to [0, length - 1]."""
        self.position = min(max(0, self.position + delta), max(0, length - 1))

    def home(self) -> None:
        self.position = 0

    def end(self, length: int) -> None:
        if length > 0:
            self.position = length - 1

    def clamp(self, length: int) -> None:
        """Pull the cursor back inside a list that may have shrunk."""
        self.position = min(self.position, max(0, length - 1))

    def cycle(self, delta: int, length: int) -> None:
        """Move by delta rows, wrapping at both ends."""
        if length > 0:
            self.position = (self.position + delta) % length


class PanelSelection:
    """The focused panel plus one cursor per panel."""

    def __init__(self, focused: Panel = Panel.SYSTEM_MONITOR) -> None:
        self.focused = focused
        self._cursors = {panel: Cursor() for panel in Panel}

    def cursor(self, panel: Panel) -> Cursor:
        return self._cursors[panel]

    @property
    def focused_cursor(self) -> Cursor:
        return self._cursors[self.focused]

    def focus_next(self) -> Panel:
        self.focused = self.focused.next()
        return self.focused

    def focus_previous(self) -> Panel:
        self.focused = self.focused.previous()
        return self.focused
