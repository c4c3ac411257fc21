"""Directory navigation with automatic recovery from unreadable paths."""

import logging
import os
from collections import deque
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from gribble.formatting import truncate
from gribble.panels import Cursor

logger = logging.getLogger(__name__)

PARENT_LABEL = ".."
RETRY_HINT = "<Press 'r' to retry>"


class EntryKind(Enum):
    """What a listing row stands for."""

    PARENT = "parent"
    DIRECTORY = "directory"
    FILE = "file"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class ListingEntry:
    """One row of a directory listing."""

    label: str
    path: Path
    kind: EntryKind


@dataclass(slots=True, frozen=True)
class Listing:
    """Successful enumeration of a directory."""

    path: Path
    entries: tuple[ListingEntry, ...]


@dataclass(slots=True, frozen=True)
class ReadError:
    """Failed enumeration of a directory."""

    path: Path
    reason: str

    def placeholder(self) -> tuple[ListingEntry, ...]:
        """Rows shown in place of a listing: the failure and a retry hint."""
        return (
            ListingEntry(f"<Error: {self.reason}>", self.path, EntryKind.ERROR),
            ListingEntry(RETRY_HINT, self.path, EntryKind.ERROR),
        )


def list_directory(path: Path, max_files: int = 10000, name_max_len: int = 40) -> Listing | ReadError:
    """
    Enumerate a directory into display order.

    Reads at most ``max_files`` entries. Directories come first, then files,
    each group sorted by label. A ".." row pointing at the parent (or at
    ``path`` itself for the root) is prepended.
    """
    dirs: list[ListingEntry] = []
    files: list[ListingEntry] = []
    try:
        with os.scandir(path) as it:
            for entry in it:
                if len(dirs) + len(files) >= max_files:
                    break
                label = truncate(entry.name, name_max_len)
                entry_path = path / entry.name
                try:
                    is_dir = entry.is_dir()  # follows symlinks
                except OSError:
                    is_dir = False
                if is_dir:
                    dirs.append(ListingEntry(label, entry_path, EntryKind.DIRECTORY))
                else:
                    files.append(ListingEntry(label, entry_path, EntryKind.FILE))
    except OSError as exc:
        reason = exc.strerror or str(exc)
        logger.error("Failed to read directory %s: %s", path, reason)
        return ReadError(path, reason)

    dirs.sort(key=lambda e: e.label)
    files.sort(key=lambda e: e.label)
    parent = ListingEntry(PARENT_LABEL, path.parent, EntryKind.PARENT)
    return Listing(path, (parent, *dirs, *files))


def _home_directory() -> Path | None:
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


class DirectoryNavigator:
    """
    File explorer state: the directory being viewed and how to get back.

    Failed navigation never changes state. Callers pair a rejected
    ``navigate`` with ``recover``, which walks a fixed list of fallbacks
    until one of them lists successfully.
    """

    def __init__(
        self,
        start: Path | None = None,
        *,
        cursor: Cursor | None = None,
        history_size: int = 20,
        max_files: int = 10000,
        name_max_len: int = 40,
        home: Path | None = None,
    ) -> None:
        """
        Initialize the DirectoryNavigator and list the start directory.

        Args:
            start: Directory to view first. Defaults to the working directory.
            cursor: Selection cursor, shared with the panel selection.
            history_size: Distinct directories remembered for go_back.
            max_files: Entries read per directory.
            name_max_len: Label budget before truncation.
            home: Override for the home-directory fallback.
        """
        self._max_files = max_files
        self._name_max_len = name_max_len
        self._home = home
        self.cursor = cursor if cursor is not None else Cursor()

        try:
            startup = Path.cwd()
        except OSError as exc:
            logger.warning("Failed to get current directory: %s, using '.'", exc)
            startup = Path(".")
        self.startup_directory = startup
        self.current_directory = Path(start).absolute() if start is not None else startup
        self.last_successful_directory = self.current_directory
        self.history: deque[Path] = deque([self.current_directory], maxlen=history_size)
        self.stranded = False
        self.listing: Listing | ReadError = self.list(self.current_directory)

    @property
    def entries(self) -> tuple[ListingEntry, ...]:
        """Rows to render, with a placeholder when the listing failed."""
        if isinstance(self.listing, ReadError):
            return self.listing.placeholder()
        return self.listing.entries

    @property
    def selected(self) -> int:
        return self.cursor.position

    def selected_entry(self) -> ListingEntry | None:
        entries = self.entries
        if 0 <= self.cursor.position < len(entries):
            return entries[self.cursor.position]
        return None

    def list(self, path: Path) -> Listing | ReadError:
        return list_directory(path, self._max_files, self._name_max_len)

    def navigate(self, target: Path) -> bool:
        """Switch to ``target`` if it lists; leave state untouched otherwise."""
        result = self.list(target)
        if isinstance(result, ReadError):
            logger.warning("Failed to navigate to directory: %s", target)
            return False

        self.current_directory = target
        self.listing = result
        self.cursor.home()
        if target not in self.history:
            self.history.append(target)
        self.last_successful_directory = target
        self.stranded = False
        return True

    def recover(self) -> bool:
        """
        Move to the first readable fallback directory.

        Tries the last successful directory, the parent, the home directory
        and the startup directory, in that order. Returns False and keeps
        the current state when all of them fail.
        """
        candidates: list[tuple[str, Path | None]] = []
        if self.last_successful_directory != self.current_directory:
            candidates.append(("safe", self.last_successful_directory))
        if self.current_directory.parent != self.current_directory:
            candidates.append(("parent", self.current_directory.parent))
        candidates.append(("home", self._home if self._home is not None else _home_directory()))
        candidates.append(("startup", self.startup_directory))

        for kind, path in candidates:
            if path is not None and self.navigate(path):
                logger.info("Recovered to %s directory: %s", kind, path)
                return True

        logger.error("Unable to recover from directory navigation error at %s", self.current_directory)
        self.stranded = True
        return False

    def navigate_into_selected(self, index: int | None = None) -> None:
        """Act on a listing row: enter directories, recover from error rows."""
        entries = self.entries
        if index is None:
            index = self.cursor.position
        if not 0 <= index < len(entries):
            return

        entry = entries[index]
        if entry.kind is EntryKind.ERROR:
            logger.warning("Attempting to navigate to error state, attempting recovery")
            self.recover()
        elif entry.kind in (EntryKind.PARENT, EntryKind.DIRECTORY):
            if not self.navigate(entry.path):
                self.recover()
        # Files are not opened

    def go_back(self) -> None:
        """Return to the directory visited before the current one."""
        try:
            index = self.history.index(self.current_directory)
        except ValueError:
            return
        if index > 0 and not self.navigate(self.history[index - 1]):
            self.recover()

    def go_up(self) -> None:
        if not self.navigate(self.current_directory.parent):
            self.recover()

    def reload(self) -> None:
        """Re-list the current directory, recovering if it became unreadable."""
        if not self.navigate(self.current_directory):
            self.recover()
