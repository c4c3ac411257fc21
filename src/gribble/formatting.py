"""Human-readable formatting helpers used by the panels."""

from pathlib import Path


def format_memory_size(size: int) -> str:
    """Format a byte count as MB, or GB once it reaches 1 GiB."""
    mb = size // 1024 // 1024
    if mb >= 1024:
        return f"{mb / 1024:.1f} GB"
    return f"{mb} MB"


def format_network_size(size: int) -> str:
    """Format a cumulative byte counter as KB, MB or GB."""
    kb = size // 1024
    if kb < 1024:
        return f"{kb} KB"
    if kb < 1024 * 1024:
        return f"{kb // 1024} MB"
    return f"{kb / (1024 * 1024):.1f} GB"


def format_network_rate(bytes_per_second: int) -> str:
    """Format a transfer rate as KB/s or MB/s."""
    kb_per_sec = bytes_per_second // 1024
    if kb_per_sec >= 1024:
        return f"{kb_per_sec / 1024:.1f} MB/s"
    return f"{kb_per_sec} KB/s"


def truncate(text: str, max_len: int) -> str:
    """Shorten text to max_len characters, ending with an ellipsis."""
    if len(text) <= max_len:
        return text
    if max_len < 3:
        return text[: max(0, max_len)]
    return text[: max_len - 3] + "..."


def format_path_display(path: Path, home: Path | None = None) -> str:
    """Show a path with the home directory abbreviated to ~."""
    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError):
            return str(path)
    try:
        relative = path.relative_to(home)
    except ValueError:
        return str(path)
    if relative == Path("."):
        return "~"
    return f"~/{relative}"


def format_uptime(seconds: float) -> str:
    """Format uptime like 'Xd HH:MM:SS', dropping the day part when zero."""
    days = int(seconds // 86400)
    hours = int((seconds % 86400) // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if days > 0:
        return f"{days}d {hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
