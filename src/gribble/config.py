"""Configuration loading for gribble.

Loads settings from a TOML file layered over built-in defaults.
Search order: explicit --config path, then ~/.config/gribble/config.toml,
then defaults only.
"""

from __future__ import annotations

import logging
import math
import sys
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)



def home_path(*parts: str) -> Path | None:
    """Resolve a path under the home directory, or None if there is no home."""
    try:
        return Path.home().joinpath(*parts)
    except (RuntimeError, KeyError):
        return None


_DEFAULT_PATH = home_path(".config", "gribble", "config.toml")


@dataclass(slots=True, frozen=True)
class Settings:
    """Tunable limits and timings for the sampling pipeline."""

    update_interval: float = 2.0  # Seconds between periodic refreshes
    manual_refresh_cooldown: float = 0.5
    tick_interval: float = 0.1  # UI loop cadence
    max_processes: int = 1000
    max_networks: int = 100
    max_files: int = 10000
    network_history_size: int = 60  # ~2 minutes at the default cadence
    directory_history_size: int = 20
    page_size: int = 10
    process_name_max_len: int = 35
    interface_name_max_len: int = 20
    file_name_max_len: int = 40


DEFAULT_SETTINGS = Settings()


def _coerce(overlay: dict[str, Any]) -> dict[str, Any]:
    """Keep known keys, cast to the default's type, drop non-positive or non-finite values."""
    known = {f.name: type(getattr(DEFAULT_SETTINGS, f.name)) for f in fields(Settings)}
    values: dict[str, Any] = {}
    for key, raw in overlay.items():
        kind = known.get(key)
        if kind is None:
            logger.debug("Ignoring unknown config key %r", key)
            continue
        try:
            value = kind(raw)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Ignoring invalid value for %r: %r", key, raw)
            continue
        if not math.isfinite(value) or value <= 0:
            logger.warning("Ignoring non-positive or non-finite value for %r: %r", key, raw)
            continue
        values[key] = value
    return values


def load_settings(path: Path | None = None) -> Settings:
    """Load settings, merging user TOML over defaults.

    Args:
        path: Explicit config file path (from --config). If None, tries the
              default location ~/.config/gribble/config.toml.

    Returns:
        Merged Settings.

    Raises:
        SystemExit: If an explicit path doesn't exist or can't be parsed.
    """
    if path is not None:
        if not path.is_file():
            print(f"gribble: config file not found: {path}", file=sys.stderr)
            raise SystemExit(1)
        try:
            user_config = tomllib.loads(path.read_text(encoding="utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as e:
            print(f"gribble: cannot load config {path}: {e}", file=sys.stderr)
            raise SystemExit(1) from e
        return replace(DEFAULT_SETTINGS, **_coerce(user_config))

    # Try default location silently
    if _DEFAULT_PATH is not None and _DEFAULT_PATH.is_file():
        try:
            user_config = tomllib.loads(_DEFAULT_PATH.read_text(encoding="utf-8"))
            return replace(DEFAULT_SETTINGS, **_coerce(user_config))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as e:
            print(
                f"gribble: warning: ignoring invalid config in {_DEFAULT_PATH}: {e}",
                file=sys.stderr,
            )

    return DEFAULT_SETTINGS


def dump_default_config() -> str:
    """Return the default configuration as a TOML string."""
    lines = [
        "# gribble configuration",
        "# Place this file at ~/.config/gribble/config.toml",
        "",
    ]
    for f in fields(Settings):
        lines.append(f"{f.name} = {getattr(DEFAULT_SETTINGS, f.name)}")
    return "\n".join(lines) + "\n"
