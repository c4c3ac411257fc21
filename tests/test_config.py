"""Tests for gribble.config."""

from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

import gribble.config as config_module
from gribble.config import DEFAULT_SETTINGS, Settings, dump_default_config, home_path, load_settings
from gribble.scheduler import RefreshScheduler


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the default location at an empty directory."""
    monkeypatch.setattr(config_module, "_DEFAULT_PATH", tmp_path / "missing" / "config.toml")


class TestDefaults:
    def test_defaults_returned_when_no_file(self) -> None:
        settings = load_settings(None)
        assert settings == DEFAULT_SETTINGS
        assert settings.update_interval == 2.0
        assert settings.manual_refresh_cooldown == 0.5
        assert settings.max_processes == 1000
        assert settings.max_networks == 100
        assert settings.max_files == 10000
        assert settings.network_history_size == 60
        assert settings.directory_history_size == 20

    def test_settings_are_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_SETTINGS.update_interval = 1.0  # type: ignore[misc]


class TestTomlOverlay:
    def test_overrides_values(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text("update_interval = 1.0\nmax_processes = 50\n")
        settings = load_settings(toml_file)
        assert settings.update_interval == 1.0
        assert settings.max_processes == 50
        # Other values remain at defaults
        assert settings.page_size == 10

    def test_int_coerced_to_float(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text("update_interval = 5\n")
        settings = load_settings(toml_file)
        assert settings.update_interval == 5.0
        assert isinstance(settings.update_interval, float)

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text('theme = "dark"\npage_size = 20\n')
        settings = load_settings(toml_file)
        assert settings.page_size == 20
        assert not hasattr(settings, "theme")

    def test_invalid_values_ignored(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text('max_files = "lots"\nnetwork_history_size = 0\n')
        settings = load_settings(toml_file)
        assert settings.max_files == 10000
        assert settings.network_history_size == 60

    def test_non_finite_values_ignored(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text("update_interval = nan\nmanual_refresh_cooldown = inf\nmax_files = inf\n")
        settings = load_settings(toml_file)
        assert settings.update_interval == 2.0
        assert settings.manual_refresh_cooldown == 0.5
        assert settings.max_files == 10000

        runs = []
        scheduler = RefreshScheduler(lambda: runs.append(1), update_interval=settings.update_interval)
        for i in range(10):
            scheduler.tick(i * 0.1)
        assert len(runs) == 1


class TestErrors:
    def test_missing_explicit_path_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            load_settings(tmp_path / "nope.toml")
        assert exc_info.value.code == 1

    def test_invalid_toml_exits(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "bad.toml"
        toml_file.write_text("this is not [valid toml\n")
        with pytest.raises(SystemExit) as exc_info:
            load_settings(toml_file)
        assert exc_info.value.code == 1

    def test_invalid_default_file_warns(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        default = tmp_path / "config.toml"
        default.write_text("= broken\n")
        monkeypatch.setattr(config_module, "_DEFAULT_PATH", default)
        settings = load_settings(None)
        assert settings == DEFAULT_SETTINGS
        assert "ignoring invalid config" in capsys.readouterr().err

    def test_undecodable_explicit_file_exits(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_bytes(b"\xff\xfe")
        with pytest.raises(SystemExit) as exc_info:
            load_settings(toml_file)
        assert exc_info.value.code == 1
        assert "cannot load config" in capsys.readouterr().err

    def test_unreadable_explicit_file_exits(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text("page_size = 25\n")

        def deny(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "read_text", deny)
        with pytest.raises(SystemExit) as exc_info:
            load_settings(toml_file)
        assert exc_info.value.code == 1

    def test_undecodable_default_file_warns(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        default = tmp_path / "config.toml"
        default.write_bytes(b"update_interval = 3\n# caf\xe9\n")
        monkeypatch.setattr(config_module, "_DEFAULT_PATH", default)
        assert load_settings(None) == DEFAULT_SETTINGS
        assert "ignoring invalid config" in capsys.readouterr().err

    def test_unreadable_default_file_warns(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        default = tmp_path / "config.toml"
        default.write_text("page_size = 25\n")

        def deny(self, *args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(config_module, "_DEFAULT_PATH", default)
        monkeypatch.setattr(Path, "read_text", deny)
        assert load_settings(None) == DEFAULT_SETTINGS
        assert "ignoring invalid config" in capsys.readouterr().err

    def test_default_location_used(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        default = tmp_path / "config.toml"
        default.write_text("page_size = 25\n")
        monkeypatch.setattr(config_module, "_DEFAULT_PATH", default)
        assert load_settings(None).page_size == 25


class TestDumpDefaultConfig:
    def test_dump_is_valid_toml(self) -> None:
        output = dump_default_config()
        parsed = tomllib.loads(output)
        assert parsed["update_interval"] == 2.0
        assert parsed["max_processes"] == 1000

    def test_dump_roundtrips(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "config.toml"
        toml_file.write_text(dump_default_config())
        assert load_settings(toml_file) == Settings()


class TestHomeless:
    @pytest.fixture
    def no_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail():
            raise RuntimeError("Could not determine home directory.")

        monkeypatch.setattr(Path, "home", staticmethod(fail))

    def test_home_path_none_without_home(self, no_home: None) -> None:
        assert home_path(".config", "gribble") is None

    def test_home_path_joins_parts(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        assert home_path(".cache", "gribble", "gribble.log") == tmp_path / ".cache" / "gribble" / "gribble.log"

    def test_defaults_without_default_location(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(config_module, "_DEFAULT_PATH", None)
        assert load_settings(None) == DEFAULT_SETTINGS
