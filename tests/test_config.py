"""Tests for fintrack.config."""

import stat
from pathlib import Path

import pytest

from fintrack.config import (
    create_default_config,
    get_app_config,
    get_config_path,
    load_config,
    save_config,
)
from fintrack.domain.models import DEFAULT_CATEGORIES


@pytest.fixture(autouse=True)
def xdg_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


class TestConfigFile:
    """Tests for reading and writing the TOML config file."""

    def test_config_path_is_xdg(self, tmp_path: Path) -> None:
        """Should live under XDG_CONFIG_HOME."""
        assert get_config_path() == tmp_path / "config" / "fintrack" / "config.toml"

    def test_create_default_config(self) -> None:
        """Should write defaults with owner-only permissions."""
        create_default_config()

        config = load_config()
        assert config["backend"] == "sqlite"
        assert config["categories"] == list(DEFAULT_CATEGORIES)
        assert stat.S_IMODE(get_config_path().stat().st_mode) == 0o600

    def test_load_missing_raises(self) -> None:
        """Should raise when the file does not exist."""
        with pytest.raises(FileNotFoundError):
            load_config()

    def test_save_and_load(self, tmp_path: Path) -> None:
        """Should round-trip a config dictionary."""
        path = tmp_path / "custom.toml"
        save_config({"backend": "json", "categories": ["A", "B"]}, path)

        assert load_config(path) == {"backend": "json", "categories": ["A", "B"]}


class TestGetAppConfig:
    """Tests for get_app_config."""

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        """Should use defaults when no config file exists."""
        config = get_app_config()

        assert config.backend == "sqlite"
        assert config.data_path == tmp_path / "data" / "fintrack" / "fintrack.db"
        assert config.categories == DEFAULT_CATEGORIES
        assert config.log_level == "WARNING"

    def test_json_backend_default_path(self, tmp_path: Path) -> None:
        """Should pick a .json data file for the JSON backend."""
        path = tmp_path / "c.toml"
        save_config({"backend": "json"}, path)

        assert get_app_config(path).data_path == tmp_path / "data" / "fintrack" / "fintrack.json"

    def test_overrides(self, tmp_path: Path) -> None:
        """Should apply values from the file."""
        path = tmp_path / "c.toml"
        save_config(
            {"data_path": str(tmp_path / "elsewhere.db"), "categories": ["Pets"], "log_level": "DEBUG"},
            path,
        )

        config = get_app_config(path)

        assert config.data_path == tmp_path / "elsewhere.db"
        assert config.categories == ("Pets",)
        assert config.log_level == "DEBUG"

    def test_rejects_unknown_backend(self, tmp_path: Path) -> None:
        """Should reject backends that do not exist."""
        path = tmp_path / "c.toml"
        save_config({"backend": "postgres"}, path)

        with pytest.raises(ValueError):
            get_app_config(path)

    def test_rejects_empty_categories(self, tmp_path: Path) -> None:
        """Should require at least one category."""
        path = tmp_path / "c.toml"
        save_config({"categories": []}, path)

        with pytest.raises(ValueError):
            get_app_config(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Should surface TOML errors as ValueError."""
        path = tmp_path / "c.toml"
        path.write_text("backend = = 'sqlite'")

        with pytest.raises(ValueError):
            get_app_config(path)
