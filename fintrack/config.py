"""Configuration file management for fintrack."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from fintrack.domain.models import DEFAULT_CATEGORIES, CategoryName
from fintrack.store.schema import get_default_data_path

BACKENDS = ("sqlite", "json")


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration."""

    backend: str
    data_path: Path
    categories: tuple[CategoryName, ...]
    log_level: str


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "fintrack" / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the default configuration dictionary."""
    return {
        "backend": "sqlite",
        "categories": list(DEFAULT_CATEGORIES),
        "log_level": "WARNING",
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If config file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def get_app_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration, filling in defaults for missing keys.

    A missing config file yields the defaults.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        AppConfig with every setting resolved.

    Raises:
        ValueError: If the config names an unknown backend or has no categories.
    """
    config = default_config()
    try:
        config.update(load_config(config_path))
    except FileNotFoundError:
        pass

    backend = str(config["backend"])
    if backend not in BACKENDS:
        raise ValueError(f"Unknown backend '{backend}' (expected one of: {', '.join(BACKENDS)})")

    categories = tuple(CategoryName(str(c)) for c in config["categories"])
    if not categories:
        raise ValueError("At least one category must be configured")

    data_path = config.get("data_path")
    path = Path(data_path).expanduser() if data_path else get_default_data_path(backend)

    return AppConfig(
        backend=backend,
        data_path=path,
        categories=categories,
        log_level=str(config["log_level"]),
    )
