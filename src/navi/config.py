"""Configuration loading from environment variables and navi.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_DATA_DIR = Path.home() / ".navi" / "data"
_CONFIG_FILENAME = "navi.toml"


@dataclass
class StoreConfig:
    """Persistence backend configuration."""

    backend: str = "json"
    data_dir: Path = _DEFAULT_DATA_DIR
    keep_versions: int = 5


@dataclass
class NavigationConfig:
    """Cursor/history behaviour."""

    history_limit: int = 100
    default_space_title: str = "Space 1"


@dataclass
class TemplatesConfig:
    """Journal template catalog configuration."""

    dir: Path | None = None


@dataclass
class NaviConfig:
    """Top-level navi configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> NaviConfig:
    """Load configuration from environment variables and optional navi.toml.

    Priority: environment variables > navi.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.navi/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".navi" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    store_data = file_data.get("store", {})
    nav_data = file_data.get("navigation", {})
    templates_data = file_data.get("templates", {})

    templates_dir = os.getenv("NAVI_TEMPLATES_DIR", templates_data.get("dir"))

    config = NaviConfig(
        store=StoreConfig(
            backend=os.getenv("NAVI_STORE", store_data.get("backend", "json")),
            data_dir=Path(
                os.getenv("NAVI_DATA_DIR", store_data.get("data_dir", str(_DEFAULT_DATA_DIR)))
            ).expanduser(),
            keep_versions=int(store_data.get("keep_versions", 5)),
        ),
        navigation=NavigationConfig(
            history_limit=int(
                os.getenv("NAVI_HISTORY_LIMIT", nav_data.get("history_limit", 100))
            ),
            default_space_title=nav_data.get("default_space_title", "Space 1"),
        ),
        templates=TemplatesConfig(
            dir=Path(templates_dir).expanduser() if templates_dir else None,
        ),
        log_level=os.getenv("NAVI_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
