"""
Configuration loader and helpers for the archive export tool.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATH = Path("config.yaml")
ENV_CONFIG_PATH = "ELO_EXPORT_CONFIG"


@dataclass(frozen=True)
class AppConfig:
    """Container for raw configuration data and path helpers."""

    root_dir: Path
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path | None = None) -> "AppConfig":
        """Load configuration from YAML and normalize the root directory."""
        config_path = _config_path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")
        return cls(root_dir=config_path.parent, raw=data)

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """Load an explicit config, or fall back to defaults when none is present."""
        if path is None and not os.environ.get(ENV_CONFIG_PATH):
            if not _config_path(None).exists():
                return cls.empty()
        return cls.load(path)

    @classmethod
    def empty(cls) -> "AppConfig":
        return cls(root_dir=Path.cwd(), raw={})

    def get(self, *keys: str, default: Any = None) -> Any:
        """Retrieve nested configuration values with an optional default."""
        node: Any = self.raw
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def resolve_path(self, *keys: str, default: str | None = None) -> Path:
        """Resolve a path from configuration keys to an absolute Path."""
        value = self.get(*keys, default=default)
        if value is None:
            raise KeyError(f"Missing config path for {'.'.join(keys)}")
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = (self.root_dir / path).resolve()
        return path


def _config_path(path: Path | None) -> Path:
    config_value = os.environ.get(ENV_CONFIG_PATH)
    config_path = path
    if config_path is None:
        config_path = Path(config_value) if config_value else DEFAULT_CONFIG_PATH
    config_path = config_path.expanduser()
    if not config_path.is_absolute():
        config_path = (Path.cwd() / config_path).resolve()
    return config_path
