"""
Configuration
=============

Optional TOML configuration for tuning-check. Files are searched in this order:

1. Path given with --config
2. ./tuning-check.toml
3. ~/.config/tuning-check/config.toml
4. /etc/tuning-check/config.toml

Example:

    [output]
    show_non_ok = true
    color = false

    [report]
    json_path = "/var/log/tuning-check.json"

    [host]
    root = "/"
"""
import copy
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "output": {
        "show_non_ok": False,
        "color": True,
    },
    "report": {
        "json_path": None,
    },
    "host": {
        "root": "/",
    },
}

CONFIG_LOCATIONS = [
    Path("tuning-check.toml"),
    Path("~/.config/tuning-check/config.toml").expanduser(),
    Path("/etc/tuning-check/config.toml"),
]


@dataclass
class Config:
    """Loaded settings, one dict per TOML section."""
    output: Dict[str, Any] = field(default_factory=dict)
    report: Dict[str, Any] = field(default_factory=dict)
    host: Dict[str, Any] = field(default_factory=dict)
    _source: Optional[str] = None

    def get(self, section: str, key: str, default: Any = None) -> Any:
        section_dict = getattr(self, section, {})
        return section_dict.get(key, default)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[str] = None) -> "Config":
        return cls(
            output=data.get("output", {}),
            report=data.get("report", {}),
            host=data.get("host", {}),
            _source=source,
        )


def find_config_file(config_path: Optional[str] = None) -> Optional[Path]:
    if config_path:
        path = Path(config_path)
        if path.exists():
            return path
        logger.warning("Specified config file not found: %s", config_path)
        return None

    for location in CONFIG_LOCATIONS:
        if location.exists():
            return location
    return None


def load_config(config_path: Optional[str] = None) -> Config:
    """Defaults, overlaid section by section with the first config file found."""
    config_data = copy.deepcopy(DEFAULT_CONFIG)

    path = find_config_file(config_path)
    if path is None:
        return Config.from_dict(config_data)

    try:
        with open(path, "rb") as f:
            file_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return Config.from_dict(config_data)

    for section, values in file_data.items():
        if section in config_data and isinstance(values, dict):
            config_data[section].update(values)
        else:
            logger.warning("Unknown config section [%s] in %s", section, path)
    logger.debug("Loaded configuration from %s", path)
    return Config.from_dict(config_data, source=str(path))
