"""Configuration management."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.http import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..core.downloader import DEFAULT_CHUNK_SIZE
from ..core.youtube_client import INFO_URL

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path.home() / "tubeloader_settings.json"


def _defaults() -> Dict[str, Any]:
    return {
        "download_path": str(Path.home() / "Downloads" / "tubeloader"),
        "info_url": INFO_URL,
        "timeout": DEFAULT_TIMEOUT,
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "user_agent": DEFAULT_USER_AGENT,
    }


class Config:
    """Manages application configuration stored as a JSON object."""

    def __init__(self, config_file: Optional[Path] = None):
        if config_file is None:
            config_file = DEFAULT_CONFIG_FILE
        self.file = Path(config_file)
        self.data = _defaults()
        self.load()

    def load(self):
        """Load configuration from file, keeping defaults for anything missing."""
        if not self.file.exists():
            return
        try:
            with open(self.file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read config file %s: %s. Using defaults.", self.file, e)
            return

        if not isinstance(loaded, dict):
            logger.warning("Config file %s must contain a JSON object. Ignoring.", self.file)
            return

        unknown = set(loaded) - set(self.data)
        if unknown:
            logger.warning("Unknown config keys ignored: %s", ", ".join(sorted(unknown)))
        self.data.update({k: v for k, v in loaded.items() if k in self.data})

    def save(self):
        """Save configuration to file."""
        self.file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.file, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    def _number(self, key: str, cast):
        try:
            value = cast(self.data[key])
        except (TypeError, ValueError):
            logger.warning("Invalid %s in config: %r", key, self.data[key])
            return _defaults()[key]
        return value if value > 0 else _defaults()[key]

    @property
    def download_path(self) -> Path:
        """Directory downloads are written to when no output path is given."""
        return Path(self.data["download_path"]).expanduser()

    def set_download_path(self, path: str | Path):
        """Set the download path and persist it."""
        self.data["download_path"] = str(path)
        self.save()

    @property
    def info_url(self) -> str:
        return str(self.data["info_url"])

    @property
    def timeout(self) -> float:
        return self._number("timeout", float)

    @property
    def chunk_size(self) -> int:
        return self._number("chunk_size", int)

    @property
    def user_agent(self) -> str:
        return str(self.data["user_agent"])
