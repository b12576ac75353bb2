"""Persisted bot configuration — single JSON document, fully overwritten on save.

The in-memory ``BotConfig`` is the single source of truth. Command handlers,
the /config conversation and scheduled update cycles all go through this
store, and every mutation plus its save runs under one lock.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from src.models import BotConfig

logger = logging.getLogger(__name__)

CONFIG_STATE_PATH = "data/bot_config.json"


class ConfigStore:
    """Owns the bot's ``BotConfig`` and its JSON file."""

    def __init__(self, path: str = CONFIG_STATE_PATH):
        self.path = Path(path)
        self.config = BotConfig()
        self._lock = threading.RLock()

    def load(self) -> BotConfig:
        """Read persisted state; first run writes the defaults out."""
        with self._lock:
            if not self.path.exists():
                logger.info("No config at %s — initializing defaults", self.path)
                self.config = BotConfig()
                self.save()
                return self.config

            try:
                with open(self.path) as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError(f"expected a JSON object, got {type(data).__name__}")
                self.config = BotConfig.from_dict(data)
                logger.info(
                    "Loaded config: contract=%s watch=%d",
                    self.config.contract_address or "-",
                    len(self.config.watch_list),
                )
            except (json.JSONDecodeError, OSError, ValueError, TypeError) as e:
                logger.error("Failed to load config from %s: %s", self.path, e)
                self.config = BotConfig()
            return self.config

    def save(self) -> bool:
        """Overwrite the config file with the full in-memory state."""
        with self._lock:
            state = self.config.to_dict()
            temp_path = self.path.with_suffix(".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(temp_path, "w") as f:
                    json.dump(state, f, indent=2)
                temp_path.replace(self.path)
                return True
            except OSError as e:
                logger.error("Failed to save config to %s: %s", self.path, e)
                if temp_path.exists():
                    temp_path.unlink()
                return False

    def snapshot(self) -> BotConfig:
        with self._lock:
            return self.config.copy()

    def update(self, **fields) -> BotConfig:
        """Set one or more ``BotConfig`` fields and persist."""
        with self._lock:
            for name, value in fields.items():
                if not hasattr(self.config, name):
                    raise AttributeError(f"BotConfig has no field '{name}'")
                setattr(self.config, name, value)
            self.save()
            return self.config.copy()

    def add_watch(self, address: str) -> bool:
        """Append to the watch list. Returns False if already listed."""
        with self._lock:
            if address in self.config.watch_list:
                return False
            self.config.watch_list.append(address)
            self.save()
            return True

    def remove_watch(self, address: str) -> bool:
        """Remove from the watch list. Returns False if not listed."""
        with self._lock:
            if address not in self.config.watch_list:
                return False
            self.config.watch_list.remove(address)
            self.save()
            return True
