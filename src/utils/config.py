"""YAML settings loader and provider factory."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

DEFAULT_CONFIG_PATH = "config/bot.yml"


@dataclass
class BotSettings:
    solscan_base_url: str = "https://api.solscan.io"
    tx_limit: int = 10
    request_timeout: int = 15
    update_interval_minutes: int = 1
    poll_interval_seconds: int = 1
    timezone: str = "UTC"
    state_path: str = "data/bot_config.json"
    bot_state_path: str = "data/bot_state.json"
    onboarding_image: str = "images/onboarding.jpeg"
    log_path: str = "logs/bot.log"


def _resolve(path: str) -> Path:
    """Resolve a path relative to project root."""
    p = Path(path)
    if p.is_absolute():
        return p
    return _PROJECT_ROOT / p


def load_yaml(path: str) -> dict:
    """Load a YAML config file safely."""
    resolved = _resolve(path)
    with open(resolved) as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: str | None = None) -> BotSettings:
    """Build settings from YAML; a missing file falls back to defaults."""
    config_path = config_path or os.environ.get("BOT_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    try:
        cfg = load_yaml(config_path)
    except FileNotFoundError:
        logger.warning("Config not found at %s, using defaults", _resolve(config_path))
        cfg = {}

    defaults = BotSettings()
    solscan = cfg.get("solscan", {}) or {}
    return BotSettings(
        solscan_base_url=solscan.get("base_url", defaults.solscan_base_url),
        tx_limit=int(solscan.get("tx_limit", defaults.tx_limit)),
        request_timeout=int(solscan.get("timeout", defaults.request_timeout)),
        update_interval_minutes=int(
            cfg.get("update_interval_minutes", defaults.update_interval_minutes)
        ),
        poll_interval_seconds=int(
            cfg.get("poll_interval_seconds", defaults.poll_interval_seconds)
        ),
        timezone=cfg.get("timezone", defaults.timezone),
        state_path=str(_resolve(cfg.get("state_path", defaults.state_path))),
        bot_state_path=str(_resolve(cfg.get("bot_state_path", defaults.bot_state_path))),
        onboarding_image=str(_resolve(cfg.get("onboarding_image", defaults.onboarding_image))),
        log_path=str(_resolve(cfg.get("log_path", defaults.log_path))),
    )


def get_provider(settings: BotSettings):
    """Instantiate the market data provider from settings."""
    from src.providers.solscan_provider import SolscanProvider

    return SolscanProvider(
        base_url=settings.solscan_base_url,
        tx_limit=settings.tx_limit,
        timeout=settings.request_timeout,
    )
