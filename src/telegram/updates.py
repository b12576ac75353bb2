"""Update cycle — fetch contract + watch-list data and post it to the chat."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from src.providers.base import MarketDataProvider
from src.store.config_store import ConfigStore
from src.telegram.formatter import format_update, format_watch_notice

if TYPE_CHECKING:
    from src.telegram.bot import TelegramBot

logger = logging.getLogger(__name__)


class UpdateProcedure:
    def __init__(self, store: ConfigStore, provider: MarketDataProvider, bot: TelegramBot):
        self.store = store
        self.provider = provider
        self.bot = bot

    def run(self, now: datetime | None = None) -> bool:
        """Run one update cycle.

        Returns True if the market summary was sent.
        """
        config = self.store.snapshot()
        if not config.contract_address or not config.chat_id:
            logger.debug("Contract or chat not configured — skipping update")
            return False

        data = self.provider.fetch_contract_data(config.contract_address)
        if data is None:
            logger.warning("No data for %s this cycle", config.contract_address)
            return False

        self.bot.send_message(config.chat_id, format_update(data))
        if config.alert_gif:
            self.bot.send_animation(config.chat_id, config.alert_gif)

        notices = self._check_watch_list(config.watch_list, config.chat_id)

        now = now or datetime.now(timezone.utc)
        self.store.update(last_update=now.isoformat())
        logger.info(
            "Update sent to %s: %d buys, %d watch notices",
            config.chat_id, len(data.buys), notices,
        )
        return True

    def _check_watch_list(self, watch_list: list[str], chat_id: str) -> int:
        # Reports any buy in the latest window; already-seen buys are not tracked.
        sent = 0
        for address in watch_list:
            try:
                data = self.provider.fetch_contract_data(address)
            except Exception as e:
                logger.error("Watch fetch failed for %s: %s", address, e)
                continue
            if data is None:
                logger.warning("No data for watched address %s", address)
                continue
            if data.buys:
                self.bot.send_message(chat_id, format_watch_notice(address, data))
                sent += 1
        return sent
