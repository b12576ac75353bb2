"""Telegram command router — /config, /status, /addwatch, /schedule, /help, ..."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.providers.base import MarketDataProvider
from src.store.config_store import ConfigStore
from src.telegram.conversation import ConversationState
from src.telegram.formatter import (
    GROUP_WELCOME,
    ONBOARDING_CAPTION,
    format_buys,
    format_help,
    format_status,
    format_watchlist,
)
from src.utils.scheduler import UpdateScheduler, parse_hhmm

if TYPE_CHECKING:
    from src.telegram.bot import TelegramBot

logger = logging.getLogger(__name__)

GROUP_CHAT_TYPES = ("group", "supergroup")
NO_CONTRACT = "Contract address not set. Use /config first."


class CommandRouter:
    def __init__(
        self,
        store: ConfigStore,
        provider: MarketDataProvider,
        bot: TelegramBot,
        scheduler: UpdateScheduler | None = None,
        onboarding_image: str = "images/onboarding.jpeg",
        conversation: ConversationState | None = None,
    ):
        self.store = store
        self.provider = provider
        self.bot = bot
        self.scheduler = scheduler
        self.onboarding_image = onboarding_image
        self.conversation = conversation or ConversationState()

    def handle_message(self, message: dict) -> None:
        """Dispatch one inbound Telegram message and send the reply."""
        chat = message.get("chat", {})
        chat_id = str(chat.get("id", ""))
        chat_type = chat.get("type", "private")
        text = (message.get("text") or "").strip()

        if chat_type not in GROUP_CHAT_TYPES:
            self.bot.send_photo(chat_id, self.onboarding_image, caption=ONBOARDING_CAPTION)
            return

        if self.conversation.pop_awaiting(chat_id):
            self.bot.send_message(chat_id, self._verify_and_commit(chat_id, text))
            return

        if not text.startswith("/"):
            return

        reply = self.handle_command(chat_id, text)
        if reply:
            self.bot.send_message(chat_id, reply)

    def handle_bot_added(self, chat_id: str, chat_type: str) -> None:
        """The bot was added to a chat."""
        if chat_type not in GROUP_CHAT_TYPES:
            return
        logger.info("Added to group %s", chat_id)
        self.store.update(chat_id=str(chat_id))
        self.bot.send_message(str(chat_id), GROUP_WELCOME)

    def handle_command(self, chat_id: str, text: str) -> str:
        """Route a group-chat command string to its handler.

        Returns the response message string.
        """
        parts = text.strip().split(None, 1)
        # "/status@SomeBot" -> "/status"
        cmd = parts[0].lower().split("@", 1)[0]
        args = parts[1].strip() if len(parts) > 1 else ""

        handlers = {
            "/start": lambda: self._handle_start(chat_id),
            "/config": lambda: self._handle_config(chat_id),
            "/status": lambda: self._handle_status(),
            "/addwatch": lambda: self._handle_addwatch(args),
            "/removewatch": lambda: self._handle_removewatch(args),
            "/watchlist": lambda: format_watchlist(self.store.snapshot().watch_list),
            "/schedule": lambda: self._handle_schedule(chat_id, args),
            "/marketcap": lambda: self._handle_marketcap(),
            "/recentbuys": lambda: self._handle_recentbuys(),
            "/setgif": lambda: self._handle_setgif(args),
            "/setcontract": lambda: self._handle_setcontract(chat_id, args),
            "/help": lambda: format_help(),
        }

        handler = handlers.get(cmd)
        if handler is None:
            return f"Unknown command: {cmd}\nType /help for available commands."

        try:
            return handler()
        except Exception as e:
            logger.error("Command error for '%s': %s", text, e)
            return f"Error: {e}"

    def _handle_start(self, chat_id: str) -> str:
        self.store.update(chat_id=chat_id)
        return GROUP_WELCOME

    def _handle_config(self, chat_id: str) -> str:
        self.conversation.await_address(chat_id)
        return "Please send the contract address to track."

    def _verify_and_commit(self, chat_id: str, address: str) -> str:
        """Second step of /config: the message text is the candidate address."""
        if not address:
            return "No address received. Send /config to try again."

        data = self.provider.fetch_contract_data(address)
        if data is None:
            return f"Could not verify address `{address}`. Send /config to try again."

        self.store.update(contract_address=address, chat_id=chat_id)
        return (
            f"Contract address set to: `{address}`\n"
            f"Market Cap: {data.market_cap}"
        )

    def _handle_status(self) -> str:
        schedules = self.scheduler.daily_schedules() if self.scheduler else None
        return format_status(self.store.snapshot(), schedules)

    def _handle_addwatch(self, args: str) -> str:
        if not args:
            return "Usage: /addwatch ADDRESS"
        address = args.split()[0]
        if not self.store.add_watch(address):
            return f"`{address}` is already on the watch list."
        return f"Added `{address}` to the watch list."

    def _handle_removewatch(self, args: str) -> str:
        if not args:
            return "Usage: /removewatch ADDRESS"
        address = args.split()[0]
        if not self.store.remove_watch(address):
            return f"`{address}` not found in the watch list."
        return f"Removed `{address}` from the watch list."

    def _handle_schedule(self, chat_id: str, args: str) -> str:
        parsed = parse_hhmm(args)
        if parsed is None:
            return "Invalid time format. Use HH:MM (24h), e.g. /schedule 09:30"
        if self.scheduler is None:
            return "Scheduling is not available."
        label = self.scheduler.add_daily(chat_id, *parsed)
        return f"Daily update scheduled at {label} ({self.scheduler.timezone.zone})."

    def _handle_marketcap(self) -> str:
        config = self.store.snapshot()
        if not config.contract_address:
            return NO_CONTRACT
        data = self.provider.fetch_contract_data(config.contract_address)
        if data is None:
            return "Failed to fetch market data. Try again later."
        return f"Market Cap: {data.market_cap}"

    def _handle_recentbuys(self) -> str:
        config = self.store.snapshot()
        if not config.contract_address:
            return NO_CONTRACT
        data = self.provider.fetch_contract_data(config.contract_address)
        if data is None:
            return "Failed to fetch recent buys. Try again later."
        if not data.buys:
            return "No recent buys."
        return "Recent Buys:\n" + format_buys(data)

    def _handle_setgif(self, args: str) -> str:
        if not args:
            return "Usage: /setgif URL"
        gif = args.split()[0]
        self.store.update(alert_gif=gif)
        return f"GIF for buy alerts set to: {gif}"

    def _handle_setcontract(self, chat_id: str, args: str) -> str:
        if not args:
            return "Usage: /setcontract ADDRESS"
        address = args.split()[0]
        self.store.update(contract_address=address, chat_id=chat_id)
        return f"Contract address set to: `{address}`"
