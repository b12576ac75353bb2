"""Application wiring — store, provider, scheduler, router and bot, plus shutdown."""

from __future__ import annotations

import logging
import signal
from dataclasses import dataclass

from src.store.config_store import ConfigStore
from src.telegram.bot import TelegramBot
from src.telegram.commands import CommandRouter
from src.telegram.updates import UpdateProcedure
from src.utils.config import BotSettings, get_provider
from src.utils.scheduler import UpdateScheduler

logger = logging.getLogger(__name__)


@dataclass
class BotApp:
    settings: BotSettings
    bot: TelegramBot
    store: ConfigStore
    procedure: UpdateProcedure
    scheduler: UpdateScheduler
    router: CommandRouter


def build_app(settings: BotSettings, token: str | None = None) -> BotApp:
    """Wire every component. A missing bot token is fatal."""
    bot = TelegramBot(token=token, state_path=settings.bot_state_path)
    if not bot.token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN not set")

    store = ConfigStore(settings.state_path)
    store.load()

    provider = get_provider(settings)
    procedure = UpdateProcedure(store, provider, bot)
    scheduler = UpdateScheduler(procedure.run, timezone=settings.timezone)
    scheduler.add_interval(settings.update_interval_minutes)

    router = CommandRouter(
        store,
        provider,
        bot,
        scheduler=scheduler,
        onboarding_image=settings.onboarding_image,
    )
    bot.attach(router)
    return BotApp(settings, bot, store, procedure, scheduler, router)


def raise_interrupt(signum, frame):
    raise KeyboardInterrupt(f"signal {signum}")


def install_signal_handlers() -> None:
    """SIGTERM unwinds the poll loop the same way Ctrl-C does."""
    signal.signal(signal.SIGTERM, raise_interrupt)


def run(app: BotApp) -> None:
    """Poll until interrupted, then stop the scheduler and save the config."""
    app.scheduler.start()
    logger.info("Bot started")
    try:
        app.bot.run_continuous(poll_interval=app.settings.poll_interval_seconds)
    except KeyboardInterrupt:
        logger.info("Shutdown requested")
    finally:
        app.scheduler.shutdown()
        app.store.save()
        logger.info("Config saved — bot stopped")
