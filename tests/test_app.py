"""Tests for application wiring, startup and shutdown."""

import json
import signal
from unittest.mock import MagicMock

import pytest

from src.app import build_app, install_signal_handlers, raise_interrupt, run
from src.utils.config import BotSettings


@pytest.fixture
def settings(tmp_path):
    return BotSettings(
        state_path=str(tmp_path / "bot_config.json"),
        bot_state_path=str(tmp_path / "bot_state.json"),
        log_path=str(tmp_path / "bot.log"),
    )


class TestBuildApp:
    def test_missing_token_raises(self, settings, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        with pytest.raises(RuntimeError, match="TELEGRAM_BOT_TOKEN"):
            build_app(settings)

    def test_token_from_env(self, settings, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:env")
        app = build_app(settings)
        assert app.bot.token == "123:env"

    def test_wiring(self, settings, tmp_path):
        app = build_app(settings, token="123:abc")

        assert app.bot.router is app.router
        assert app.router.store is app.store
        assert app.router.scheduler is app.scheduler
        assert app.procedure.store is app.store
        assert app.scheduler.job == app.procedure.run
        # First run persists defaults
        assert (tmp_path / "bot_config.json").exists()


class TestShutdown:
    def _app(self, settings):
        app = build_app(settings, token="123:abc")
        app.scheduler = MagicMock()
        app.bot.run_continuous = MagicMock(side_effect=KeyboardInterrupt)
        return app

    def test_interrupt_saves_config_and_stops_scheduler(self, settings, tmp_path):
        app = self._app(settings)
        # In-memory change that was never saved
        app.store.config.contract_address = "Unsaved"

        run(app)

        app.scheduler.start.assert_called_once()
        app.scheduler.shutdown.assert_called_once()
        data = json.loads((tmp_path / "bot_config.json").read_text())
        assert data["contractAddress"] == "Unsaved"

    def test_unexpected_error_still_saves(self, settings, tmp_path):
        app = self._app(settings)
        app.bot.run_continuous.side_effect = RuntimeError("crash")
        app.store.config.alert_gif = "gif"

        with pytest.raises(RuntimeError):
            run(app)

        app.scheduler.shutdown.assert_called_once()
        data = json.loads((tmp_path / "bot_config.json").read_text())
        assert data["alertGif"] == "gif"


class TestSignals:
    def test_raise_interrupt(self):
        with pytest.raises(KeyboardInterrupt):
            raise_interrupt(signal.SIGTERM, None)

    def test_sigterm_handler_installed(self, monkeypatch):
        installed = {}
        monkeypatch.setattr("src.app.signal.signal", lambda sig, fn: installed.setdefault(sig, fn))
        install_signal_handlers()
        assert installed == {signal.SIGTERM: raise_interrupt}
