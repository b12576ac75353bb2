"""Telegram bot — long-poll getUpdates, message dispatch, text/photo/animation sends."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from src.telegram.commands import CommandRouter

logger = logging.getLogger(__name__)

BOT_STATE_PATH = "data/bot_state.json"


class TelegramBot:
    def __init__(
        self,
        token: str | None = None,
        state_path: str = BOT_STATE_PATH,
    ):
        self.token = token or os.environ.get("TELEGRAM_BOT_TOKEN", "")
        self.base_url = f"https://api.telegram.org/bot{self.token}"
        self.state_path = state_path
        self.router: CommandRouter | None = None
        self._bot_id: int | None = None
        self._session = requests.Session()

        if not self.token:
            logger.warning("TELEGRAM_BOT_TOKEN not set — bot will not function")

    def attach(self, router: CommandRouter) -> None:
        self.router = router

    def get_updates(self, offset: int = 0, timeout: int = 30) -> list[dict]:
        """Long-poll Telegram for new updates."""
        try:
            resp = self._session.get(
                f"{self.base_url}/getUpdates",
                params={"offset": offset, "timeout": timeout},
                timeout=timeout + 10,
            )
            resp.raise_for_status()
            data = resp.json()
            if data.get("ok"):
                return data.get("result", [])
            logger.warning("getUpdates not ok: %s", data)
            return []
        except Exception as e:
            logger.error("getUpdates failed: %s", e)
            return []

    def get_bot_id(self) -> int | None:
        """Own user id via getMe, cached after the first success."""
        if self._bot_id is not None:
            return self._bot_id
        try:
            resp = self._session.get(f"{self.base_url}/getMe", timeout=15)
            data = resp.json()
            if data.get("ok"):
                self._bot_id = data["result"]["id"]
        except Exception as e:
            logger.error("getMe failed: %s", e)
        return self._bot_id

    def send_message(
        self,
        chat_id: str,
        text: str,
        parse_mode: str = "Markdown",
    ) -> bool:
        """Send a message via Telegram API."""
        if not self.token:
            logger.warning("No bot token — message not sent: %s", text[:80])
            return False
        delivered = True
        try:
            # Telegram has a 4096 char limit per message
            for chunk in _chunk_message(text, 4000):
                resp = self._session.post(
                    f"{self.base_url}/sendMessage",
                    json={
                        "chat_id": chat_id,
                        "text": chunk,
                        "parse_mode": parse_mode,
                    },
                    timeout=15,
                )
                if not resp.json().get("ok"):
                    # Retry without parse_mode if markdown fails
                    resp = self._session.post(
                        f"{self.base_url}/sendMessage",
                        json={"chat_id": chat_id, "text": chunk},
                        timeout=15,
                    )
                    data = resp.json()
                    if not data.get("ok"):
                        logger.warning(
                            "sendMessage to %s not ok: %s",
                            chat_id, data.get("description", data),
                        )
                        delivered = False
            return delivered
        except Exception as e:
            logger.error("sendMessage failed: %s", e)
            return False

    def send_photo(self, chat_id: str, photo: str, caption: str = "") -> bool:
        """Send an image — a local file path is uploaded, anything else is passed as URL/file_id."""
        return self._send_media("sendPhoto", "photo", chat_id, photo, caption)

    def send_animation(self, chat_id: str, animation: str, caption: str = "") -> bool:
        return self._send_media("sendAnimation", "animation", chat_id, animation, caption)

    def _send_media(
        self, method: str, field: str, chat_id: str, media: str, caption: str
    ) -> bool:
        if not self.token:
            logger.warning("No bot token — %s not sent", method)
            return False
        payload = {"chat_id": chat_id}
        if caption:
            payload["caption"] = caption
        try:
            path = Path(media)
            if path.is_file():
                with open(path, "rb") as f:
                    resp = self._session.post(
                        f"{self.base_url}/{method}",
                        data=payload,
                        files={field: f},
                        timeout=30,
                    )
            else:
                resp = self._session.post(
                    f"{self.base_url}/{method}",
                    json={**payload, field: media},
                    timeout=15,
                )
            data = resp.json()
            if not data.get("ok"):
                logger.warning("%s not ok: %s", method, data.get("description", data))
                return False
            return True
        except Exception as e:
            logger.error("%s failed: %s", method, e)
            return False

    def run_once(self, timeout: int = 5) -> bool:
        """Single poll cycle.

        Returns True if any updates were processed (state changed).
        """
        state = _load_bot_state(self.state_path)
        last_id = state.get("last_update_id", 0)

        updates = self.get_updates(offset=last_id + 1, timeout=timeout)
        if not updates:
            return False

        state_changed = False
        for update in updates:
            update_id = update.get("update_id", 0)
            if update_id <= last_id:
                continue

            message = update.get("message")
            if message:
                try:
                    self.dispatch(message)
                except Exception:
                    logger.exception("Failed to handle update %s", update_id)

            state["last_update_id"] = update_id
            last_id = update_id
            state_changed = True

        if state_changed:
            _save_bot_state(state, self.state_path)

        return state_changed

    def dispatch(self, message: dict) -> None:
        """Hand one message to the router; join events are routed separately."""
        if self.router is None:
            logger.warning("No router attached — dropping message")
            return

        chat = message.get("chat", {})
        members = message.get("new_chat_members") or []
        if members:
            bot_id = self.get_bot_id()
            if bot_id is not None and any(m.get("id") == bot_id for m in members):
                self.router.handle_bot_added(str(chat.get("id", "")), chat.get("type", ""))
            return

        self.router.handle_message(message)

    def run_continuous(self, poll_interval: int = 1, timeout: int = 30) -> None:
        """Continuously poll for updates and process commands.

        This runs indefinitely until interrupted.
        """
        logger.info("Starting continuous bot polling (interval: %ds)", poll_interval)
        while True:
            self.run_once(timeout=timeout)
            time.sleep(poll_interval)


def _load_bot_state(path: str = BOT_STATE_PATH) -> dict:
    p = Path(path)
    if p.exists():
        try:
            with open(p) as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError):
            pass
    return {"last_update_id": 0}


def _save_bot_state(state: dict, path: str = BOT_STATE_PATH) -> None:
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w") as f:
            json.dump(state, f, indent=2)
    except OSError as e:
        logger.error("Failed to save bot state to %s: %s", p, e)


def _chunk_message(text: str, max_len: int = 4000) -> list[str]:
    """Split a long message into chunks."""
    if len(text) <= max_len:
        return [text]
    chunks = []
    while text:
        if len(text) <= max_len:
            chunks.append(text)
            break
        # Find a good split point
        split = text.rfind("\n", 0, max_len)
        if split <= 0:
            split = max_len
        chunks.append(text[:split])
        text = text[split:].lstrip("\n")
    return chunks
