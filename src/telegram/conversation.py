"""Per-chat conversation state for the two-step /config flow."""

from __future__ import annotations

import threading

IDLE = "idle"
AWAITING_ADDRESS = "awaiting_address"


class ConversationState:
    """Tracks which chats are waiting for a contract address.

    Keyed by chat id so that several groups can run /config at the same time.
    """

    def __init__(self):
        self._states: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, chat_id: str) -> str:
        with self._lock:
            return self._states.get(str(chat_id), IDLE)

    def await_address(self, chat_id: str) -> None:
        with self._lock:
            self._states[str(chat_id)] = AWAITING_ADDRESS

    def pop_awaiting(self, chat_id: str) -> bool:
        """Return the chat to idle; True if it was awaiting an address."""
        with self._lock:
            return self._states.pop(str(chat_id), IDLE) == AWAITING_ADDRESS
