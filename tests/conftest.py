"""Shared fakes for the Telegram transport and market data provider."""

import pytest

from src.models import BuyTransaction, ContractData
from src.providers.base import MarketDataProvider
from src.store.config_store import ConfigStore


class FakeBot:
    """Records outgoing messages instead of calling Telegram."""

    def __init__(self):
        self.messages = []
        self.photos = []
        self.animations = []

    def send_message(self, chat_id, text, parse_mode="Markdown"):
        self.messages.append((chat_id, text))
        return True

    def send_photo(self, chat_id, photo, caption=""):
        self.photos.append((chat_id, photo, caption))
        return True

    def send_animation(self, chat_id, animation, caption=""):
        self.animations.append((chat_id, animation))
        return True

    def texts(self):
        return [text for _, text in self.messages]


class FakeProvider(MarketDataProvider):
    """Serves canned ContractData per address; missing address -> None."""

    name = "fake"

    def __init__(self, data=None, raise_for=()):
        self._data = data or {}
        self._raise_for = set(raise_for)
        self.calls = []

    def fetch_contract_data(self, address):
        self.calls.append(address)
        if address in self._raise_for:
            raise RuntimeError(f"boom for {address}")
        return self._data.get(address)


def make_data(market_cap=12345, amounts=()):
    return ContractData(
        market_cap=market_cap,
        buys=[BuyTransaction(amount=a) for a in amounts],
    )


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def store(tmp_path):
    s = ConfigStore(str(tmp_path / "bot_config.json"))
    s.load()
    return s
