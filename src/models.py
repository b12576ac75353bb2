"""Shared dataclasses used across all modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class BotConfig:
    contract_address: str = ""
    alert_gif: str = ""
    chat_id: str = ""
    watch_list: list[str] = field(default_factory=list)
    # ISO-8601 UTC timestamp of the last completed update cycle
    last_update: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "contractAddress": self.contract_address,
            "alertGif": self.alert_gif,
            "chatId": self.chat_id,
            "watchList": list(self.watch_list),
            "lastUpdate": self.last_update,
        }

    @classmethod
    def from_dict(cls, d: dict) -> BotConfig:
        raw_watch = d.get("watchList") or []
        if not isinstance(raw_watch, list):
            raise ValueError(f"watchList must be a list, got {type(raw_watch).__name__}")
        watch_list: list[str] = []
        for addr in raw_watch:
            addr = str(addr).strip()
            if addr and addr not in watch_list:
                watch_list.append(addr)
        chat_id = d.get("chatId")
        last_update = d.get("lastUpdate")
        return cls(
            contract_address=str(d.get("contractAddress") or ""),
            alert_gif=str(d.get("alertGif") or ""),
            chat_id=str(chat_id) if chat_id not in (None, "") else "",
            watch_list=watch_list,
            last_update=str(last_update) if last_update else None,
        )

    def copy(self) -> BotConfig:
        return BotConfig(
            contract_address=self.contract_address,
            alert_gif=self.alert_gif,
            chat_id=self.chat_id,
            watch_list=list(self.watch_list),
            last_update=self.last_update,
        )


@dataclass
class BuyTransaction:
    amount: Any  # raw parsedInstruction.amount, rendered as-is
    signature: str = ""


@dataclass
class ContractData:
    market_cap: Any
    buys: list[BuyTransaction] = field(default_factory=list)
