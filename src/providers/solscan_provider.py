"""Solscan provider — account summary + recent transactions (no auth)."""

from __future__ import annotations

import logging

import requests

from src.models import BuyTransaction, ContractData
from src.providers.base import MarketDataProvider

logger = logging.getLogger(__name__)

BUY_INSTRUCTION = "buy"


class SolscanProvider(MarketDataProvider):
    name = "solscan"

    def __init__(
        self,
        base_url: str = "https://api.solscan.io",
        tx_limit: int = 10,
        timeout: int = 15,
    ):
        self.base_url = base_url.rstrip("/")
        self.tx_limit = tx_limit
        self.timeout = timeout
        self.session = requests.Session()

    def fetch_contract_data(self, address: str) -> ContractData | None:
        logger.debug("solscan: fetching %s", address)
        try:
            account = self._get("/account", {"address": address})
            txs = self._get(
                "/account/transactions",
                {"address": address, "limit": self.tx_limit},
            )
            return ContractData(
                market_cap=self._parse_market_cap(account),
                buys=self._parse_buys(txs),
            )
        except Exception as e:
            logger.error("solscan: failed for %s: %s", address, e)
            return None

    def _get(self, path: str, params: dict):
        resp = self.session.get(
            f"{self.base_url}{path}",
            params=params,
            timeout=self.timeout,
            headers={"User-Agent": "solbuy-bot/1.0"},
        )
        resp.raise_for_status()
        return resp.json()

    def _parse_market_cap(self, data):
        if not isinstance(data, dict):
            raise ValueError(f"unexpected account payload: {type(data).__name__}")
        if "marketCap" in data:
            return data["marketCap"]
        # Some responses wrap the account under "data"
        inner = data.get("data")
        if isinstance(inner, dict):
            return inner.get("marketCap")
        return None

    def _parse_buys(self, data) -> list[BuyTransaction]:
        if isinstance(data, dict):
            data = data.get("data", [])
        if not isinstance(data, list):
            raise ValueError(f"unexpected transactions payload: {type(data).__name__}")

        buys = []
        for tx in data:
            if not isinstance(tx, dict):
                continue
            instruction = tx.get("parsedInstruction") or {}
            if instruction.get("type") != BUY_INSTRUCTION:
                continue
            buys.append(BuyTransaction(
                amount=instruction.get("amount"),
                signature=str(tx.get("txHash") or tx.get("signature") or ""),
            ))
        return buys
