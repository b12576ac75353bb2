"""MarketDataProvider abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models import ContractData


class MarketDataProvider(ABC):
    """Interface for on-chain market data sources."""

    name: str = "base"

    @abstractmethod
    def fetch_contract_data(self, address: str) -> ContractData | None:
        """Get market cap and recent buys for an address.

        Returns None on any network or parse failure; never raises.
        """
        ...
