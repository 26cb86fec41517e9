"""Price provider protocol and a fixed-price implementation."""

from decimal import Decimal
from typing import Optional, Protocol


class PriceProvider(Protocol):
    """
    Protocol for last-price lookups used by proposals and drift.

    Missing tickers are omitted; a ticker mapped to None has no usable price.
    A price of zero is a real price. The securities repository satisfies this
    protocol and is the default source.
    """

    def get_prices(self, tickers: Optional[list[str]] = None) -> dict[str, Optional[Decimal]]:
        ...


class StaticPriceProvider:
    """Serves prices from a fixed mapping (what-if runs, offline use)."""

    def __init__(self, prices: dict[str, Optional[Decimal]]):
        self._prices = {ticker.upper(): price for ticker, price in prices.items()}

    def get_prices(self, tickers: Optional[list[str]] = None) -> dict[str, Optional[Decimal]]:
        if tickers is None:
            return dict(self._prices)
        result: dict[str, Optional[Decimal]] = {}
        for ticker in tickers:
            upper = ticker.upper()
            if upper in self._prices:
                result[upper] = self._prices[upper]
        return result
