"""Price lookup table."""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from rebalancer.domain.models.security import Security, is_cash_ticker

CASH_PRICE = Decimal("1")


class PriceTable:
    """
    Ticker -> price lookup that keeps "no price" distinct from a zero price.

    Cash tickers are always priced at $1.
    """

    def __init__(self, prices: Optional[Mapping[str, Optional[Decimal]]] = None):
        self._prices: dict[str, Decimal] = {}
        for ticker, price in (prices or {}).items():
            if price is not None:
                self._prices[ticker.upper()] = Decimal(price)

    @classmethod
    def from_securities(cls, securities: Iterable[Security]) -> "PriceTable":
        return cls({s.ticker: s.price for s in securities})

    def get(self, ticker: str) -> Optional[Decimal]:
        """Return the price for ticker, or None when unknown."""
        ticker = ticker.upper()
        if is_cash_ticker(ticker):
            return CASH_PRICE
        return self._prices.get(ticker)

    def __contains__(self, ticker: str) -> bool:
        return self.get(ticker) is not None

    def __len__(self) -> int:
        return len(self._prices)


def as_price_table(prices) -> PriceTable:
    """Accept either a PriceTable or a plain ticker -> price mapping."""
    if isinstance(prices, PriceTable):
        return prices
    return PriceTable(prices)
