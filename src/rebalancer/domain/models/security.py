"""Security domain model."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

# Brokerage sweep cash and manually tracked cash, both valued at $1 per unit
CASH_TICKER = "$$$"
MANUAL_CASH_TICKER = "MCASH"
CASH_TICKERS = frozenset({CASH_TICKER, MANUAL_CASH_TICKER})


def is_cash_ticker(ticker: str) -> bool:
    return ticker.upper() in CASH_TICKERS


@dataclass
class Security:
    """A tradable security keyed by ticker."""

    ticker: str
    name: str = ""
    price: Optional[Decimal] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    asset_type: str = "EQUITY"

    def __post_init__(self) -> None:
        self.ticker = self.ticker.upper()
