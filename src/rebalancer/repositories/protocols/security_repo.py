"""Security repository protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from rebalancer.domain.models import Security


class SecurityRepository(Protocol):
    """Interface for securities and their last known prices."""

    def upsert(self, security: Security) -> Security:
        """Insert or update a security."""
        ...

    def get(self, ticker: str) -> Optional[Security]:
        """Retrieve security by ticker."""
        ...

    def list_all(self) -> list[Security]:
        """List all securities ordered by ticker."""
        ...

    def existing_tickers(self, tickers: list[str]) -> set[str]:
        """Return the subset of tickers present in the table."""
        ...

    def get_prices(self, tickers: Optional[list[str]] = None) -> dict[str, Optional[Decimal]]:
        """Ticker -> price (None when no price is recorded)."""
        ...
