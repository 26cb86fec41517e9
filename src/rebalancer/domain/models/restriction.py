"""Wash-sale restriction record."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

WASH_SALE_WINDOW_DAYS = 31


@dataclass(frozen=True)
class RestrictedSecurity:
    """
    Record that a ticker was sold at a loss and may not be repurchased.

    Immutable once created. A record is in force while blocked_until > now and
    simply stops mattering afterwards; nothing ever deletes it.
    """

    restriction_id: str
    ticker: str
    sleeve_id: Optional[str]
    loss_amount: Decimal
    sold_at: datetime
    blocked_until: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "ticker", self.ticker.upper())

    @classmethod
    def from_sale(
        cls,
        restriction_id: str,
        ticker: str,
        sleeve_id: Optional[str],
        loss_amount: Decimal,
        sold_at: datetime,
        window_days: int = WASH_SALE_WINDOW_DAYS,
    ) -> "RestrictedSecurity":
        """Build a restriction blocking repurchase for window_days after the sale."""
        return cls(
            restriction_id=restriction_id,
            ticker=ticker.upper(),
            sleeve_id=sleeve_id,
            loss_amount=abs(loss_amount),
            sold_at=sold_at,
            blocked_until=sold_at + timedelta(days=window_days),
        )

    def is_active(self, now: datetime) -> bool:
        return self.blocked_until > now
