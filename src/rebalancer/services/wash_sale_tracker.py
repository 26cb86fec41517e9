"""Time-bounded wash-sale restriction lookups."""

import math
from datetime import datetime
from typing import Iterable, Optional

from rebalancer.core.timezone import now_eastern
from rebalancer.domain.models import RestrictedSecurity

_SECONDS_PER_DAY = 86400


class WashSaleTracker:
    """
    Answers whether a ticker may be bought right now.

    Restrictions are filtered against `now` when the tracker is built; expired
    records are ignored rather than removed. When a ticker has several records
    the one that blocks longest governs.
    """

    def __init__(
        self,
        restrictions: Iterable[RestrictedSecurity],
        now: Optional[datetime] = None,
    ):
        self._now = now or now_eastern()
        self._active: dict[str, RestrictedSecurity] = {}
        for restriction in restrictions:
            if not restriction.is_active(self._now):
                continue
            ticker = restriction.ticker.upper()
            current = self._active.get(ticker)
            if current is None or restriction.blocked_until > current.blocked_until:
                self._active[ticker] = restriction

    @property
    def now(self) -> datetime:
        return self._now

    def is_restricted(self, ticker: str) -> bool:
        return ticker.upper() in self._active

    def restriction_for(self, ticker: str) -> Optional[RestrictedSecurity]:
        """Return the governing active restriction for ticker, if any."""
        return self._active.get(ticker.upper())

    def days_to_unblock(self, ticker: str) -> int:
        """Whole days (rounded up) until ticker may be bought again; 0 if unrestricted."""
        restriction = self.restriction_for(ticker)
        if restriction is None:
            return 0
        return days_until(restriction.blocked_until, self._now)

    def active_restrictions(self) -> list[RestrictedSecurity]:
        return sorted(self._active.values(), key=lambda r: (r.blocked_until, r.ticker))

    def restricted_tickers(self) -> set[str]:
        return set(self._active)


def days_until(blocked_until: datetime, now: datetime) -> int:
    """max(0, ceil((blocked_until - now) / 1 day))."""
    seconds = (blocked_until - now).total_seconds()
    return max(0, math.ceil(seconds / _SECONDS_PER_DAY))
