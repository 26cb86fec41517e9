"""Sleeve domain models."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SleeveMember:
    """
    A security inside a sleeve.

    Lower rank is preferred as a replacement. A legacy member marks a holding
    that must never be sold (e.g. capital-gains restricted); it is never
    bought as a replacement either.
    """

    ticker: str
    rank: int
    is_active: bool = True
    is_legacy: bool = False

    def __post_init__(self) -> None:
        self.ticker = self.ticker.upper()


@dataclass
class Sleeve:
    """Group of substitutable securities ranked by replacement preference."""

    sleeve_id: str
    name: str
    members: list[SleeveMember] = field(default_factory=list)
    is_active: bool = True

    def ranked_members(self) -> list[SleeveMember]:
        """Members ordered by rank, ties broken by ticker."""
        return sorted(self.members, key=lambda m: (m.rank, m.ticker))

    def member_for(self, ticker: str) -> Optional[SleeveMember]:
        ticker = ticker.upper()
        for member in self.members:
            if member.ticker == ticker:
                return member
        return None

    @property
    def tickers(self) -> list[str]:
        return [m.ticker for m in self.ranked_members()]
