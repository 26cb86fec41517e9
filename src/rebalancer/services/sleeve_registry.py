"""In-memory registry of sleeves for a computation snapshot."""

from typing import Iterable, Optional

from rebalancer.domain.models import Position, Sleeve


class SleeveRegistry:
    """
    Looks up sleeves by id and by member ticker.

    A ticker that appears in several sleeves belongs to the first active
    sleeve (in the order supplied) that lists it.
    """

    def __init__(self, sleeves: Iterable[Sleeve]):
        self._sleeves: dict[str, Sleeve] = {}
        self._by_ticker: dict[str, Sleeve] = {}
        for sleeve in sleeves:
            self._sleeves[sleeve.sleeve_id] = sleeve
            if not sleeve.is_active:
                continue
            for member in sleeve.members:
                self._by_ticker.setdefault(member.ticker, sleeve)

    def get(self, sleeve_id: str) -> Optional[Sleeve]:
        return self._sleeves.get(sleeve_id)

    def sleeve_for_ticker(self, ticker: str) -> Optional[Sleeve]:
        return self._by_ticker.get(ticker.upper())

    def sleeve_id_for(self, position: Position) -> Optional[str]:
        """Sleeve id of a position: its own assignment, else looked up by ticker."""
        if position.sleeve_id:
            return position.sleeve_id
        sleeve = self.sleeve_for_ticker(position.ticker)
        return sleeve.sleeve_id if sleeve else None

    def all(self) -> list[Sleeve]:
        return list(self._sleeves.values())

    def __len__(self) -> int:
        return len(self._sleeves)
