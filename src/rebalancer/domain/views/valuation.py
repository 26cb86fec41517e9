"""Derived position valuations."""

from dataclasses import dataclass
from decimal import Decimal

from rebalancer.domain.models import Position


@dataclass
class PositionValuation:
    """A position priced at a point in time."""

    position: Position
    price: Decimal
    market_value: Decimal
    cost_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal
    days_held: int
    is_long_term: bool

    @property
    def ticker(self) -> str:
        return self.position.ticker

    @property
    def is_loss(self) -> bool:
        return self.gain_loss < 0
