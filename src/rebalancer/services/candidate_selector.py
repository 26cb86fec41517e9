"""Selection of taxable positions whose losses are worth harvesting."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from rebalancer.config.settings import get_settings
from rebalancer.core.money import ZERO, HUNDRED, round_money, round_percent
from rebalancer.core.timezone import now_eastern
from rebalancer.domain.models import AccountType, Position
from rebalancer.domain.views import PositionValuation, PriceTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HarvestThresholds:
    """
    Dual loss threshold: a loss qualifies on percentage OR on dollars.

    The percent test catches small positions with deep losses, the dollar
    test catches large positions with shallow ones.
    """

    min_loss_percent: Decimal = field(default_factory=lambda: Decimal("5"))
    min_loss_dollars: Decimal = field(default_factory=lambda: Decimal("2500"))
    long_term_days: int = 365

    @classmethod
    def from_settings(cls) -> "HarvestThresholds":
        settings = get_settings()
        return cls(
            min_loss_percent=Decimal(settings.tlh_min_loss_percent),
            min_loss_dollars=Decimal(settings.tlh_min_loss_dollars),
            long_term_days=settings.long_term_holding_days,
        )


def value_position(
    position: Position,
    price: Decimal,
    now: datetime,
    long_term_days: int = 365,
) -> PositionValuation:
    """Price a position: market value, gain/loss (cents) and percent (0.01)."""
    market_value = round_money(position.qty * price)
    cost_value = round_money(position.cost_value)
    gain_loss = market_value - cost_value
    if cost_value > ZERO:
        gain_loss_percent = round_percent(gain_loss / cost_value * HUNDRED)
    else:
        gain_loss_percent = ZERO
    days_held = max(0, (now - position.opened_at).days)
    return PositionValuation(
        position=position,
        price=price,
        market_value=market_value,
        cost_value=cost_value,
        gain_loss=gain_loss,
        gain_loss_percent=gain_loss_percent,
        days_held=days_held,
        is_long_term=days_held > long_term_days,
    )


def qualifies_for_harvest(
    gain_loss: Decimal,
    gain_loss_percent: Decimal,
    thresholds: Optional[HarvestThresholds] = None,
) -> bool:
    """dollar loss < 0 and (|percent| >= min percent or |dollars| >= min dollars)."""
    thresholds = thresholds or HarvestThresholds()
    if gain_loss >= ZERO:
        return False
    return (
        abs(gain_loss_percent) >= thresholds.min_loss_percent
        or abs(gain_loss) >= thresholds.min_loss_dollars
    )


def select_harvest_candidates(
    positions: Iterable[Position],
    prices: PriceTable,
    now: Optional[datetime] = None,
    thresholds: Optional[HarvestThresholds] = None,
) -> list[PositionValuation]:
    """
    Return valuations of taxable positions meeting the loss thresholds.

    Tax-deferred and tax-exempt accounts are excluded entirely. Positions with
    no available price are skipped. Input order is preserved.
    """
    now = now or now_eastern()
    thresholds = thresholds or HarvestThresholds()

    candidates: list[PositionValuation] = []
    for position in positions:
        if position.account_type != AccountType.TAXABLE:
            continue
        if position.qty <= ZERO:
            continue

        price = prices.get(position.ticker)
        if price is None:
            logger.info(f"Skipping {position.ticker} in account {position.account_id}: no price available")
            continue

        valuation = value_position(position, price, now, thresholds.long_term_days)
        if qualifies_for_harvest(valuation.gain_loss, valuation.gain_loss_percent, thresholds):
            candidates.append(valuation)

    return candidates
