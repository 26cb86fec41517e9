"""Tax-loss harvesting trade proposal generation."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Union

from rebalancer.core.money import ZERO, floor_shares, format_money, round_money
from rebalancer.core.timezone import now_eastern
from rebalancer.domain.models import Position, RestrictedSecurity, Sleeve, TradeSide
from rebalancer.domain.views import (
    Blocked,
    HarvestSummary,
    PositionValuation,
    PriceTable,
    Resolved,
    TradeProposal,
    as_price_table,
)
from rebalancer.services.candidate_selector import HarvestThresholds, select_harvest_candidates
from rebalancer.services.replacement_resolver import ReplacementResolver
from rebalancer.services.sleeve_registry import SleeveRegistry
from rebalancer.services.wash_sale_tracker import WashSaleTracker

logger = logging.getLogger(__name__)

NO_SLEEVE_NAME = "No Sleeve"

_SIDE_ORDER = {TradeSide.SELL: 0, TradeSide.BUY: 1}

Prices = Union[PriceTable, Mapping[str, Optional[Decimal]]]


def compute_proposed_trades(
    positions: Iterable[Position],
    sleeves: Iterable[Sleeve],
    restricted_securities: Iterable[RestrictedSecurity],
    prices: Prices,
    now: Optional[datetime] = None,
    thresholds: Optional[HarvestThresholds] = None,
) -> list[TradeProposal]:
    """
    Build paired SELL/BUY proposals for every harvestable loss.

    Every qualifying position yields a SELL for its full share count, even
    when no replacement can be bought, so blocked losses remain visible. A
    BUY follows only when a replacement resolves and at least one whole share
    can be bought with the sale proceeds.

    Output is sorted by sleeve name (case-insensitive), then SELL before BUY.
    """
    now = now or now_eastern()
    prices = as_price_table(prices)
    registry = SleeveRegistry(sleeves)
    tracker = WashSaleTracker(restricted_securities, now=now)
    resolver = ReplacementResolver(registry, tracker)

    proposals: list[TradeProposal] = []
    for candidate in select_harvest_candidates(positions, prices, now=now, thresholds=thresholds):
        proposals.extend(_proposals_for(candidate, registry, resolver, prices))

    proposals.sort(key=lambda p: (p.sleeve_name.casefold(), _SIDE_ORDER[p.side]))
    return proposals


def summarize_harvestable_losses(proposals: Iterable[TradeProposal]) -> HarvestSummary:
    """Aggregate the SELL legs of a proposal set."""
    summary = HarvestSummary()
    for proposal in proposals:
        if proposal.side != TradeSide.SELL:
            continue
        loss = abs(proposal.realized_gain_loss)
        summary.candidate_count += 1
        summary.total_harvestable_loss += loss
        if proposal.is_long_term:
            summary.long_term_loss += loss
        else:
            summary.short_term_loss += loss
        if proposal.can_execute:
            summary.executable_count += 1
        else:
            summary.blocked_count += 1
    return summary


def _proposals_for(
    candidate: PositionValuation,
    registry: SleeveRegistry,
    resolver: ReplacementResolver,
    prices: PriceTable,
) -> list[TradeProposal]:
    position = candidate.position
    sleeve_id = registry.sleeve_id_for(position)
    outcome = resolver.resolve(
        position.ticker,
        sleeve_id,
        loss_amount=candidate.gain_loss,
        loss_percent=candidate.gain_loss_percent,
    )

    sleeve = outcome.sleeve
    sleeve_name = sleeve.name if sleeve else NO_SLEEVE_NAME
    term = "long-term" if candidate.is_long_term else "short-term"

    sell = TradeProposal(
        proposal_id=f"sell-{position.position_id}",
        side=TradeSide.SELL,
        ticker=position.ticker,
        account_id=position.account_id,
        account_type=position.account_type,
        sleeve_id=sleeve_id,
        sleeve_name=sleeve_name,
        qty=position.qty,
        price=candidate.price,
        estimated_value=candidate.market_value,
        reason=f"Sell {position.ticker} to harvest {format_money(abs(candidate.gain_loss))} {term} loss",
        can_execute=isinstance(outcome, Resolved),
        blocking_reason=outcome.message if isinstance(outcome, Blocked) else None,
        replacement_ticker=outcome.ticker if isinstance(outcome, Resolved) else None,
        realized_gain_loss=candidate.gain_loss,
        is_long_term=candidate.is_long_term,
        cost_basis_per_share=position.cost_basis_per_share,
    )
    proposals = [sell]

    if isinstance(outcome, Resolved):
        buy = _replacement_buy(candidate, outcome, sleeve_id, sleeve_name, prices)
        if buy is not None:
            proposals.append(buy)
    return proposals


def _replacement_buy(
    candidate: PositionValuation,
    outcome: Resolved,
    sleeve_id: Optional[str],
    sleeve_name: str,
    prices: PriceTable,
) -> Optional[TradeProposal]:
    position = candidate.position
    replacement = outcome.ticker

    # Fall back to the sold position's price only when the replacement has none
    price = prices.get(replacement)
    if price is None:
        price = candidate.price

    qty = floor_shares(candidate.market_value, price)
    if qty < 1 or price <= ZERO:
        logger.debug(f"No BUY for {replacement}: proceeds {candidate.market_value} at price {price}")
        return None

    return TradeProposal(
        proposal_id=f"buy-{position.position_id}",
        side=TradeSide.BUY,
        ticker=replacement,
        account_id=position.account_id,
        account_type=position.account_type,
        sleeve_id=sleeve_id,
        sleeve_name=sleeve_name,
        qty=Decimal(qty),
        price=price,
        estimated_value=round_money(price * qty),
        reason=f"Buy {replacement} as replacement for {position.ticker}",
        can_execute=True,
        replacement_ticker=position.ticker,
    )
