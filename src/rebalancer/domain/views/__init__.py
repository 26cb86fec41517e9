"""View models for service outputs."""

from rebalancer.domain.views.prices import PriceTable, as_price_table
from rebalancer.domain.views.valuation import PositionValuation
from rebalancer.domain.views.resolution import Resolved, Blocked, Resolution
from rebalancer.domain.views.proposals import TradeProposal, PromotionResult, HarvestSummary
from rebalancer.domain.views.drift import (
    SecurityDrift,
    SleeveDriftReport,
    UNASSIGNED_SLEEVE_NAME,
    CASH_SLEEVE_NAME,
)
from rebalancer.domain.views.broker import PreviewMessage, PreviewResult, PlacementResult

__all__ = [
    "PriceTable",
    "as_price_table",
    "PositionValuation",
    "Resolved",
    "Blocked",
    "Resolution",
    "TradeProposal",
    "PromotionResult",
    "HarvestSummary",
    "SecurityDrift",
    "SleeveDriftReport",
    "UNASSIGNED_SLEEVE_NAME",
    "CASH_SLEEVE_NAME",
    "PreviewMessage",
    "PreviewResult",
    "PlacementResult",
]
