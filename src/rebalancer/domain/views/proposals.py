"""View models for trade proposals and their promotion to orders."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from rebalancer.domain.models import AccountType, TradeSide


@dataclass
class TradeProposal:
    """
    Ephemeral SELL or BUY suggestion, recomputed on every request.

    For a SELL, replacement_ticker is the security to buy back into; for a
    BUY it is the ticker being replaced.
    """

    proposal_id: str
    side: TradeSide
    ticker: str
    account_id: str
    sleeve_id: Optional[str]
    sleeve_name: str
    qty: Decimal
    price: Decimal
    estimated_value: Decimal
    reason: str
    can_execute: bool
    blocking_reason: Optional[str] = None
    replacement_ticker: Optional[str] = None
    realized_gain_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    is_long_term: Optional[bool] = None
    cost_basis_per_share: Optional[Decimal] = None
    account_type: AccountType = AccountType.TAXABLE


@dataclass
class PromotionResult:
    """Outcome of promoting proposals to draft orders."""

    created: int = 0
    skipped: int = 0
    order_ids: list[str] = field(default_factory=list)


@dataclass
class HarvestSummary:
    """Aggregate harvestable losses across taxable positions."""

    total_harvestable_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    long_term_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    short_term_loss: Decimal = field(default_factory=lambda: Decimal("0"))
    candidate_count: int = 0
    executable_count: int = 0
    blocked_count: int = 0
