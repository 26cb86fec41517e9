"""Pydantic schemas for rebalancing endpoints."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from rebalancer.domain.models import AccountType, TradeSide


class TradeProposalResponse(BaseModel):
    """A single proposed SELL or BUY."""

    model_config = {"from_attributes": True}

    proposal_id: str
    side: TradeSide
    ticker: str
    account_id: str
    account_type: AccountType
    sleeve_id: Optional[str] = None
    sleeve_name: str
    qty: Decimal
    price: Decimal
    estimated_value: Decimal
    reason: str
    can_execute: bool
    blocking_reason: Optional[str] = None
    replacement_ticker: Optional[str] = None
    realized_gain_loss: Decimal
    is_long_term: Optional[bool] = None
    cost_basis_per_share: Optional[Decimal] = None


class ProposedTradesResponse(BaseModel):
    trades: list[TradeProposalResponse]
    count: int


class HarvestSummaryResponse(BaseModel):
    model_config = {"from_attributes": True}

    total_harvestable_loss: Decimal
    long_term_loss: Decimal
    short_term_loss: Decimal
    candidate_count: int
    executable_count: int
    blocked_count: int


class SecurityDriftResponse(BaseModel):
    model_config = {"from_attributes": True}

    ticker: str
    qty: Decimal
    current_value: Decimal
    target_value: Decimal
    current_percent: Decimal
    target_percent: Decimal
    drift: Decimal
    drift_percent: Decimal
    rank: Optional[int] = None
    is_target: bool
    is_held: bool
    is_legacy: bool


class SleeveDriftResponse(BaseModel):
    model_config = {"from_attributes": True}

    sleeve_id: Optional[str] = None
    sleeve_name: str
    target_weight_bps: int
    current_value: Decimal
    target_value: Decimal
    current_percent: Decimal
    target_percent: Decimal
    drift: Decimal
    drift_percent: Decimal
    securities: list[SecurityDriftResponse]


class AllocationDriftResponse(BaseModel):
    model_config = {"protected_namespaces": ()}

    model_id: str
    sleeves: list[SleeveDriftResponse]
    total_value: Decimal


class PromoteRequest(BaseModel):
    """Promote the current proposals (optionally a subset) to draft orders."""

    account_ids: Optional[list[str]] = None
    proposal_ids: Optional[list[str]] = Field(
        default=None,
        description="Only promote these proposals (all executable ones if omitted)",
    )
    batch_label: Optional[str] = None
    include_blocked: bool = False


class PromoteResponse(BaseModel):
    created: int
    skipped: int
    order_ids: list[str]
