"""Rebalancing endpoints: harvest proposals, drift and promotion to orders."""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query

from rebalancer.api.deps import get_order_manager, get_rebalancing_service
from rebalancer.api.schemas import (
    AllocationDriftResponse,
    HarvestSummaryResponse,
    PromoteRequest,
    PromoteResponse,
    ProposedTradesResponse,
    SleeveDriftResponse,
    TradeProposalResponse,
)
from rebalancer.services import IdempotencyPolicy, OrderLifecycleManager, RebalancingService

router = APIRouter(prefix="/rebalancing", tags=["rebalancing"])


def _parse_account_ids(account_ids: Optional[str]) -> Optional[list[str]]:
    if not account_ids:
        return None
    return [a.strip() for a in account_ids.split(",") if a.strip()]


@router.get("/proposed-trades", response_model=ProposedTradesResponse)
def get_proposed_trades(
    account_ids: Optional[str] = Query(None, description="Comma-separated account IDs (all if empty)"),
    service: RebalancingService = Depends(get_rebalancing_service),
) -> ProposedTradesResponse:
    """Tax-loss harvesting SELL/BUY proposals, ordered by sleeve then SELL before BUY."""
    trades = service.get_proposed_trades(_parse_account_ids(account_ids))
    return ProposedTradesResponse(
        trades=[TradeProposalResponse.model_validate(t) for t in trades],
        count=len(trades),
    )


@router.get("/harvest-summary", response_model=HarvestSummaryResponse)
def get_harvest_summary(
    account_ids: Optional[str] = Query(None, description="Comma-separated account IDs (all if empty)"),
    service: RebalancingService = Depends(get_rebalancing_service),
) -> HarvestSummaryResponse:
    summary = service.get_harvest_summary(_parse_account_ids(account_ids))
    return HarvestSummaryResponse.model_validate(summary)


@router.get("/drift/{model_id}", response_model=AllocationDriftResponse)
def get_allocation_drift(
    model_id: str,
    account_ids: Optional[str] = Query(None, description="Comma-separated account IDs (all if empty)"),
    service: RebalancingService = Depends(get_rebalancing_service),
) -> AllocationDriftResponse:
    """Current vs. target allocation per sleeve (no wash-sale filtering)."""
    reports = service.get_allocation_drift(model_id, _parse_account_ids(account_ids))
    return AllocationDriftResponse(
        model_id=model_id,
        sleeves=[SleeveDriftResponse.model_validate(r) for r in reports],
        total_value=sum((r.current_value for r in reports), Decimal("0")),
    )


@router.post("/promote", response_model=PromoteResponse)
def promote_proposals(
    data: PromoteRequest,
    service: RebalancingService = Depends(get_rebalancing_service),
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> PromoteResponse:
    """Turn current proposals into DRAFT orders; already-queued ones are skipped."""
    proposals = service.get_proposed_trades(data.account_ids)
    if data.proposal_ids is not None:
        wanted = set(data.proposal_ids)
        proposals = [p for p in proposals if p.proposal_id in wanted]

    result = manager.promote_proposals_to_orders(
        proposals,
        IdempotencyPolicy(
            batch_label=data.batch_label,
            include_blocked=data.include_blocked,
        ),
    )
    return PromoteResponse(
        created=result.created,
        skipped=result.skipped,
        order_ids=result.order_ids,
    )
