"""Pydantic schemas for API request/response."""

from rebalancer.api.schemas.sleeve import (
    SleeveMemberSchema,
    SleeveCreateRequest,
    SleeveResponse,
    SleeveListResponse,
    ModelMemberSchema,
    ModelCreateRequest,
    EqualWeightModelRequest,
    ModelResponse,
    ModelListResponse,
)
from rebalancer.api.schemas.rebalancing import (
    TradeProposalResponse,
    ProposedTradesResponse,
    HarvestSummaryResponse,
    SecurityDriftResponse,
    SleeveDriftResponse,
    AllocationDriftResponse,
    PromoteRequest,
    PromoteResponse,
)
from rebalancer.api.schemas.order import (
    OrderResponse,
    OrderListResponse,
    OrderUpdateRequest,
    OrderStatusRequest,
    ExecutionCreateRequest,
    ExecutionResponse,
    ExecutionListResponse,
)

__all__ = [
    "SleeveMemberSchema",
    "SleeveCreateRequest",
    "SleeveResponse",
    "SleeveListResponse",
    "ModelMemberSchema",
    "ModelCreateRequest",
    "EqualWeightModelRequest",
    "ModelResponse",
    "ModelListResponse",
    "TradeProposalResponse",
    "ProposedTradesResponse",
    "HarvestSummaryResponse",
    "SecurityDriftResponse",
    "SleeveDriftResponse",
    "AllocationDriftResponse",
    "PromoteRequest",
    "PromoteResponse",
    "OrderResponse",
    "OrderListResponse",
    "OrderUpdateRequest",
    "OrderStatusRequest",
    "ExecutionCreateRequest",
    "ExecutionResponse",
    "ExecutionListResponse",
]
