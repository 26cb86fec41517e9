"""Pydantic schemas for order endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from rebalancer.domain.models import OrderStatus, OrderType, TimeInForce, TradeSide, TradingSession


class OrderResponse(BaseModel):
    """Response schema for a single order."""

    model_config = {"from_attributes": True}

    order_id: str
    account_id: str
    ticker: str
    side: TradeSide
    qty: Decimal
    status: OrderStatus
    order_type: OrderType
    limit_price: Optional[Decimal] = None
    expected_price: Optional[Decimal] = None
    time_in_force: TimeInForce
    session: TradingSession
    idempotency_key: str
    sleeve_id: Optional[str] = None
    batch_label: Optional[str] = None
    broker_order_id: Optional[str] = None
    preview_warn_count: int
    preview_error_count: int
    preview_first_message: Optional[str] = None
    preview_order_value: Optional[Decimal] = None
    preview_commission: Optional[Decimal] = None
    last_error: Optional[str] = None
    cancelable: bool
    editable: bool
    placed_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at_est: Optional[datetime] = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]
    count: int


class OrderUpdateRequest(BaseModel):
    """Partial update for a pre-submit order."""

    qty: Optional[Decimal] = Field(default=None, gt=0)
    expected_price: Optional[Decimal] = Field(default=None, gt=0)
    order_type: Optional[OrderType] = None
    limit_price: Optional[Decimal] = Field(default=None, gt=0)
    time_in_force: Optional[TimeInForce] = None


class OrderStatusRequest(BaseModel):
    status: str = Field(..., description="Raw broker status")


class ExecutionCreateRequest(BaseModel):
    price: Decimal = Field(..., gt=0)
    qty: Decimal = Field(..., gt=0)
    fee: Decimal = Field(default=Decimal("0"), ge=0)
    executed_at: Optional[str] = Field(
        default=None,
        description="Fill time; values without an offset are US/Eastern (default: now)",
    )


class ExecutionResponse(BaseModel):
    model_config = {"from_attributes": True}

    execution_id: str
    order_id: str
    executed_at: datetime
    price: Decimal
    qty: Decimal
    fee: Decimal


class ExecutionListResponse(BaseModel):
    executions: list[ExecutionResponse]
    filled_qty: Decimal
    remaining_qty: Decimal
    average_price: Optional[Decimal] = None
    realized_pnl: Optional[Decimal] = None
