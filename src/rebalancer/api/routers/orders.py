"""Order lifecycle endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from rebalancer.api.deps import get_cache, get_order_manager
from rebalancer.core.timezone import parse_datetime_eastern
from rebalancer.api.schemas import (
    ExecutionCreateRequest,
    ExecutionListResponse,
    ExecutionResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusRequest,
    OrderUpdateRequest,
)
from rebalancer.services import OrderLifecycleManager, OrderUpdate, TTLCache

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/", response_model=OrderListResponse)
def list_orders(
    account_ids: Optional[str] = Query(None, description="Comma-separated account IDs"),
    batch_label: Optional[str] = Query(None),
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> OrderListResponse:
    ids = [a.strip() for a in account_ids.split(",") if a.strip()] if account_ids else None
    orders = manager.list_orders(account_ids=ids, batch_label=batch_label)
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        count=len(orders),
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> OrderResponse:
    return OrderResponse.model_validate(manager.get_order(order_id))


@router.patch("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: str,
    data: OrderUpdateRequest,
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> OrderResponse:
    """Edit a pre-submit order; it returns to DRAFT and must be previewed again."""
    order = manager.update_draft(
        order_id,
        OrderUpdate(
            qty=data.qty,
            expected_price=data.expected_price,
            order_type=data.order_type,
            limit_price=data.limit_price,
            time_in_force=data.time_in_force,
        ),
    )
    return OrderResponse.model_validate(order)


@router.delete("/{order_id}", status_code=204)
def delete_order(
    order_id: str,
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> None:
    manager.delete_draft(order_id)


@router.post("/{order_id}/preview", response_model=OrderResponse)
def preview_order(
    order_id: str,
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> OrderResponse:
    return OrderResponse.model_validate(manager.preview(order_id))


@router.post("/{order_id}/submit", response_model=OrderResponse)
def submit_order(
    order_id: str,
    manager: OrderLifecycleManager = Depends(get_order_manager),
    cache: TTLCache = Depends(get_cache),
) -> OrderResponse:
    """Submit a PREVIEW_OK or PREVIEW_WARN order to the broker."""
    order = manager.submit(order_id)
    cache.clear()
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    data: OrderStatusRequest,
    manager: OrderLifecycleManager = Depends(get_order_manager),
    cache: TTLCache = Depends(get_cache),
) -> OrderResponse:
    """Apply a broker status update to a live order."""
    order = manager.apply_status(order_id, data.status)
    cache.clear()
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/executions", response_model=ExecutionResponse, status_code=201)
def record_execution(
    order_id: str,
    data: ExecutionCreateRequest,
    manager: OrderLifecycleManager = Depends(get_order_manager),
    cache: TTLCache = Depends(get_cache),
) -> ExecutionResponse:
    """Append a fill; a SELL closing at a loss records a wash-sale restriction."""
    execution = manager.record_execution(
        order_id,
        price=data.price,
        qty=data.qty,
        fee=data.fee,
        executed_at=parse_datetime_eastern(data.executed_at) if data.executed_at else None,
    )
    cache.clear()
    return ExecutionResponse.model_validate(execution)


@router.get("/{order_id}/executions", response_model=ExecutionListResponse)
def list_executions(
    order_id: str,
    manager: OrderLifecycleManager = Depends(get_order_manager),
) -> ExecutionListResponse:
    executions = manager.list_executions(order_id)
    return ExecutionListResponse(
        executions=[ExecutionResponse.model_validate(e) for e in executions],
        filled_qty=manager.filled_quantity(order_id),
        remaining_qty=manager.remaining_quantity(order_id),
        average_price=manager.average_fill_price(order_id),
        realized_pnl=manager.realized_pnl(order_id),
    )
