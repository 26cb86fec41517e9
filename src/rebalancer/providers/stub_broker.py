"""Stub broker gateway for offline/testing use."""

from decimal import Decimal
from typing import Optional

from rebalancer.core.money import round_money
from rebalancer.domain.models import Order, OrderType
from rebalancer.domain.views import PlacementResult, PreviewMessage, PreviewResult

# Orders above this notional get a warning, mirroring a typical broker check
LARGE_ORDER_WARN_THRESHOLD = Decimal("100000")


class StubBrokerGateway:
    """
    Deterministic broker for offline operation.

    Rejects orders with no usable price or quantity, warns on large orders,
    and acknowledges placements with a fixed status.
    """

    def __init__(self, placement_status: str = "ACCEPTED", commission: Optional[Decimal] = None):
        self._placement_status = placement_status
        self._commission = commission if commission is not None else Decimal("0")

    def preview_order(self, order: Order) -> PreviewResult:
        """Return deterministic preview messages for an order."""
        price = order.limit_price if order.order_type == OrderType.LIMIT else order.expected_price
        messages: list[PreviewMessage] = []

        if order.qty <= 0:
            messages.append(PreviewMessage("REJECT", "Quantity must be positive"))
        if price is None or price <= 0:
            messages.append(PreviewMessage("REJECT", "No price available to value order"))
            return PreviewResult(messages=messages, commission=self._commission)

        order_value = round_money(order.qty * price)
        if order_value > LARGE_ORDER_WARN_THRESHOLD:
            messages.append(PreviewMessage("WARN", f"Order value ${order_value:,.2f} exceeds $100,000"))

        return PreviewResult(messages=messages, order_value=order_value, commission=self._commission)

    def place_order(self, order: Order) -> PlacementResult:
        return PlacementResult(
            broker_order_id=f"STUB-{order.order_id[:8].upper()}",
            status=self._placement_status,
        )
