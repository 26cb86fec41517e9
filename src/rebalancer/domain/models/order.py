"""Order and execution domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from rebalancer.core.money import to_cents
from rebalancer.domain.models.enums import (
    OrderStatus,
    OrderType,
    TimeInForce,
    TradingSession,
    TradeSide,
)


def build_idempotency_key(
    account_id: str,
    ticker: str,
    side: TradeSide,
    qty: Decimal,
    price: Decimal,
) -> str:
    """Derive the key identifying an already-queued order."""
    side_value = side.value if isinstance(side, TradeSide) else str(side)
    return f"{account_id}_{ticker.upper()}_{side_value}_{qty.normalize():f}_{to_cents(price)}"


@dataclass
class Order:
    """
    Persisted single-leg order created from a trade proposal.

    Executions are appended separately; remaining quantity and realized P&L
    are derived from them.
    """

    order_id: str
    account_id: str
    ticker: str
    side: TradeSide
    qty: Decimal
    idempotency_key: str
    status: OrderStatus = OrderStatus.DRAFT
    order_type: OrderType = OrderType.MARKET
    limit_price: Optional[Decimal] = None
    expected_price: Optional[Decimal] = None
    time_in_force: TimeInForce = TimeInForce.DAY
    session: TradingSession = TradingSession.NORMAL
    sleeve_id: Optional[str] = None
    cost_basis_per_share: Optional[Decimal] = None
    batch_label: Optional[str] = None
    broker_order_id: Optional[str] = None
    preview_warn_count: int = 0
    preview_error_count: int = 0
    preview_first_message: Optional[str] = None
    preview_order_value: Optional[Decimal] = None
    preview_commission: Optional[Decimal] = None
    last_error: Optional[str] = None
    cancelable: bool = False
    editable: bool = True
    placed_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    created_at_est: Optional[datetime] = None
    updated_at_est: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.ticker = self.ticker.upper()
        if isinstance(self.side, str):
            self.side = TradeSide(self.side)
        if isinstance(self.status, str):
            self.status = OrderStatus(self.status)
        if isinstance(self.order_type, str):
            self.order_type = OrderType(self.order_type)
        if isinstance(self.time_in_force, str):
            self.time_in_force = TimeInForce(self.time_in_force)
        if isinstance(self.session, str):
            self.session = TradingSession(self.session)


@dataclass(frozen=True)
class OrderExecution:
    """Immutable fill record appended to an order."""

    execution_id: str
    order_id: str
    executed_at: datetime
    price: Decimal
    qty: Decimal
    fee: Decimal = field(default_factory=lambda: Decimal("0"))
