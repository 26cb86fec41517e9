"""Domain models package."""

from rebalancer.domain.models.enums import (
    AccountType,
    TradeSide,
    OrderStatus,
    OrderType,
    TimeInForce,
    TradingSession,
    BlockingKind,
    SUBMITTABLE_STATUSES,
    PRE_SUBMIT_STATUSES,
    BROKER_STATUSES,
    TERMINAL_STATUSES,
)
from rebalancer.domain.models.account import Account
from rebalancer.domain.models.security import Security, CASH_TICKERS, is_cash_ticker
from rebalancer.domain.models.sleeve import Sleeve, SleeveMember
from rebalancer.domain.models.position import Position
from rebalancer.domain.models.restriction import RestrictedSecurity, WASH_SALE_WINDOW_DAYS
from rebalancer.domain.models.allocation_model import AllocationModel, ModelMember
from rebalancer.domain.models.order import Order, OrderExecution, build_idempotency_key

__all__ = [
    "AccountType",
    "TradeSide",
    "OrderStatus",
    "OrderType",
    "TimeInForce",
    "TradingSession",
    "BlockingKind",
    "SUBMITTABLE_STATUSES",
    "PRE_SUBMIT_STATUSES",
    "BROKER_STATUSES",
    "TERMINAL_STATUSES",
    "Account",
    "Security",
    "CASH_TICKERS",
    "is_cash_ticker",
    "Sleeve",
    "SleeveMember",
    "Position",
    "RestrictedSecurity",
    "WASH_SALE_WINDOW_DAYS",
    "AllocationModel",
    "ModelMember",
    "Order",
    "OrderExecution",
    "build_idempotency_key",
]
