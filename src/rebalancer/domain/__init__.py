"""Domain layer - pure business models with no external dependencies."""

from rebalancer.domain.models import (
    Account,
    AccountType,
    Security,
    Sleeve,
    SleeveMember,
    Position,
    RestrictedSecurity,
    AllocationModel,
    ModelMember,
    Order,
    OrderExecution,
    OrderStatus,
    TradeSide,
)

__all__ = [
    "Account",
    "AccountType",
    "Security",
    "Sleeve",
    "SleeveMember",
    "Position",
    "RestrictedSecurity",
    "AllocationModel",
    "ModelMember",
    "Order",
    "OrderExecution",
    "OrderStatus",
    "TradeSide",
]
