"""Repository protocol definitions (interfaces)."""

from rebalancer.repositories.protocols.account_repo import AccountRepository, HoldingRepository
from rebalancer.repositories.protocols.security_repo import SecurityRepository
from rebalancer.repositories.protocols.sleeve_repo import SleeveRepository, AllocationModelRepository
from rebalancer.repositories.protocols.restriction_repo import RestrictionRepository
from rebalancer.repositories.protocols.order_repo import OrderRepository

__all__ = [
    "AccountRepository",
    "HoldingRepository",
    "SecurityRepository",
    "SleeveRepository",
    "AllocationModelRepository",
    "RestrictionRepository",
    "OrderRepository",
]
