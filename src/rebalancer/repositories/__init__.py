"""Repository layer - data access abstractions and implementations."""

from rebalancer.repositories.protocols import (
    AccountRepository,
    HoldingRepository,
    SecurityRepository,
    SleeveRepository,
    AllocationModelRepository,
    RestrictionRepository,
    OrderRepository,
)

__all__ = [
    "AccountRepository",
    "HoldingRepository",
    "SecurityRepository",
    "SleeveRepository",
    "AllocationModelRepository",
    "RestrictionRepository",
    "OrderRepository",
]
