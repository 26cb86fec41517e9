"""Dependency injection for FastAPI."""

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from rebalancer.config.settings import get_settings
from rebalancer.providers.stub_broker import StubBrokerGateway
from rebalancer.repositories.sqlalchemy.database import get_db
from rebalancer.repositories.sqlalchemy import (
    SqlAlchemyHoldingRepository,
    SqlAlchemySecurityRepository,
    SqlAlchemySleeveRepository,
    SqlAlchemyAllocationModelRepository,
    SqlAlchemyRestrictionRepository,
    SqlAlchemyOrderRepository,
)
from rebalancer.services import (
    HarvestThresholds,
    ModelService,
    OrderLifecycleManager,
    RebalancingService,
    SleeveService,
    TTLCache,
)

# Process-wide cache for computed views; replaced per test via dependency_overrides
_cache: Optional[TTLCache] = None


def get_cache() -> TTLCache:
    """Provide the shared read-through cache."""
    global _cache
    if _cache is None:
        _cache = TTLCache(ttl_seconds=get_settings().cache_ttl_seconds)
    return _cache


def get_holding_repo(db: Session = Depends(get_db)) -> SqlAlchemyHoldingRepository:
    """Provide HoldingRepository instance."""
    return SqlAlchemyHoldingRepository(db)


def get_security_repo(db: Session = Depends(get_db)) -> SqlAlchemySecurityRepository:
    """Provide SecurityRepository instance."""
    return SqlAlchemySecurityRepository(db)


def get_sleeve_repo(db: Session = Depends(get_db)) -> SqlAlchemySleeveRepository:
    """Provide SleeveRepository instance."""
    return SqlAlchemySleeveRepository(db)


def get_model_repo(db: Session = Depends(get_db)) -> SqlAlchemyAllocationModelRepository:
    """Provide AllocationModelRepository instance."""
    return SqlAlchemyAllocationModelRepository(db)


def get_restriction_repo(db: Session = Depends(get_db)) -> SqlAlchemyRestrictionRepository:
    """Provide RestrictionRepository instance."""
    return SqlAlchemyRestrictionRepository(db)


def get_order_repo(db: Session = Depends(get_db)) -> SqlAlchemyOrderRepository:
    """Provide OrderRepository instance."""
    return SqlAlchemyOrderRepository(db)


def get_broker() -> StubBrokerGateway:
    """Provide BrokerGateway instance (stub for offline operation)."""
    return StubBrokerGateway()


def get_sleeve_service(
    sleeve_repo: SqlAlchemySleeveRepository = Depends(get_sleeve_repo),
    security_repo: SqlAlchemySecurityRepository = Depends(get_security_repo),
    model_repo: SqlAlchemyAllocationModelRepository = Depends(get_model_repo),
) -> SleeveService:
    """Provide SleeveService instance."""
    return SleeveService(
        sleeve_repo=sleeve_repo,
        security_repo=security_repo,
        model_repo=model_repo,
    )


def get_model_service(
    model_repo: SqlAlchemyAllocationModelRepository = Depends(get_model_repo),
    sleeve_repo: SqlAlchemySleeveRepository = Depends(get_sleeve_repo),
) -> ModelService:
    """Provide ModelService instance."""
    return ModelService(model_repo=model_repo, sleeve_repo=sleeve_repo)


def get_rebalancing_service(
    holding_repo: SqlAlchemyHoldingRepository = Depends(get_holding_repo),
    security_repo: SqlAlchemySecurityRepository = Depends(get_security_repo),
    sleeve_repo: SqlAlchemySleeveRepository = Depends(get_sleeve_repo),
    model_repo: SqlAlchemyAllocationModelRepository = Depends(get_model_repo),
    restriction_repo: SqlAlchemyRestrictionRepository = Depends(get_restriction_repo),
    cache: TTLCache = Depends(get_cache),
) -> RebalancingService:
    """Provide RebalancingService instance."""
    return RebalancingService(
        holding_repo=holding_repo,
        security_repo=security_repo,
        sleeve_repo=sleeve_repo,
        model_repo=model_repo,
        restriction_repo=restriction_repo,
        cache=cache,
        thresholds=HarvestThresholds.from_settings(),
    )


def get_order_manager(
    order_repo: SqlAlchemyOrderRepository = Depends(get_order_repo),
    restriction_repo: SqlAlchemyRestrictionRepository = Depends(get_restriction_repo),
    broker: StubBrokerGateway = Depends(get_broker),
) -> OrderLifecycleManager:
    """Provide OrderLifecycleManager instance."""
    return OrderLifecycleManager(
        order_repo=order_repo,
        broker=broker,
        restriction_repo=restriction_repo,
    )
