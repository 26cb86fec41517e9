"""Service layer - rebalancing computations and orchestration."""

from rebalancer.services.wash_sale_tracker import WashSaleTracker
from rebalancer.services.sleeve_registry import SleeveRegistry
from rebalancer.services.candidate_selector import (
    HarvestThresholds,
    qualifies_for_harvest,
    select_harvest_candidates,
    value_position,
)
from rebalancer.services.replacement_resolver import ReplacementResolver
from rebalancer.services.trade_proposals import compute_proposed_trades, summarize_harvestable_losses
from rebalancer.services.allocation_drift import (
    compute_allocation_drift,
    equal_weight_distribution,
    resolve_model_weights,
)
from rebalancer.services.order_lifecycle import (
    OrderLifecycleManager,
    IdempotencyPolicy,
    OrderUpdate,
    normalize_broker_status,
)
from rebalancer.services.cache_service import CacheKey, TTLCache
from rebalancer.services.sleeve_service import SleeveService, SleeveCreate, SleeveMemberInput
from rebalancer.services.model_service import ModelService, ModelCreate, ModelMemberInput
from rebalancer.services.rebalancing_service import RebalancingService

__all__ = [
    "WashSaleTracker",
    "SleeveRegistry",
    "HarvestThresholds",
    "qualifies_for_harvest",
    "select_harvest_candidates",
    "value_position",
    "ReplacementResolver",
    "compute_proposed_trades",
    "summarize_harvestable_losses",
    "compute_allocation_drift",
    "equal_weight_distribution",
    "resolve_model_weights",
    "OrderLifecycleManager",
    "IdempotencyPolicy",
    "OrderUpdate",
    "normalize_broker_status",
    "CacheKey",
    "TTLCache",
    "SleeveService",
    "SleeveCreate",
    "SleeveMemberInput",
    "ModelService",
    "ModelCreate",
    "ModelMemberInput",
    "RebalancingService",
]
