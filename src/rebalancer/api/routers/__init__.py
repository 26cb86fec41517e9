"""API routers package."""

from rebalancer.api.routers.sleeves import router as sleeves_router
from rebalancer.api.routers.models import router as models_router
from rebalancer.api.routers.rebalancing import router as rebalancing_router
from rebalancer.api.routers.orders import router as orders_router

__all__ = [
    "sleeves_router",
    "models_router",
    "rebalancing_router",
    "orders_router",
]
