"""Broker gateway protocol."""

from typing import Protocol

from rebalancer.domain.models import Order
from rebalancer.domain.views import PlacementResult, PreviewResult


class BrokerGateway(Protocol):
    """
    Protocol for brokerage order preview and placement.

    Timeouts and retries belong to implementations; the order lifecycle
    records whatever outcome (or exception) comes back.
    """

    def preview_order(self, order: Order) -> PreviewResult:
        """Ask the broker to validate an order without placing it."""
        ...

    def place_order(self, order: Order) -> PlacementResult:
        """Place an order; status is the broker's raw status string."""
        ...
