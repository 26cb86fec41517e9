"""Order repository protocol."""

from typing import Protocol, Optional

from rebalancer.domain.models import Order, OrderExecution


class OrderRepository(Protocol):
    """Interface for orders and their append-only execution log."""

    def create(self, order: Order) -> Order:
        """
        Persist a new order.

        Raises DuplicateOrderError when the account already has an order with
        the same idempotency key.
        """
        ...

    def get_by_id(self, order_id: str) -> Optional[Order]:
        ...

    def list_orders(
        self,
        account_ids: Optional[list[str]] = None,
        batch_label: Optional[str] = None,
    ) -> list[Order]:
        """List orders, newest first."""
        ...

    def update(self, order: Order) -> Order:
        """Update an existing order (raises DuplicateOrderError on key collision)."""
        ...

    def delete(self, order_id: str) -> None:
        ...

    def add_execution(self, execution: OrderExecution) -> OrderExecution:
        """Append an execution record."""
        ...

    def list_executions(self, order_id: str) -> list[OrderExecution]:
        """Executions for an order in time order."""
        ...
