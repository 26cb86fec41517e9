"""SQLAlchemy implementation of OrderRepository."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rebalancer.core.exceptions import DuplicateOrderError
from rebalancer.core.timezone import to_eastern
from rebalancer.domain.models import Order, OrderExecution
from rebalancer.repositories.sqlalchemy.orm_models import OrderExecutionORM, TradeOrderORM


def _to_db_time(value: Optional[datetime]) -> Optional[datetime]:
    return to_eastern(value) if value else None


def _from_db_time(value: Optional[datetime]) -> Optional[datetime]:
    return to_eastern(value) if value else None


class SqlAlchemyOrderRepository:
    """
    SQLAlchemy-backed order repository.

    The (account_id, idempotency_key) unique constraint is the only guard
    against queuing the same order twice; violations surface as
    DuplicateOrderError.
    """

    def __init__(self, db: Session):
        self._db = db

    def create(self, order: Order) -> Order:
        """Persist a new order."""
        orm_order = TradeOrderORM(order_id=order.order_id)
        self._apply(orm_order, order)
        if order.created_at_est is not None:
            orm_order.created_at_est = _to_db_time(order.created_at_est)
        self._db.add(orm_order)
        self._commit(order)
        self._db.refresh(orm_order)
        return self._to_domain(orm_order)

    def get_by_id(self, order_id: str) -> Optional[Order]:
        orm_order = self._db.get(TradeOrderORM, order_id)
        return self._to_domain(orm_order) if orm_order else None

    def list_orders(
        self,
        account_ids: Optional[list[str]] = None,
        batch_label: Optional[str] = None,
    ) -> list[Order]:
        """List orders, newest first."""
        query = self._db.query(TradeOrderORM)
        if account_ids is not None:
            query = query.filter(TradeOrderORM.account_id.in_(account_ids))
        if batch_label is not None:
            query = query.filter(TradeOrderORM.batch_label == batch_label)
        orm_orders = query.order_by(
            TradeOrderORM.created_at_est.desc(),
            TradeOrderORM.order_id,
        ).all()
        return [self._to_domain(o) for o in orm_orders]

    def update(self, order: Order) -> Order:
        """Update an existing order."""
        orm_order = self._db.get(TradeOrderORM, order.order_id)
        if not orm_order:
            raise ValueError(f"Order not found: {order.order_id}")
        self._apply(orm_order, order)
        self._commit(order)
        self._db.refresh(orm_order)
        return self._to_domain(orm_order)

    def delete(self, order_id: str) -> None:
        orm_order = self._db.get(TradeOrderORM, order_id)
        if orm_order:
            self._db.delete(orm_order)
            self._db.commit()

    def add_execution(self, execution: OrderExecution) -> OrderExecution:
        """Append an execution record."""
        orm_execution = OrderExecutionORM(
            execution_id=execution.execution_id,
            order_id=execution.order_id,
            executed_at=_to_db_time(execution.executed_at),
            price=execution.price,
            qty=execution.qty,
            fee=execution.fee,
        )
        self._db.add(orm_execution)
        self._db.commit()
        self._db.refresh(orm_execution)
        return self._execution_to_domain(orm_execution)

    def list_executions(self, order_id: str) -> list[OrderExecution]:
        orm_executions = self._db.query(OrderExecutionORM).filter(
            OrderExecutionORM.order_id == order_id
        ).order_by(OrderExecutionORM.executed_at, OrderExecutionORM.created_at_est).all()
        return [self._execution_to_domain(e) for e in orm_executions]

    def _commit(self, order: Order) -> None:
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            raise DuplicateOrderError(order.account_id, order.idempotency_key) from exc

    @staticmethod
    def _apply(orm: TradeOrderORM, order: Order) -> None:
        orm.account_id = order.account_id
        orm.ticker = order.ticker
        orm.side = order.side
        orm.qty = order.qty
        orm.idempotency_key = order.idempotency_key
        orm.status = order.status
        orm.order_type = order.order_type
        orm.limit_price = order.limit_price
        orm.expected_price = order.expected_price
        orm.time_in_force = order.time_in_force
        orm.session = order.session
        orm.sleeve_id = order.sleeve_id
        orm.cost_basis_per_share = order.cost_basis_per_share
        orm.batch_label = order.batch_label
        orm.broker_order_id = order.broker_order_id
        orm.preview_warn_count = order.preview_warn_count
        orm.preview_error_count = order.preview_error_count
        orm.preview_first_message = order.preview_first_message
        orm.preview_order_value = order.preview_order_value
        orm.preview_commission = order.preview_commission
        orm.last_error = order.last_error
        orm.cancelable = order.cancelable
        orm.editable = order.editable
        orm.placed_at = _to_db_time(order.placed_at)
        orm.closed_at = _to_db_time(order.closed_at)

    @staticmethod
    def _to_domain(orm: TradeOrderORM) -> Order:
        """Convert ORM model to domain model."""
        return Order(
            order_id=orm.order_id,
            account_id=orm.account_id,
            ticker=orm.ticker,
            side=orm.side,
            qty=orm.qty,
            idempotency_key=orm.idempotency_key,
            status=orm.status,
            order_type=orm.order_type,
            limit_price=orm.limit_price,
            expected_price=orm.expected_price,
            time_in_force=orm.time_in_force,
            session=orm.session,
            sleeve_id=orm.sleeve_id,
            cost_basis_per_share=orm.cost_basis_per_share,
            batch_label=orm.batch_label,
            broker_order_id=orm.broker_order_id,
            preview_warn_count=orm.preview_warn_count,
            preview_error_count=orm.preview_error_count,
            preview_first_message=orm.preview_first_message,
            preview_order_value=orm.preview_order_value,
            preview_commission=orm.preview_commission,
            last_error=orm.last_error,
            cancelable=orm.cancelable,
            editable=orm.editable,
            placed_at=_from_db_time(orm.placed_at),
            closed_at=_from_db_time(orm.closed_at),
            created_at_est=_from_db_time(orm.created_at_est),
            updated_at_est=_from_db_time(orm.updated_at_est),
        )

    @staticmethod
    def _execution_to_domain(orm: OrderExecutionORM) -> OrderExecution:
        return OrderExecution(
            execution_id=orm.execution_id,
            order_id=orm.order_id,
            executed_at=to_eastern(orm.executed_at),
            price=orm.price,
            qty=orm.qty,
            fee=orm.fee,
        )
