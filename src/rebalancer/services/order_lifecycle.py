"""Order lifecycle: promotion from proposals, preview, submission and fills."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from rebalancer.config.settings import get_settings
from rebalancer.core.exceptions import (
    DuplicateOrderError,
    NotFoundError,
    OrderStateError,
    ValidationError,
)
from rebalancer.core.money import ZERO, round_money
from rebalancer.core.timezone import now_eastern
from rebalancer.domain.models import (
    BROKER_STATUSES,
    PRE_SUBMIT_STATUSES,
    SUBMITTABLE_STATUSES,
    TERMINAL_STATUSES,
    Order,
    OrderExecution,
    OrderStatus,
    OrderType,
    RestrictedSecurity,
    TimeInForce,
    TradeSide,
    build_idempotency_key,
)
from rebalancer.domain.views import PromotionResult, TradeProposal
from rebalancer.providers.broker_gateway import BrokerGateway
from rebalancer.repositories.protocols import OrderRepository, RestrictionRepository

logger = logging.getLogger(__name__)


@dataclass
class IdempotencyPolicy:
    """
    How proposals become draft orders.

    account_id_override routes every order to one account. Blocked proposals
    (can_execute false) are skipped unless include_blocked is set.
    """

    batch_label: Optional[str] = None
    account_id_override: Optional[str] = None
    include_blocked: bool = False


@dataclass
class OrderUpdate:
    """Partial update for a pre-submit order."""

    qty: Optional[Decimal] = None
    expected_price: Optional[Decimal] = None
    order_type: Optional[OrderType] = None
    limit_price: Optional[Decimal] = None
    time_in_force: Optional[TimeInForce] = None


class OrderLifecycleManager:
    """
    Drives orders through DRAFT -> PREVIEW_* -> broker states.

    Only PREVIEW_OK and PREVIEW_WARN orders may be submitted; anything else
    raises OrderStateError. Fills are appended as immutable executions and
    remaining quantity and realized P&L are always derived from that log.
    A SELL that closes with a realized loss records a wash-sale restriction.
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        broker: BrokerGateway,
        restriction_repo: Optional[RestrictionRepository] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._order_repo = order_repo
        self._broker = broker
        self._restriction_repo = restriction_repo
        self._clock = clock or now_eastern

    # -------------------------------------------------------------------------
    # Promotion
    # -------------------------------------------------------------------------

    def promote_proposals_to_orders(
        self,
        proposals: Iterable[TradeProposal],
        policy: Optional[IdempotencyPolicy] = None,
    ) -> PromotionResult:
        """
        Create DRAFT orders from proposals.

        Proposals without a positive quantity, a positive price or an account
        are skipped. A proposal whose idempotency key is already queued for
        the account counts as skipped, not as an error.
        """
        policy = policy or IdempotencyPolicy()
        result = PromotionResult()

        for proposal in proposals:
            account_id = policy.account_id_override or proposal.account_id
            if not policy.include_blocked and not proposal.can_execute:
                result.skipped += 1
                continue
            if not account_id or proposal.qty is None or proposal.qty <= ZERO:
                result.skipped += 1
                continue
            if proposal.price is None or proposal.price <= ZERO:
                result.skipped += 1
                continue

            order = self._draft_from_proposal(proposal, account_id, policy.batch_label)
            try:
                created = self._order_repo.create(order)
            except DuplicateOrderError:
                logger.warning(f"Skipping duplicate draft order {order.idempotency_key}")
                result.skipped += 1
                continue

            result.created += 1
            result.order_ids.append(created.order_id)

        logger.info(f"Promoted proposals: {result.created} created, {result.skipped} skipped")
        return result

    def _draft_from_proposal(
        self,
        proposal: TradeProposal,
        account_id: str,
        batch_label: Optional[str],
    ) -> Order:
        now = self._clock()
        return Order(
            order_id=str(uuid.uuid4()),
            account_id=account_id,
            ticker=proposal.ticker,
            side=proposal.side,
            qty=proposal.qty,
            idempotency_key=build_idempotency_key(
                account_id, proposal.ticker, proposal.side, proposal.qty, proposal.price
            ),
            status=OrderStatus.DRAFT,
            order_type=OrderType.MARKET,
            expected_price=proposal.price,
            sleeve_id=proposal.sleeve_id,
            cost_basis_per_share=proposal.cost_basis_per_share,
            batch_label=batch_label,
            created_at_est=now,
            updated_at_est=now,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def list_orders(
        self,
        account_ids: Optional[list[str]] = None,
        batch_label: Optional[str] = None,
    ) -> list[Order]:
        return self._order_repo.list_orders(account_ids=account_ids, batch_label=batch_label)

    def list_executions(self, order_id: str) -> list[OrderExecution]:
        self.get_order(order_id)
        return self._order_repo.list_executions(order_id)

    def filled_quantity(self, order_id: str) -> Decimal:
        return sum((e.qty for e in self._order_repo.list_executions(order_id)), ZERO)

    def remaining_quantity(self, order_id: str) -> Decimal:
        order = self.get_order(order_id)
        return max(ZERO, order.qty - self.filled_quantity(order_id))

    def average_fill_price(self, order_id: str) -> Optional[Decimal]:
        executions = self._order_repo.list_executions(order_id)
        filled = sum((e.qty for e in executions), ZERO)
        if filled <= ZERO:
            return None
        return sum((e.price * e.qty for e in executions), ZERO) / filled

    def realized_pnl(self, order_id: str) -> Optional[Decimal]:
        """
        Realized gain/loss of a SELL: (fill price - cost basis) * qty - fees.

        None for BUY orders or when the cost basis is unknown.
        """
        order = self.get_order(order_id)
        if order.side != TradeSide.SELL or order.cost_basis_per_share is None:
            return None
        executions = self._order_repo.list_executions(order_id)
        pnl = sum(
            ((e.price - order.cost_basis_per_share) * e.qty - e.fee for e in executions),
            ZERO,
        )
        return round_money(pnl)

    # -------------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------------

    def update_draft(self, order_id: str, patch: OrderUpdate) -> Order:
        """
        Edit a pre-submit order.

        The order returns to DRAFT (any earlier preview is void) and its
        idempotency key is recomputed from the new values.
        """
        order = self._require_pre_submit(order_id, "edited")

        if patch.qty is not None:
            if patch.qty <= ZERO:
                raise ValidationError("Quantity must be positive")
            order.qty = patch.qty
        if patch.expected_price is not None:
            if patch.expected_price <= ZERO:
                raise ValidationError("Price must be positive")
            order.expected_price = patch.expected_price
        if patch.order_type is not None:
            order.order_type = patch.order_type
        if patch.limit_price is not None:
            order.limit_price = patch.limit_price
        if patch.time_in_force is not None:
            order.time_in_force = patch.time_in_force
        if order.order_type == OrderType.LIMIT and order.limit_price is None:
            raise ValidationError("Limit orders require a limit price")

        key_price = order.limit_price if order.order_type == OrderType.LIMIT else order.expected_price
        order.idempotency_key = build_idempotency_key(
            order.account_id, order.ticker, order.side, order.qty, key_price or ZERO
        )
        self._reset_preview(order)
        order.status = OrderStatus.DRAFT
        order.updated_at_est = self._clock()
        return self._order_repo.update(order)

    def delete_draft(self, order_id: str) -> None:
        self._require_pre_submit(order_id, "deleted")
        self._order_repo.delete(order_id)

    # -------------------------------------------------------------------------
    # Preview and submission
    # -------------------------------------------------------------------------

    def preview(self, order_id: str) -> Order:
        """
        Preview an order with the broker and record the outcome.

        Any reject -> PREVIEW_ERROR, any warning -> PREVIEW_WARN, otherwise
        PREVIEW_OK. A broker failure is recorded as PREVIEW_ERROR.
        """
        order = self._require_pre_submit(order_id, "previewed")
        self._reset_preview(order)

        try:
            result = self._broker.preview_order(order)
        except Exception as exc:
            logger.exception(f"Preview failed for order {order_id}")
            order.status = OrderStatus.PREVIEW_ERROR
            order.preview_error_count = 1
            order.preview_first_message = str(exc)
            order.last_error = str(exc)
        else:
            rejects, warns = result.rejects, result.warns
            if rejects:
                order.status = OrderStatus.PREVIEW_ERROR
            elif warns:
                order.status = OrderStatus.PREVIEW_WARN
            else:
                order.status = OrderStatus.PREVIEW_OK
            order.preview_error_count = len(rejects)
            order.preview_warn_count = len(warns)
            first = (rejects or warns or result.messages or [None])[0]
            order.preview_first_message = first.text if first else None
            order.preview_order_value = result.order_value
            order.preview_commission = result.commission

        order.updated_at_est = self._clock()
        logger.info(f"Order {order_id} previewed: {order.status.value}")
        return self._order_repo.update(order)

    def submit(self, order_id: str) -> Order:
        """
        Place a previewed order.

        Raises OrderStateError unless the order is PREVIEW_OK or PREVIEW_WARN.
        The broker's status is normalized to a known broker state; a broker
        failure marks the order REJECTED. Nothing is retried.
        """
        order = self.get_order(order_id)
        if order.status not in SUBMITTABLE_STATUSES:
            raise OrderStateError(
                "Order must be previewed successfully (OK or WARN) before submission"
            )

        now = self._clock()
        try:
            placement = self._broker.place_order(order)
        except Exception as exc:
            logger.exception(f"Submission failed for order {order_id}")
            order.status = OrderStatus.REJECTED
            order.last_error = str(exc)
            order.closed_at = now
        else:
            order.status = normalize_broker_status(placement.status)
            order.broker_order_id = placement.broker_order_id
            order.placed_at = now
            order.last_error = None
            if order.status in TERMINAL_STATUSES:
                order.closed_at = now

        order.cancelable = order.status not in TERMINAL_STATUSES
        order.editable = False
        order.updated_at_est = now
        logger.info(f"Order {order_id} submitted: {order.status.value}")
        saved = self._order_repo.update(order)
        if saved.status in TERMINAL_STATUSES:
            self._on_closed(saved)
        return saved

    # -------------------------------------------------------------------------
    # Broker updates and fills
    # -------------------------------------------------------------------------

    def apply_status(self, order_id: str, status: str) -> Order:
        """Apply a status update reported by the broker for a live order."""
        order = self._require_live(order_id)
        new_status = normalize_broker_status(status)

        order.status = new_status
        order.updated_at_est = self._clock()
        if new_status in TERMINAL_STATUSES:
            order.closed_at = order.updated_at_est
            order.cancelable = False
        saved = self._order_repo.update(order)
        logger.info(f"Order {order_id} status -> {new_status.value}")
        if new_status in TERMINAL_STATUSES:
            self._on_closed(saved)
        return saved

    def record_execution(
        self,
        order_id: str,
        price: Decimal,
        qty: Decimal,
        fee: Decimal = ZERO,
        executed_at: Optional[datetime] = None,
    ) -> OrderExecution:
        """
        Append a fill to a live order.

        The order moves to PARTIALLY_FILLED, or FILLED once nothing remains.
        """
        order = self._require_live(order_id)
        if qty <= ZERO:
            raise ValidationError("Execution quantity must be positive")
        if price <= ZERO:
            raise ValidationError("Execution price must be positive")
        remaining = order.qty - self.filled_quantity(order_id)
        if qty > remaining:
            raise ValidationError(
                f"Execution quantity {qty} exceeds remaining quantity {remaining}"
            )

        execution = self._order_repo.add_execution(
            OrderExecution(
                execution_id=str(uuid.uuid4()),
                order_id=order_id,
                executed_at=executed_at or self._clock(),
                price=price,
                qty=qty,
                fee=fee,
            )
        )

        status = OrderStatus.FILLED if qty == remaining else OrderStatus.PARTIALLY_FILLED
        self.apply_status(order_id, status.value)
        return execution

    def _on_closed(self, order: Order) -> None:
        """Record a wash-sale restriction when a SELL closes at a realized loss."""
        if self._restriction_repo is None or order.side != TradeSide.SELL:
            return
        executions = self._order_repo.list_executions(order.order_id)
        if not executions:
            return
        pnl = self.realized_pnl(order.order_id)
        if pnl is None or pnl >= ZERO:
            return

        restriction = RestrictedSecurity.from_sale(
            restriction_id=str(uuid.uuid4()),
            ticker=order.ticker,
            sleeve_id=order.sleeve_id,
            loss_amount=pnl,
            sold_at=max(e.executed_at for e in executions),
            window_days=get_settings().wash_sale_window_days,
        )
        self._restriction_repo.create(restriction)
        logger.info(
            f"Wash-sale restriction on {order.ticker} until {restriction.blocked_until:%Y-%m-%d} "
            f"(loss {restriction.loss_amount})"
        )

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def _require_pre_submit(self, order_id: str, action: str) -> Order:
        order = self.get_order(order_id)
        if order.status not in PRE_SUBMIT_STATUSES:
            raise OrderStateError(
                f"Order in status {order.status.value} cannot be {action}"
            )
        return order

    def _require_live(self, order_id: str) -> Order:
        order = self.get_order(order_id)
        if order.status not in BROKER_STATUSES or order.status in TERMINAL_STATUSES:
            raise OrderStateError(
                f"Order in status {order.status.value} is not open at the broker"
            )
        return order

    @staticmethod
    def _reset_preview(order: Order) -> None:
        order.preview_warn_count = 0
        order.preview_error_count = 0
        order.preview_first_message = None
        order.preview_order_value = None
        order.preview_commission = None
        order.last_error = None


def normalize_broker_status(status: str) -> OrderStatus:
    """Map a raw broker status to a known broker state; unknown values become ACCEPTED."""
    try:
        candidate = OrderStatus(str(status).upper())
    except ValueError:
        return OrderStatus.ACCEPTED
    if candidate not in BROKER_STATUSES:
        return OrderStatus.ACCEPTED
    return candidate
