"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Boolean,
    Integer,
    Text,
    ForeignKey,
    Numeric,
    UniqueConstraint,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from rebalancer.core.timezone import now_eastern
from rebalancer.repositories.sqlalchemy.database import Base
from rebalancer.domain.models.enums import (
    AccountType,
    OrderStatus,
    OrderType,
    TimeInForce,
    TradingSession,
    TradeSide,
)


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"

    account_id = Column(String(36), primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    account_type = Column(SqlEnum(AccountType), default=AccountType.TAXABLE, nullable=False)
    created_at_est = Column(DateTime, nullable=False, default=now_eastern)

    holdings = relationship("HoldingORM", back_populates="account")


class SecurityORM(Base):
    """SQLAlchemy model for Security."""

    __tablename__ = "securities"

    ticker = Column(String(20), primary_key=True)
    name = Column(String(255), nullable=False, default="")
    price = Column(Numeric(precision=18, scale=4), nullable=True)
    sector = Column(String(100), nullable=True)
    industry = Column(String(100), nullable=True)
    asset_type = Column(String(50), nullable=False, default="EQUITY")


class HoldingORM(Base):
    """SQLAlchemy model for a Position."""

    __tablename__ = "holdings"

    position_id = Column(String(36), primary_key=True)
    account_id = Column(String(36), ForeignKey("accounts.account_id"), nullable=False)
    ticker = Column(String(20), nullable=False)
    qty = Column(Numeric(precision=18, scale=8), nullable=False)
    cost_basis_per_share = Column(Numeric(precision=18, scale=4), nullable=False)
    opened_at = Column(DateTime, nullable=False)
    sleeve_id = Column(String(36), nullable=True)

    account = relationship("AccountORM", back_populates="holdings")


class SleeveORM(Base):
    """SQLAlchemy model for Sleeve."""

    __tablename__ = "sleeves"

    sleeve_id = Column(String(36), primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at_est = Column(DateTime, nullable=False, default=now_eastern)

    members = relationship(
        "SleeveMemberORM",
        back_populates="sleeve",
        cascade="all, delete-orphan",
        order_by="SleeveMemberORM.rank",
    )


class SleeveMemberORM(Base):
    """SQLAlchemy model for SleeveMember."""

    __tablename__ = "sleeve_members"
    __table_args__ = (UniqueConstraint("sleeve_id", "ticker", name="uq_sleeve_member_ticker"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    sleeve_id = Column(String(36), ForeignKey("sleeves.sleeve_id"), nullable=False)
    ticker = Column(String(20), nullable=False)
    rank = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    is_legacy = Column(Boolean, nullable=False, default=False)

    sleeve = relationship("SleeveORM", back_populates="members")


class AllocationModelORM(Base):
    """SQLAlchemy model for AllocationModel."""

    __tablename__ = "allocation_models"

    model_id = Column(String(36), primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    updated_at_est = Column(DateTime, nullable=True, default=now_eastern, onupdate=now_eastern)

    members = relationship(
        "ModelMemberORM",
        back_populates="model",
        cascade="all, delete-orphan",
        order_by="ModelMemberORM.position",
    )


class ModelMemberORM(Base):
    """SQLAlchemy model for ModelMember."""

    __tablename__ = "model_members"
    __table_args__ = (UniqueConstraint("model_id", "sleeve_id", name="uq_model_member_sleeve"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    model_id = Column(String(36), ForeignKey("allocation_models.model_id"), nullable=False)
    sleeve_id = Column(String(36), ForeignKey("sleeves.sleeve_id"), nullable=False)
    target_weight_bps = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    position = Column(Integer, nullable=False, default=0)

    model = relationship("AllocationModelORM", back_populates="members")


class RestrictedSecurityORM(Base):
    """SQLAlchemy model for RestrictedSecurity (append-only)."""

    __tablename__ = "restricted_securities"

    restriction_id = Column(String(36), primary_key=True)
    ticker = Column(String(20), nullable=False, index=True)
    sleeve_id = Column(String(36), nullable=True)
    loss_amount = Column(Numeric(precision=18, scale=2), nullable=False)
    sold_at = Column(DateTime, nullable=False)
    blocked_until = Column(DateTime, nullable=False, index=True)


class TradeOrderORM(Base):
    """SQLAlchemy model for Order."""

    __tablename__ = "trade_orders"
    __table_args__ = (
        UniqueConstraint("account_id", "idempotency_key", name="uq_order_account_idempotency"),
    )

    order_id = Column(String(36), primary_key=True)
    account_id = Column(String(36), ForeignKey("accounts.account_id"), nullable=False)
    ticker = Column(String(20), nullable=False)
    side = Column(SqlEnum(TradeSide), nullable=False)
    qty = Column(Numeric(precision=18, scale=8), nullable=False)
    idempotency_key = Column(String(255), nullable=False)
    status = Column(SqlEnum(OrderStatus), nullable=False, default=OrderStatus.DRAFT)
    order_type = Column(SqlEnum(OrderType), nullable=False, default=OrderType.MARKET)
    limit_price = Column(Numeric(precision=18, scale=4), nullable=True)
    expected_price = Column(Numeric(precision=18, scale=4), nullable=True)
    time_in_force = Column(SqlEnum(TimeInForce), nullable=False, default=TimeInForce.DAY)
    session = Column(SqlEnum(TradingSession), nullable=False, default=TradingSession.NORMAL)
    sleeve_id = Column(String(36), nullable=True)
    cost_basis_per_share = Column(Numeric(precision=18, scale=4), nullable=True)
    batch_label = Column(String(255), nullable=True)
    broker_order_id = Column(String(64), nullable=True)
    preview_warn_count = Column(Integer, nullable=False, default=0)
    preview_error_count = Column(Integer, nullable=False, default=0)
    preview_first_message = Column(Text, nullable=True)
    preview_order_value = Column(Numeric(precision=18, scale=2), nullable=True)
    preview_commission = Column(Numeric(precision=18, scale=2), nullable=True)
    last_error = Column(Text, nullable=True)
    cancelable = Column(Boolean, nullable=False, default=False)
    editable = Column(Boolean, nullable=False, default=True)
    placed_at = Column(DateTime, nullable=True)
    closed_at = Column(DateTime, nullable=True)
    created_at_est = Column(DateTime, nullable=False, default=now_eastern)
    updated_at_est = Column(DateTime, nullable=True, onupdate=now_eastern)

    executions = relationship(
        "OrderExecutionORM",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderExecutionORM.executed_at",
    )


class OrderExecutionORM(Base):
    """SQLAlchemy model for OrderExecution (append-only fill log)."""

    __tablename__ = "order_executions"

    execution_id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey("trade_orders.order_id"), nullable=False)
    executed_at = Column(DateTime, nullable=False)
    price = Column(Numeric(precision=18, scale=4), nullable=False)
    qty = Column(Numeric(precision=18, scale=8), nullable=False)
    fee = Column(Numeric(precision=18, scale=2), default=Decimal("0"))
    created_at_est = Column(DateTime, nullable=False, default=now_eastern)

    order = relationship("TradeOrderORM", back_populates="executions")
