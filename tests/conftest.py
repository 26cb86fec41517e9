"""
Pytest configuration and fixtures for rebalancer tests.

This module provides:
- In-memory SQLite database fixtures
- Repository and service fixtures
- Factory helpers for positions, sleeves and restrictions
- A recording broker for order lifecycle tests
- Time helpers for Eastern timezone
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from rebalancer.main import app
from rebalancer.api.deps import get_cache
from rebalancer.config.settings import Settings, reset_settings, set_settings
from rebalancer.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from rebalancer.repositories.sqlalchemy import orm_models  # noqa: F401
from rebalancer.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyHoldingRepository,
    SqlAlchemySecurityRepository,
    SqlAlchemySleeveRepository,
    SqlAlchemyAllocationModelRepository,
    SqlAlchemyRestrictionRepository,
    SqlAlchemyOrderRepository,
)
from rebalancer.providers.stub_broker import StubBrokerGateway
from rebalancer.services import (
    HarvestThresholds,
    ModelService,
    OrderLifecycleManager,
    RebalancingService,
    SleeveService,
    TTLCache,
)
from rebalancer.domain.models import (
    Account,
    AccountType,
    Position,
    RestrictedSecurity,
    Security,
    Sleeve,
    SleeveMember,
)
from rebalancer.domain.views import PlacementResult, PreviewMessage, PreviewResult
from rebalancer.core.timezone import EASTERN_TZ


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def account_repo(test_session) -> SqlAlchemyAccountRepository:
    return SqlAlchemyAccountRepository(test_session)


@pytest.fixture
def holding_repo(test_session) -> SqlAlchemyHoldingRepository:
    return SqlAlchemyHoldingRepository(test_session)


@pytest.fixture
def security_repo(test_session) -> SqlAlchemySecurityRepository:
    return SqlAlchemySecurityRepository(test_session)


@pytest.fixture
def sleeve_repo(test_session) -> SqlAlchemySleeveRepository:
    return SqlAlchemySleeveRepository(test_session)


@pytest.fixture
def model_repo(test_session) -> SqlAlchemyAllocationModelRepository:
    return SqlAlchemyAllocationModelRepository(test_session)


@pytest.fixture
def restriction_repo(test_session) -> SqlAlchemyRestrictionRepository:
    return SqlAlchemyRestrictionRepository(test_session)


@pytest.fixture
def order_repo(test_session) -> SqlAlchemyOrderRepository:
    return SqlAlchemyOrderRepository(test_session)


# =============================================================================
# BROKER FIXTURES
# =============================================================================


class ScriptedBroker:
    """
    Broker double returning queued preview results.

    Records every order it sees so tests can assert on calls.
    """

    def __init__(
        self,
        preview: Optional[PreviewResult] = None,
        placement_status: str = "ACCEPTED",
    ):
        self.preview_result = preview or PreviewResult(messages=[], order_value=Decimal("0"))
        self.placement_status = placement_status
        self.previewed: list[str] = []
        self.placed: list[str] = []

    def preview_order(self, order) -> PreviewResult:
        self.previewed.append(order.order_id)
        return self.preview_result

    def place_order(self, order) -> PlacementResult:
        self.placed.append(order.order_id)
        return PlacementResult(broker_order_id=f"B-{len(self.placed)}", status=self.placement_status)


class FailingBroker:
    """Broker that always raises."""

    def preview_order(self, order) -> PreviewResult:
        raise ConnectionError("Broker unavailable")

    def place_order(self, order) -> PlacementResult:
        raise ConnectionError("Broker unavailable")


def warn_preview(text: str = "Order exceeds typical size") -> PreviewResult:
    return PreviewResult(messages=[PreviewMessage("WARN", text)], order_value=Decimal("1000.00"))


def reject_preview(text: str = "Insufficient funds") -> PreviewResult:
    return PreviewResult(messages=[PreviewMessage("REJECT", text)])


@pytest.fixture
def stub_broker() -> StubBrokerGateway:
    return StubBrokerGateway()


@pytest.fixture
def scripted_broker() -> ScriptedBroker:
    return ScriptedBroker()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def sleeve_service(sleeve_repo, security_repo, model_repo) -> SleeveService:
    """Provide test SleeveService."""
    return SleeveService(
        sleeve_repo=sleeve_repo,
        security_repo=security_repo,
        model_repo=model_repo,
    )


@pytest.fixture
def model_service(model_repo, sleeve_repo) -> ModelService:
    """Provide test ModelService."""
    return ModelService(model_repo=model_repo, sleeve_repo=sleeve_repo)


@pytest.fixture
def rebalancing_service(
    holding_repo,
    security_repo,
    sleeve_repo,
    model_repo,
    restriction_repo,
    fixed_now,
) -> RebalancingService:
    """Provide test RebalancingService with a fresh cache and fixed clock."""
    return RebalancingService(
        holding_repo=holding_repo,
        security_repo=security_repo,
        sleeve_repo=sleeve_repo,
        model_repo=model_repo,
        restriction_repo=restriction_repo,
        cache=TTLCache(ttl_seconds=3600),
        thresholds=HarvestThresholds(),
        clock=lambda: fixed_now,
    )


@pytest.fixture
def order_manager(order_repo, restriction_repo, scripted_broker, fixed_now) -> OrderLifecycleManager:
    """Provide test OrderLifecycleManager backed by the scripted broker."""
    return OrderLifecycleManager(
        order_repo=order_repo,
        broker=scripted_broker,
        restriction_repo=restriction_repo,
        clock=lambda: fixed_now,
    )


# =============================================================================
# FACTORY HELPERS (pure domain objects)
# =============================================================================


def make_position(
    ticker: str,
    qty: str,
    cost: str,
    opened_at: Optional[datetime] = None,
    account_id: str = "acct-1",
    account_type: AccountType = AccountType.TAXABLE,
    position_id: Optional[str] = None,
    sleeve_id: Optional[str] = None,
) -> Position:
    """Build a Position from string amounts."""
    return Position(
        position_id=position_id or f"{account_id}-{ticker.lower()}",
        account_id=account_id,
        ticker=ticker,
        qty=Decimal(qty),
        cost_basis_per_share=Decimal(cost),
        opened_at=opened_at or eastern_datetime(2024, 1, 2),
        account_type=account_type,
        sleeve_id=sleeve_id,
    )


def make_sleeve(
    sleeve_id: str,
    name: str,
    tickers: list[str],
    inactive: tuple[str, ...] = (),
    legacy: tuple[str, ...] = (),
) -> Sleeve:
    """Build a Sleeve ranking tickers in list order starting at 1."""
    return Sleeve(
        sleeve_id=sleeve_id,
        name=name,
        members=[
            SleeveMember(
                ticker=t,
                rank=i + 1,
                is_active=t not in inactive,
                is_legacy=t in legacy,
            )
            for i, t in enumerate(tickers)
        ],
    )


def make_restriction(
    ticker: str,
    sold_at: datetime,
    loss: str = "500",
    sleeve_id: Optional[str] = None,
    window_days: int = 31,
) -> RestrictedSecurity:
    """Build a wash-sale restriction starting at sold_at."""
    return RestrictedSecurity.from_sale(
        restriction_id=str(uuid.uuid4()),
        ticker=ticker,
        sleeve_id=sleeve_id,
        loss_amount=Decimal(loss),
        sold_at=sold_at,
        window_days=window_days,
    )


# =============================================================================
# FACTORY FIXTURES (persisted)
# =============================================================================


@pytest.fixture
def security_factory(security_repo) -> Callable[..., Security]:
    """Factory for persisting securities with prices."""

    def _create_security(ticker: str, price: Optional[str] = None, name: str = "") -> Security:
        return security_repo.upsert(
            Security(
                ticker=ticker,
                name=name or ticker,
                price=Decimal(price) if price is not None else None,
            )
        )

    return _create_security


@pytest.fixture
def account_factory(account_repo) -> Callable[..., Account]:
    """Factory for persisting accounts."""

    def _create_account(
        account_id: Optional[str] = None,
        name: Optional[str] = None,
        account_type: AccountType = AccountType.TAXABLE,
    ) -> Account:
        account_id = account_id or str(uuid.uuid4())
        return account_repo.create(
            Account(
                account_id=account_id,
                name=name or f"Account {account_id[:8]}",
                account_type=account_type,
            )
        )

    return _create_account


@pytest.fixture
def holding_factory(holding_repo) -> Callable[..., Position]:
    """Factory for persisting positions."""

    def _create_holding(
        account_id: str,
        ticker: str,
        qty: str,
        cost: str,
        opened_at: Optional[datetime] = None,
    ) -> Position:
        return holding_repo.create(
            make_position(
                ticker,
                qty,
                cost,
                opened_at=opened_at,
                account_id=account_id,
                position_id=str(uuid.uuid4()),
            )
        )

    return _create_holding


@pytest.fixture
def sleeve_factory(sleeve_repo) -> Callable[..., Sleeve]:
    """Factory for persisting sleeves (securities must already exist)."""

    def _create_sleeve(
        name: str,
        tickers: list[str],
        inactive: tuple[str, ...] = (),
        legacy: tuple[str, ...] = (),
    ) -> Sleeve:
        return sleeve_repo.create(
            make_sleeve(str(uuid.uuid4()), name, tickers, inactive=inactive, legacy=legacy)
        )

    return _create_sleeve


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def harvest_setup(
    security_factory,
    account_factory,
    holding_factory,
    sleeve_factory,
    fixed_now,
) -> dict:
    """
    One taxable account holding VTI at a loss, with VTI/ITOT/SCHB in a sleeve.

    VTI: 100 shares @ 250 cost, priced at 200 -> -5000 (-20%).
    """
    security_factory("VTI", "200.00")
    security_factory("ITOT", "100.00")
    security_factory("SCHB", "50.00")
    account = account_factory(account_id="acct-taxable", name="Taxable")
    position = holding_factory(
        account.account_id,
        "VTI",
        "100",
        "250.00",
        opened_at=fixed_now - timedelta(days=400),
    )
    sleeve = sleeve_factory("US Total Market", ["VTI", "ITOT", "SCHB"])
    return {"account": account, "position": position, "sleeve": sleeve}


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine) -> TestClient:
    """Provide FastAPI test client with test database and a fresh cache."""
    set_settings(Settings(database_url="sqlite:///:memory:"))
    reset_database()
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    cache = TTLCache(ttl_seconds=3600)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    reset_database()
    reset_settings()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(actual) - Decimal(expected))
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
