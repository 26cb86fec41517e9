"""SQLAlchemy repository implementations."""

from rebalancer.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    get_session,
    init_db,
    reset_database,
    Base,
)
from rebalancer.repositories.sqlalchemy.account_repo import (
    SqlAlchemyAccountRepository,
    SqlAlchemyHoldingRepository,
)
from rebalancer.repositories.sqlalchemy.security_repo import SqlAlchemySecurityRepository
from rebalancer.repositories.sqlalchemy.sleeve_repo import (
    SqlAlchemySleeveRepository,
    SqlAlchemyAllocationModelRepository,
)
from rebalancer.repositories.sqlalchemy.restriction_repo import SqlAlchemyRestrictionRepository
from rebalancer.repositories.sqlalchemy.order_repo import SqlAlchemyOrderRepository

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "get_session",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyHoldingRepository",
    "SqlAlchemySecurityRepository",
    "SqlAlchemySleeveRepository",
    "SqlAlchemyAllocationModelRepository",
    "SqlAlchemyRestrictionRepository",
    "SqlAlchemyOrderRepository",
]
