"""SQLAlchemy implementations of AccountRepository and HoldingRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from rebalancer.core.timezone import now_eastern, to_eastern
from rebalancer.domain.models import Account, Position
from rebalancer.repositories.sqlalchemy.orm_models import AccountORM, HoldingORM


class SqlAlchemyAccountRepository:
    """SQLAlchemy-backed account repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            account_id=account.account_id,
            name=account.name,
            account_type=account.account_type,
            created_at_est=account.created_at_est or now_eastern(),
        )
        self._db.add(orm_account)
        self._db.commit()
        self._db.refresh(orm_account)
        return self._to_domain(orm_account)

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID."""
        orm_account = self._db.query(AccountORM).filter(
            AccountORM.account_id == account_id
        ).first()
        return self._to_domain(orm_account) if orm_account else None

    def list_all(self) -> list[Account]:
        """List all accounts."""
        orm_accounts = self._db.query(AccountORM).order_by(AccountORM.name).all()
        return [self._to_domain(a) for a in orm_accounts]

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            account_id=orm.account_id,
            name=orm.name,
            account_type=orm.account_type,
            created_at_est=to_eastern(orm.created_at_est) if orm.created_at_est else None,
        )


class SqlAlchemyHoldingRepository:
    """SQLAlchemy-backed position snapshot repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, position: Position) -> Position:
        """Persist a new position."""
        orm_holding = HoldingORM(
            position_id=position.position_id,
            account_id=position.account_id,
            ticker=position.ticker,
            qty=position.qty,
            cost_basis_per_share=position.cost_basis_per_share,
            opened_at=to_eastern(position.opened_at),
            sleeve_id=position.sleeve_id,
        )
        self._db.add(orm_holding)
        self._db.commit()
        self._db.refresh(orm_holding)
        return self._to_domain(orm_holding)

    def list_positions(self, account_ids: Optional[list[str]] = None) -> list[Position]:
        """List positions ordered by account and ticker."""
        query = self._db.query(HoldingORM).join(AccountORM)
        if account_ids is not None:
            query = query.filter(HoldingORM.account_id.in_(account_ids))
        orm_holdings = query.order_by(HoldingORM.account_id, HoldingORM.ticker).all()
        return [self._to_domain(h) for h in orm_holdings]

    def delete(self, position_id: str) -> None:
        """Delete a position."""
        self._db.query(HoldingORM).filter(
            HoldingORM.position_id == position_id
        ).delete()
        self._db.commit()

    @staticmethod
    def _to_domain(orm: HoldingORM) -> Position:
        """Convert ORM model to domain model."""
        return Position(
            position_id=orm.position_id,
            account_id=orm.account_id,
            account_type=orm.account.account_type,
            ticker=orm.ticker,
            qty=orm.qty,
            cost_basis_per_share=orm.cost_basis_per_share,
            opened_at=to_eastern(orm.opened_at),
            sleeve_id=orm.sleeve_id,
        )
