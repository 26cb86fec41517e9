"""SQLAlchemy implementation of SecurityRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from rebalancer.domain.models import Security
from rebalancer.repositories.sqlalchemy.orm_models import SecurityORM


class SqlAlchemySecurityRepository:
    """SQLAlchemy-backed security repository."""

    def __init__(self, db: Session):
        self._db = db

    def upsert(self, security: Security) -> Security:
        """Insert or update a security."""
        orm_security = self._db.get(SecurityORM, security.ticker)
        if orm_security is None:
            orm_security = SecurityORM(ticker=security.ticker)
            self._db.add(orm_security)
        orm_security.name = security.name
        orm_security.price = security.price
        orm_security.sector = security.sector
        orm_security.industry = security.industry
        orm_security.asset_type = security.asset_type
        self._db.commit()
        self._db.refresh(orm_security)
        return self._to_domain(orm_security)

    def get(self, ticker: str) -> Optional[Security]:
        """Retrieve security by ticker."""
        orm_security = self._db.get(SecurityORM, ticker.upper())
        return self._to_domain(orm_security) if orm_security else None

    def list_all(self) -> list[Security]:
        """List all securities ordered by ticker."""
        orm_securities = self._db.query(SecurityORM).order_by(SecurityORM.ticker).all()
        return [self._to_domain(s) for s in orm_securities]

    def existing_tickers(self, tickers: list[str]) -> set[str]:
        """Return the subset of tickers present in the table."""
        if not tickers:
            return set()
        upper = [t.upper() for t in tickers]
        rows = self._db.query(SecurityORM.ticker).filter(SecurityORM.ticker.in_(upper)).all()
        return {row[0] for row in rows}

    def get_prices(self, tickers: Optional[list[str]] = None) -> dict[str, Optional[Decimal]]:
        """Ticker -> price (None when no price is recorded)."""
        query = self._db.query(SecurityORM.ticker, SecurityORM.price)
        if tickers is not None:
            query = query.filter(SecurityORM.ticker.in_([t.upper() for t in tickers]))
        return {ticker: price for ticker, price in query.all()}

    @staticmethod
    def _to_domain(orm: SecurityORM) -> Security:
        """Convert ORM model to domain model."""
        return Security(
            ticker=orm.ticker,
            name=orm.name,
            price=orm.price,
            sector=orm.sector,
            industry=orm.industry,
            asset_type=orm.asset_type,
        )
