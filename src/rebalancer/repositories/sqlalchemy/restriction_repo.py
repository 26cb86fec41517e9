"""SQLAlchemy implementation of RestrictionRepository."""

from datetime import datetime

from sqlalchemy.orm import Session

from rebalancer.core.timezone import to_eastern
from rebalancer.domain.models import RestrictedSecurity
from rebalancer.repositories.sqlalchemy.orm_models import RestrictedSecurityORM


class SqlAlchemyRestrictionRepository:
    """SQLAlchemy-backed wash-sale restriction repository (append-only)."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, restriction: RestrictedSecurity) -> RestrictedSecurity:
        """Persist a new restriction."""
        orm_restriction = RestrictedSecurityORM(
            restriction_id=restriction.restriction_id,
            ticker=restriction.ticker,
            sleeve_id=restriction.sleeve_id,
            loss_amount=restriction.loss_amount,
            sold_at=to_eastern(restriction.sold_at),
            blocked_until=to_eastern(restriction.blocked_until),
        )
        self._db.add(orm_restriction)
        self._db.commit()
        self._db.refresh(orm_restriction)
        return self._to_domain(orm_restriction)

    def list_active(self, now: datetime) -> list[RestrictedSecurity]:
        """Restrictions with blocked_until > now."""
        # Stored wall-clock times are Eastern; compare against naive Eastern now
        cutoff = to_eastern(now).replace(tzinfo=None)
        orm_restrictions = self._db.query(RestrictedSecurityORM).filter(
            RestrictedSecurityORM.blocked_until > cutoff
        ).order_by(RestrictedSecurityORM.blocked_until).all()
        return [self._to_domain(r) for r in orm_restrictions]

    def list_all(self) -> list[RestrictedSecurity]:
        orm_restrictions = self._db.query(RestrictedSecurityORM).order_by(
            RestrictedSecurityORM.sold_at
        ).all()
        return [self._to_domain(r) for r in orm_restrictions]

    @staticmethod
    def _to_domain(orm: RestrictedSecurityORM) -> RestrictedSecurity:
        """Convert ORM model to domain model."""
        return RestrictedSecurity(
            restriction_id=orm.restriction_id,
            ticker=orm.ticker,
            sleeve_id=orm.sleeve_id,
            loss_amount=orm.loss_amount,
            sold_at=to_eastern(orm.sold_at),
            blocked_until=to_eastern(orm.blocked_until),
        )
